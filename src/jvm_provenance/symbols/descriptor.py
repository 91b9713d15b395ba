"""
SemanticDB symbol descriptor parsing.

Global symbols are a chain of descriptors, each ending in a suffix that
encodes its kind:

    com/acme/            package
    com/acme/Widget#     type
    com/acme/Widget#id.  term
    ...Widget#run(+1).   method
    ...Widget#[T]        type parameter
    ...Widget#run().(x)  parameter

Local symbols (``local0``, ``local12``) never belong to a classfile.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Characters that terminate a descriptor; a plain name cannot contain them.
DESCRIPTOR_TERMINATORS = "/#.)]"

# Synthetic packages that do not contribute to the classfile path.
SYNTHETIC_PACKAGES = ("_root_/", "_empty_/")


class DescriptorKind(str, Enum):
    PACKAGE = "package"
    TYPE = "type"
    TERM = "term"
    METHOD = "method"
    TYPE_PARAMETER = "type_parameter"
    PARAMETER = "parameter"


@dataclass(frozen=True)
class SymbolDescriptor:
    """The last descriptor of a symbol together with the symbol that owns it."""
    owner: str
    kind: DescriptorKind
    name: str

    @property
    def classfile(self) -> str:
        owner = self.owner
        for synthetic in SYNTHETIC_PACKAGES:
            if owner.startswith(synthetic):
                owner = owner[len(synthetic):]
        return f"{owner}{self.name}.class"


def is_local(symbol: str) -> bool:
    return symbol.startswith("local")


def _split_name(body: str) -> Optional[Tuple[str, str]]:
    """Split ``<owner><name>`` into (owner, name), honoring backtick quoting."""
    if not body:
        return None
    if body.endswith("`"):
        start = body.rfind("`", 0, len(body) - 1)
        if start < 0:
            return None
        name = body[start + 1:-1]
        owner = body[:start]
    else:
        index = len(body)
        while index > 0 and body[index - 1] not in DESCRIPTOR_TERMINATORS:
            index -= 1
        name = body[index:]
        owner = body[:index]
    if not name:
        return None
    return owner, name


def _unquote(name: str) -> str:
    if len(name) >= 2 and name.startswith("`") and name.endswith("`"):
        return name[1:-1]
    return name


def _parse_enclosed(body: str, opening: str, kind: DescriptorKind) -> Optional[SymbolDescriptor]:
    start = body.rfind(opening)
    if start < 0:
        return None
    name = _unquote(body[start + 1:])
    if not name:
        return None
    return SymbolDescriptor(owner=body[:start], kind=kind, name=name)


def parse_descriptor(symbol: str) -> Optional[SymbolDescriptor]:
    """
    Parse the last descriptor of a global symbol.

    Returns None for empty, local or malformed symbols.
    """
    if not symbol or is_local(symbol):
        return None

    suffix = symbol[-1]
    body = symbol[:-1]

    if suffix == "]":
        return _parse_enclosed(body, "[", DescriptorKind.TYPE_PARAMETER)
    if suffix == ")":
        return _parse_enclosed(body, "(", DescriptorKind.PARAMETER)

    if suffix == "/":
        kind = DescriptorKind.PACKAGE
    elif suffix == "#":
        kind = DescriptorKind.TYPE
    elif suffix == ".":
        if body.endswith(")"):
            start = body.rfind("(")
            if start < 0:
                return None
            body = body[:start]
            kind = DescriptorKind.METHOD
        else:
            kind = DescriptorKind.TERM
    else:
        return None

    parts = _split_name(body)
    if parts is None:
        return None
    owner, name = parts
    return SymbolDescriptor(owner=owner, kind=kind, name=name)


def _is_package_owner(owner: str) -> bool:
    return owner == "" or owner.endswith("/")


def toplevel(symbol: str) -> Optional[SymbolDescriptor]:
    """
    Find the top-level type (or object) enclosing a symbol.

    Walks owners upward until a type or term owned directly by a package is
    found. Package symbols and anything that does not parse yield None.
    """
    current = parse_descriptor(symbol)
    while current is not None:
        if current.kind is DescriptorKind.PACKAGE:
            return None
        if _is_package_owner(current.owner):
            if current.kind in (DescriptorKind.TYPE, DescriptorKind.TERM):
                return current
            return None
        current = parse_descriptor(current.owner)
    return None


def classfile_for_symbol(symbol: str) -> Optional[str]:
    """Classfile key of the top-level type that declares ``symbol``, if any."""
    descriptor = toplevel(symbol)
    if descriptor is None:
        return None
    return descriptor.classfile
