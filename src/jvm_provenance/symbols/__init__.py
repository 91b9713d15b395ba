"""
Symbol package: maps SemanticDB symbols to the classfile of their top-level owner.
"""

from .descriptor import (
    DescriptorKind,
    SymbolDescriptor,
    classfile_for_symbol,
    is_local,
    parse_descriptor,
    toplevel,
)

__all__ = [
    "DescriptorKind",
    "SymbolDescriptor",
    "classfile_for_symbol",
    "is_local",
    "parse_descriptor",
    "toplevel",
]
