"""
Resolution package: the classfile -> package table and package-information ids.
"""

from .facade import build_package_table, needs_jvm_probe, resolve_java_home
from .package_table import PackageTable
from .registry import PackageInformationRegistry

__all__ = [
    "build_package_table",
    "needs_jvm_probe",
    "resolve_java_home",
    "PackageTable",
    "PackageInformationRegistry",
]
