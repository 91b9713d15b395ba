from .writer import LsifPackageWriter, PackageWriter, package_name

__all__ = ["LsifPackageWriter", "PackageWriter", "package_name"]
