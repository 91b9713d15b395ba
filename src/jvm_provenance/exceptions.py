# Custom exceptions for jvm-provenance

class ProvenanceError(Exception):
    """Base exception for all application-specific errors."""
    pass

class ConfigError(ProvenanceError):
    """Raised for configuration-related problems."""
    pass

class ArchiveScanError(ProvenanceError, OSError):
    """Raised when a declared jar cannot be opened or enumerated."""
    def __init__(self, archive_path: str, message: str):
        self.archive_path = archive_path
        self.message = message
        super().__init__(f"Failed to scan archive {archive_path}: {message}")

class JvmProbeError(ProvenanceError):
    """Raised when the JVM property probe cannot be run or parsed."""
    def __init__(self, java_binary: str, message: str):
        self.java_binary = java_binary
        self.message = message
        super().__init__(f"Could not read properties from '{java_binary}': {message}")
