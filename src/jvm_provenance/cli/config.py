"""
CLI Configuration
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    # Machine mode (JSON output, no presentation)
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: Optional[bool]) -> None:
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Machine mode is the default. It is disabled by --human or by
        JVM_PROVENANCE_HUMAN_MODE.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        if os.getenv("JVM_PROVENANCE_HUMAN_MODE", "").lower() in ("1", "true", "yes"):
            return False
        return True
