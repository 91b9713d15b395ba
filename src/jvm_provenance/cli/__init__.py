"""
CLI support: output mode and machine-aware printing.
"""

from .config import CLIConfig
from .output import echo, print_error, print_json, print_table

__all__ = ["CLIConfig", "echo", "print_error", "print_json", "print_table"]
