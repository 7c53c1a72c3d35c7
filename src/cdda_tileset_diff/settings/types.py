"""
Configuration type definitions and exceptions for cdda_tileset_diff.
"""

from dataclasses import dataclass
from typing import List


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be accessed."""
    pass


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
