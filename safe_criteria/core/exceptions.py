"""
Custom exceptions for Safe Criteria.

All exceptions inherit from SafeCriteriaError for easy catching.
"""

from safe_criteria.core.constants import E_CONFIGURATION, E_UNDEFINED_WHERE


class SafeCriteriaError(Exception):
    """Base exception for all Safe Criteria errors."""

    code: str = "E_SAFE_CRITERIA"


class ConfigurationError(SafeCriteriaError):
    """Raised when configuration is invalid or missing."""

    code = E_CONFIGURATION

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        value: object = None,
    ):
        super().__init__(message)
        self.setting = setting
        self.value = value

    def __str__(self) -> str:
        parts = [self.args[0]]
        if self.setting:
            parts.append(f"setting={self.setting}")
        if self.value is not None:
            parts.append(f"value={self.value!r}")
        return " | ".join(parts)


class UndefinedWhereError(SafeCriteriaError):
    """
    Raised when criteria would match every record.

    Always raised before the wrapped operation runs. This is a programming
    error in the caller, not a transient fault: fix the criteria or pass the
    bypass directive explicitly.
    """

    code = E_UNDEFINED_WHERE

    def __init__(
        self,
        message: str,
        entity: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.entity = entity
        self.operation = operation

    @property
    def message(self) -> str:
        """Human-readable message without context suffix."""
        return self.args[0]

    def __str__(self) -> str:
        parts = [self.args[0]]
        if self.entity:
            parts.append(f"entity={self.entity}")
        if self.operation:
            parts.append(f"operation={self.operation}")
        return " | ".join(parts)
