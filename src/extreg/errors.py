"""Error hierarchy for the extreg plugin loader."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ExtregError",
    "ConfigError",
    "ConfigNotFoundError",
    "ArchiveLoadError",
    "RegistrationError",
    "ErrorCodes",
]


class ErrorCodes:
    """All extreg error codes as constants."""

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    ARCHIVE_LOAD_ERROR = "ARCHIVE_LOAD_ERROR"
    REGISTRATION_ERROR = "REGISTRATION_ERROR"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")


class ExtregError(Exception):
    """Base error for all extreg errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(ExtregError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.CONFIG_NOT_FOUND,
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(ExtregError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code=ErrorCodes.CONFIG_INVALID, message=message, **kwargs)


class ArchiveLoadError(ExtregError):
    """Raised when a plugin archive or one of its modules cannot be loaded."""

    def __init__(self, archive: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.ARCHIVE_LOAD_ERROR,
            message=f"Failed to load plugin archive '{archive}': {reason}",
            details={"archive": archive, "reason": reason},
            **kwargs,
        )

    @property
    def archive(self) -> str:
        """Path of the archive that failed."""
        return self.details["archive"]


class RegistrationError(ExtregError):
    """Raised when an extension function cannot be registered with the host."""

    def __init__(self, type_name: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.REGISTRATION_ERROR,
            message=f"Failed to register extension function '{type_name}': {reason}",
            details={"type_name": type_name, "reason": reason},
            **kwargs,
        )

    @property
    def type_name(self) -> str:
        """Qualified name of the class that failed to register."""
        return self.details["type_name"]

