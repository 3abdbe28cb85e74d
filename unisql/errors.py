"""Exceptions raised by the package."""

from __future__ import annotations

__all__ = [
    "UsqlError",
    "NoSuchFileOrDirectoryError",
    "CannotIncludeDirectoriesError",
    "NoEditorDefinedError",
    "NoShellAvailableError",
    "UnterminatedQuotedStringError",
    "InvalidQuotedStringError",
    "InvalidIdentifierError",
    "InvalidValueError",
    "UnknownFieldError",
]


class UsqlError(Exception):
    """Base class for all errors raised by the package."""

    default_message = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class NoSuchFileOrDirectoryError(UsqlError, FileNotFoundError):
    """A referenced file does not exist."""

    default_message = "no such file or directory"


class CannotIncludeDirectoriesError(UsqlError, IsADirectoryError):
    """A directory was given where a file was expected."""

    default_message = "cannot include directories"


class NoEditorDefinedError(UsqlError):
    """No editor is configured and none could be found."""

    default_message = "no editor defined"


class NoShellAvailableError(UsqlError):
    """No shell is configured and none could be found."""

    default_message = "no shell available"


class UnterminatedQuotedStringError(UsqlError, ValueError):
    """A quoted string lacks its closing quote."""

    default_message = "unterminated quoted string"


class InvalidQuotedStringError(UsqlError, ValueError):
    """A quoted string contains an invalid escape or stray quote."""

    default_message = "invalid quoted string"


class InvalidIdentifierError(UsqlError, ValueError):
    """A variable or connection name is not a valid identifier."""

    default_message = "invalid identifier"


class InvalidValueError(UsqlError, ValueError):
    """A value is not acceptable for a named setting."""

    def __init__(self, value: str, name: str, expected: str | None = None) -> None:
        self.value = value
        self.name = name
        self.expected = expected
        if expected:
            message = f"unrecognized value {value!r} for {name!r}: {expected} expected"
        else:
            message = f"invalid value {value!r} for {name!r}"
        super().__init__(message)


class UnknownFieldError(UsqlError, KeyError):
    """A setting name is not known."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown option: {name}")

    def __str__(self) -> str:
        return str(self.args[0])