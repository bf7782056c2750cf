"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConfigError(DomainError):
    """Institution configuration is missing, malformed or unknown."""


class UsageError(DomainError):
    """Command arguments cannot be interpreted."""


class StoreError(DomainError):
    """The store could not be reset or initialized."""


class PersistenceError(DomainError):
    """A batch write failed and was rolled back."""


def unknown_institution(key: str) -> str:
    """Return message for an institution key missing from the maps file."""
    return f"Unknown institution key '{key}'. Check the institution maps file."


def category_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def uneven_arguments(count: int) -> str:
    """Return message for an argument list that cannot be paired."""
    if count == 0:
        return "No files given; expected <file> <institution-key> pairs"
    return f"Expected <file> <institution-key> pairs but got {count} arguments"
