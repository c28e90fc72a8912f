"""Custom exception hierarchy for credfetch.

This module defines a structured exception hierarchy that enables
precise error handling and user-friendly error messages across the
lookup pipeline, the configuration layer and the command line.

Exception Hierarchy:
    CredfetchError (base)
    ├── ConfigurationError
    └── CredentialError
        ├── InvalidQueryError
        ├── BackendNotAvailableError
        ├── DependencyInstallError
        └── StoreAccessError

Example Usage:
    >>> from credfetch.exceptions import ConfigurationError
    >>> try:
    ...     load_config(path)
    ... except FileNotFoundError as e:
    ...     raise ConfigurationError(f"Config file not found: {path}") from e
"""


class CredfetchError(Exception):
    """Base exception for all credfetch errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(CredfetchError):
    """Configuration-related errors.

    Examples:
        - Configuration file not found
        - Invalid YAML syntax
        - Invalid configuration values
    """

    pass


class CredentialError(CredfetchError):
    """Credential-related errors.

    This is the base class for credential-specific errors. Subclasses:
    - InvalidQueryError: Query parameters failed validation
    - BackendNotAvailableError: Credential access library is unavailable
    - DependencyInstallError: Installing the access library failed
    - StoreAccessError: The credential store raised while being queried

    Attributes:
        message: Human-readable error description
        reference: The target or query that failed (e.g., "www.example.com")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The target or query that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class InvalidQueryError(CredentialError):
    """Lookup parameters are invalid (unknown type literal, empty user name)."""

    pass


class BackendNotAvailableError(CredentialError):
    """The credential access library cannot be loaded on this system."""

    pass


class DependencyInstallError(CredentialError):
    """Installing the credential access library failed."""

    pass


class StoreAccessError(CredentialError):
    """The credential store raised an error while being queried."""

    pass
