"""Abstract store protocol for credential lookups."""

from typing import Protocol

from credfetch.enums import CredentialType
from credfetch.models.credential import StoredCredential
from credfetch.models.result import Result


class CredentialStore(Protocol):
    """Protocol defining the interface for credential stores.

    A store exposes four lookup overloads, one per combination of the
    optional target and type filters. All stores must implement these
    methods to be usable by CredentialLookup.
    """

    @property
    def name(self) -> str:
        """Store identifier (e.g., 'wincred', 'memory')."""
        ...

    def prepare(self) -> Result[None]:
        """Make sure the store can be queried.

        Returns:
            Success(None) when ready, otherwise Failure with the reasons
        """
        ...

    def list_all(self) -> list[StoredCredential]:
        """Return every credential visible to the current user.

        Raises:
            StoreAccessError: If the store cannot be read
        """
        ...

    def find_by_target(self, target: str) -> list[StoredCredential]:
        """Return credentials whose target name equals ``target``.

        Raises:
            StoreAccessError: If the store cannot be read
        """
        ...

    def find_by_type(self, credential_type: CredentialType) -> list[StoredCredential]:
        """Return credentials of the given type.

        Raises:
            StoreAccessError: If the store cannot be read
        """
        ...

    def find_by_target_and_type(self, target: str, credential_type: CredentialType) -> list[StoredCredential]:
        """Return credentials matching both target name and type.

        Raises:
            StoreAccessError: If the store cannot be read
        """
        ...
