"""In-process credential store.

Holds StoredCredential records in a list and applies the same filter
semantics as the Windows store. Suitable for tests and for embedding
callers that already hold credentials and want the lookup pipeline's
matching and result shaping.
"""

from collections.abc import Iterable

from credfetch.enums import CredentialType
from credfetch.models.credential import StoredCredential
from credfetch.models.result import Result, Success


class InMemoryCredentialStore:
    """Credential store over an in-memory list.

    Example:
        >>> store = InMemoryCredentialStore()
        >>> store.add(StoredCredential(user_name="alice", target_name="db01", secret="pw"))
        >>> store.find_by_target("DB01")[0].user_name
        'alice'
    """

    def __init__(self, credentials: Iterable[StoredCredential] = ()) -> None:
        self._credentials: list[StoredCredential] = list(credentials)

    @property
    def name(self) -> str:
        return "memory"

    def prepare(self) -> Result[None]:
        return Success(None)

    def add(self, credential: StoredCredential) -> None:
        self._credentials.append(credential)

    def list_all(self) -> list[StoredCredential]:
        return list(self._credentials)

    def find_by_target(self, target: str) -> list[StoredCredential]:
        wanted = target.casefold()
        return [cred for cred in self._credentials if cred.target_name.casefold() == wanted]

    def find_by_type(self, credential_type: CredentialType) -> list[StoredCredential]:
        return [cred for cred in self._credentials if cred.credential_type is credential_type]

    def find_by_target_and_type(self, target: str, credential_type: CredentialType) -> list[StoredCredential]:
        return [cred for cred in self.find_by_target(target) if cred.credential_type is credential_type]

    def __len__(self) -> int:
        return len(self._credentials)
