"""Windows Credential Manager store using pywin32's win32cred module.

Platform Support:
- Windows only. On other systems the bootstrap cannot load win32cred and
  every lookup fails before the store is queried.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from types import ModuleType
from typing import Any

from credfetch.enums import CredentialPersistence, CredentialType
from credfetch.exceptions import BackendNotAvailableError, StoreAccessError
from credfetch.models.credential import StoredCredential
from credfetch.models.result import Failure, Result, Success

from .bootstrap import DependencyBootstrap

logger = logging.getLogger(__name__)

# winerror.h
ERROR_NOT_FOUND = 1168


def decode_blob(blob: bytes | str | None) -> str:
    """Decode a CredentialBlob.

    Blobs written by Windows tools are UTF-16-LE; some applications store
    UTF-8 instead.
    """
    if not blob:
        return ""
    if isinstance(blob, str):
        return blob
    try:
        return blob.decode("utf-16-le")
    except UnicodeDecodeError:
        return blob.decode("utf-8", errors="replace")


def credential_from_native(raw: Mapping[str, Any]) -> StoredCredential:
    """Convert a CREDENTIAL dict returned by CredRead/CredEnumerate."""
    last_written = raw.get("LastWritten")
    attributes = {
        attr.get("Keyword", ""): attr.get("Value", b"") for attr in raw.get("Attributes") or () if attr.get("Keyword")
    }
    return StoredCredential(
        user_name=raw.get("UserName") or "",
        target_name=raw.get("TargetName") or "",
        credential_type=CredentialType.from_code(int(raw.get("Type", 0))),
        secret=decode_blob(raw.get("CredentialBlob")),
        comment=raw.get("Comment"),
        persistence=CredentialPersistence.from_code(int(raw.get("Persist", 0))),
        last_written=last_written if isinstance(last_written, datetime) else None,
        target_alias=raw.get("TargetAlias"),
        flags=int(raw.get("Flags", 0)),
        attributes=attributes,
    )


class WindowsCredentialStore:
    """Credential store backed by the Windows Credential Manager.

    The win32cred module is loaded lazily through a DependencyBootstrap, so
    constructing the store never touches the system.

    Example:
        >>> store = WindowsCredentialStore()
        >>> if store.prepare().ok:
        ...     creds = store.find_by_target("www.sampledomain.com")
    """

    def __init__(self, bootstrap: DependencyBootstrap | None = None) -> None:
        self.bootstrap = bootstrap or DependencyBootstrap()
        self._win32cred: ModuleType | None = None

    @property
    def name(self) -> str:
        return "wincred"

    def prepare(self) -> Result[None]:
        """Load win32cred through the bootstrap."""
        if self._win32cred is not None:
            return Success(None)

        loaded = self.bootstrap.load()
        if isinstance(loaded, Failure):
            return loaded

        self._win32cred = loaded.value
        return Success(None)

    def list_all(self) -> list[StoredCredential]:
        return self._enumerate(None)

    def find_by_target(self, target: str) -> list[StoredCredential]:
        # CredEnumerate treats a trailing '*' as a wildcard; keep exact matches only
        wanted = target.casefold()
        return [cred for cred in self._enumerate(target) if cred.target_name.casefold() == wanted]

    def find_by_type(self, credential_type: CredentialType) -> list[StoredCredential]:
        return [cred for cred in self._enumerate(None) if cred.credential_type is credential_type]

    def find_by_target_and_type(self, target: str, credential_type: CredentialType) -> list[StoredCredential]:
        win32cred = self._require_module()
        try:
            raw = win32cred.CredRead(target, credential_type.code, 0)
        except self._native_error() as e:
            if _winerror(e) == ERROR_NOT_FOUND:
                return []
            raise StoreAccessError(_describe(e), reference=target) from e

        logger.debug(f"Read credential from Credential Manager: {target} ({credential_type})")
        return [credential_from_native(raw)]

    def _enumerate(self, filter_: str | None) -> list[StoredCredential]:
        win32cred = self._require_module()
        try:
            records: Iterable[Mapping[str, Any]] = win32cred.CredEnumerate(filter_, 0) or ()
        except self._native_error() as e:
            if _winerror(e) == ERROR_NOT_FOUND:
                return []
            raise StoreAccessError(_describe(e), reference=filter_) from e

        credentials = [credential_from_native(raw) for raw in records]
        logger.debug(f"Enumerated {len(credentials)} credentials (filter: {filter_!r})")
        return credentials

    def _require_module(self) -> ModuleType:
        if self._win32cred is None:
            raise BackendNotAvailableError(
                "Windows Credential Manager store is not prepared",
                suggestion="Call prepare() before querying the store",
            )
        return self._win32cred

    def _native_error(self) -> type[BaseException]:
        # win32cred re-exports pywintypes.error
        return getattr(self._win32cred, "error", OSError)


def _winerror(error: BaseException) -> int | None:
    code = getattr(error, "winerror", None)
    if code is None and error.args and isinstance(error.args[0], int):
        code = error.args[0]
    return code


def _describe(error: BaseException) -> str:
    """Render a pywintypes.error as '<funcname>: <strerror>'."""
    strerror = getattr(error, "strerror", None)
    funcname = getattr(error, "funcname", None)
    if strerror and funcname:
        return f"{funcname}: {strerror}"
    return str(strerror or error)
