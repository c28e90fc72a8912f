"""Credential store access and lookup.

Stores:
- WindowsCredentialStore: Windows Credential Manager via pywin32 (win32cred)
- InMemoryCredentialStore: in-process records with the same filter semantics

Example:
    >>> from credfetch.credentials import get_stored_credential
    >>> result = get_stored_credential("alice@example.com", target="www.example.com")
"""

from credfetch.exceptions import (
    BackendNotAvailableError,
    CredentialError,
    DependencyInstallError,
    InvalidQueryError,
    StoreAccessError,
)

from .backend import CredentialStore
from .bootstrap import MISSING_MODULE_MESSAGE, DependencyBootstrap
from .lookup import (
    NOT_FOUND_MESSAGE,
    CredentialLookup,
    create_default_store,
    dispatch_query,
    get_stored_credential,
    select_credential,
)
from .memory_backend import InMemoryCredentialStore
from .wincred_backend import WindowsCredentialStore

__all__ = [
    "CredentialStore",
    "WindowsCredentialStore",
    "InMemoryCredentialStore",
    "DependencyBootstrap",
    "CredentialLookup",
    "create_default_store",
    "dispatch_query",
    "select_credential",
    "get_stored_credential",
    "MISSING_MODULE_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "CredentialError",
    "InvalidQueryError",
    "BackendNotAvailableError",
    "DependencyInstallError",
    "StoreAccessError",
]
