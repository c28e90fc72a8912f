"""Data models for credential lookups and their results."""

from credfetch.models.credential import CredentialQuery, StoredCredential
from credfetch.models.result import Failure, Result, Success

__all__ = [
    "CredentialQuery",
    "StoredCredential",
    "Success",
    "Failure",
    "Result",
]
