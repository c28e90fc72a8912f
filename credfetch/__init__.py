"""credfetch: retrieve stored credentials from the Windows Credential Manager."""

from credfetch.credentials import CredentialLookup, get_stored_credential
from credfetch.enums import CredentialType
from credfetch.models import CredentialQuery, Failure, StoredCredential, Success

__version__ = "0.1.0"

__all__ = [
    "get_stored_credential",
    "CredentialLookup",
    "CredentialQuery",
    "CredentialType",
    "StoredCredential",
    "Success",
    "Failure",
]
