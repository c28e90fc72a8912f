"""
Domain models for credential lookups.

This module contains the data classes flowing through the lookup pipeline:
the validated query a caller submits and the stored credential records a
credential store hands back.

Example:
    Building a query::

        query = CredentialQuery(
            user_name="stevejoseph@sampledomain.com",
            target="www.sampledomain.com",
            credential_type="generic",
        )
        assert query.credential_type is CredentialType.GENERIC
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from credfetch.enums import CredentialPersistence, CredentialType
from credfetch.exceptions import InvalidQueryError


@dataclass(frozen=True)
class CredentialQuery:
    """Validated lookup request.

    ``None`` marks a filter as not specified. Empty strings are normalised to
    ``None`` because the Windows store cannot hold an empty target name, and
    type literals are parsed case-insensitively.

    Attributes:
        user_name: Credential owner to match, case-insensitively and exactly
        target: Store target name filter, or None for no target filter
        credential_type: Type filter, or None for no type filter

    Raises:
        InvalidQueryError: If user_name is empty or the type literal is unknown
    """

    user_name: str
    target: str | None = None
    credential_type: CredentialType | str | None = CredentialType.GENERIC

    def __post_init__(self) -> None:
        if not self.user_name or not self.user_name.strip():
            raise InvalidQueryError("User name is required")

        if self.target is not None and not self.target.strip():
            object.__setattr__(self, "target", None)

        credential_type = self.credential_type
        if isinstance(credential_type, str) and not isinstance(credential_type, CredentialType):
            if not credential_type.strip():
                credential_type = None
            else:
                try:
                    credential_type = CredentialType.parse(credential_type)
                except ValueError as e:
                    raise InvalidQueryError(str(e), reference=self.credential_type) from e
        elif credential_type is not None and not isinstance(credential_type, CredentialType):
            allowed = ", ".join(member.value for member in CredentialType)
            raise InvalidQueryError(
                f"Invalid credential type {credential_type!r}. Expected one of: {allowed}",
                reference=type(credential_type).__name__,
            )
        object.__setattr__(self, "credential_type", credential_type)

    @property
    def has_target(self) -> bool:
        return self.target is not None

    @property
    def has_type(self) -> bool:
        return self.credential_type is not None

    def describe(self) -> dict[str, Any]:
        """Structured log fields for this query."""
        return {
            "user_name": self.user_name,
            "target": self.target,
            "credential_type": str(self.credential_type) if self.credential_type else None,
        }


@dataclass(frozen=True)
class StoredCredential:
    """A credential record as returned by a credential store.

    Only ``user_name`` takes part in matching; every other field is passed
    through untouched from the store.

    Attributes:
        user_name: Account name stored with the credential
        target_name: Store target the credential applies to
        credential_type: Type of the record, None for codes outside the known set
        secret: Decoded credential blob (excluded from repr)
        comment: Free-text comment stored with the record
        persistence: CRED_PERSIST_* scope, when the store reports one
        last_written: Last modification time, when the store reports one
        target_alias: Alias for the target name
        flags: Raw CRED_FLAGS_* value
        attributes: Application-defined attributes keyed by keyword
    """

    user_name: str
    target_name: str
    credential_type: CredentialType | None = CredentialType.GENERIC
    secret: str = field(default="", repr=False)
    comment: str | None = None
    persistence: CredentialPersistence | None = None
    last_written: datetime | None = None
    target_alias: str | None = None
    flags: int = 0
    attributes: dict[str, bytes] = field(default_factory=dict, repr=False)

    def matches_user(self, user_name: str) -> bool:
        """Exact, case-insensitive user name comparison."""
        return (self.user_name or "").casefold() == user_name.casefold()

    @property
    def masked_secret(self) -> str:
        if len(self.secret) > 8:
            return self.secret[:2] + "*" * (len(self.secret) - 4) + self.secret[-2:]
        return "*" * len(self.secret)

    def to_dict(self, include_secret: bool = False) -> dict[str, Any]:
        """Render the record with the store's native field names.

        Args:
            include_secret: Emit the secret in clear text instead of masked
        """
        return {
            "UserName": self.user_name,
            "TargetName": self.target_name,
            "Type": str(self.credential_type) if self.credential_type else None,
            "Password": self.secret if include_secret else self.masked_secret,
            "Comment": self.comment,
            "Persist": str(self.persistence) if self.persistence else None,
            "LastWritten": self.last_written.isoformat() if self.last_written else None,
            "TargetAlias": self.target_alias,
        }
