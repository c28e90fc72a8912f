"""Enumerations for Windows Credential Manager record classifications."""

from enum import Enum


class CredentialType(str, Enum):
    """Credential types known to the Windows Credential Manager.

    Values are the literal names accepted on the command line and in the
    Python API. ``code`` gives the matching ``CRED_TYPE_*`` constant from
    wincred.h.
    """

    GENERIC = "GENERIC"
    DOMAIN_PASSWORD = "DOMAIN_PASSWORD"
    DOMAIN_CERTIFICATE = "DOMAIN_CERTIFICATE"
    DOMAIN_VISIBLE_PASSWORD = "DOMAIN_VISIBLE_PASSWORD"
    GENERIC_CERTIFICATE = "GENERIC_CERTIFICATE"
    DOMAIN_EXTENDED = "DOMAIN_EXTENDED"
    MAXIMUM = "MAXIMUM"
    MAXIMUM_EX = "MAXIMUM_EX"

    def __str__(self) -> str:
        return self.value

    @property
    def code(self) -> int:
        """Native CRED_TYPE_* value."""
        return _TYPE_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "CredentialType | None":
        """Map a native CRED_TYPE_* value back to its literal.

        Returns:
            The matching type, or None for codes this enum does not name
        """
        for member, value in _TYPE_CODES.items():
            if value == code:
                return member
        return None

    @classmethod
    def parse(cls, value: "str | CredentialType") -> "CredentialType":
        """Parse a type literal case-insensitively.

        Raises:
            ValueError: If the literal is not one of the known types
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid credential type '{value}'. Expected one of: {allowed}") from None


_TYPE_CODES: dict[CredentialType, int] = {
    CredentialType.GENERIC: 1,
    CredentialType.DOMAIN_PASSWORD: 2,
    CredentialType.DOMAIN_CERTIFICATE: 3,
    CredentialType.DOMAIN_VISIBLE_PASSWORD: 4,
    CredentialType.GENERIC_CERTIFICATE: 5,
    CredentialType.DOMAIN_EXTENDED: 6,
    CredentialType.MAXIMUM: 7,
    CredentialType.MAXIMUM_EX: 7 + 1000,
}


class CredentialPersistence(str, Enum):
    """CRED_PERSIST_* scope of a stored credential."""

    SESSION = "SESSION"
    LOCAL_MACHINE = "LOCAL_MACHINE"
    ENTERPRISE = "ENTERPRISE"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: int) -> "CredentialPersistence | None":
        return {1: cls.SESSION, 2: cls.LOCAL_MACHINE, 3: cls.ENTERPRISE}.get(code)
