"""Pytest configuration and shared fixtures."""

import logging
import types
from datetime import datetime
from unittest.mock import Mock

import pytest
import structlog

from credfetch.credentials import InMemoryCredentialStore, WindowsCredentialStore
from credfetch.enums import CredentialPersistence, CredentialType
from credfetch.models.credential import StoredCredential
from credfetch.models.result import Success

ERROR_NOT_FOUND = 1168


class FakeWin32Error(Exception):
    """Stand-in for pywintypes.error: args are (winerror, funcname, strerror)."""

    def __init__(self, winerror: int, funcname: str, strerror: str) -> None:
        super().__init__(winerror, funcname, strerror)
        self.winerror = winerror
        self.funcname = funcname
        self.strerror = strerror


def native_record(
    user_name: str,
    target_name: str,
    type_code: int = 1,
    password: str = "s3cret!",
    **extra,
) -> dict:
    """CREDENTIAL dict shaped like win32cred.CredRead/CredEnumerate output."""
    record = {
        "Flags": 0,
        "Type": type_code,
        "TargetName": target_name,
        "Comment": None,
        "LastWritten": datetime(2024, 5, 1, 12, 30),
        "CredentialBlob": password.encode("utf-16-le"),
        "Persist": 2,
        "Attributes": (),
        "TargetAlias": None,
        "UserName": user_name,
    }
    record.update(extra)
    return record


@pytest.fixture(autouse=True)
def quiet_structlog():
    """Keep structlog output out of captured stdout."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def fake_win32cred():
    """Module object exposing the win32cred calls the store uses."""
    module = types.ModuleType("win32cred")
    module.error = FakeWin32Error
    module.CredEnumerate = Mock(return_value=())
    module.CredRead = Mock(side_effect=FakeWin32Error(ERROR_NOT_FOUND, "CredRead", "Element not found."))
    return module


@pytest.fixture
def wincred_store(fake_win32cred) -> WindowsCredentialStore:
    """WindowsCredentialStore whose bootstrap hands out the fake module."""
    bootstrap = Mock()
    bootstrap.load.return_value = Success(fake_win32cred)
    store = WindowsCredentialStore(bootstrap=bootstrap)
    assert store.prepare().ok
    return store


@pytest.fixture
def sample_credential() -> StoredCredential:
    """Generic credential for the sample web target."""
    return StoredCredential(
        user_name="stevejoseph@sampledomain.com",
        target_name="www.sampledomain.com",
        credential_type=CredentialType.GENERIC,
        secret="P@ssw0rd-2024",
        comment="Sample web login",
        persistence=CredentialPersistence.LOCAL_MACHINE,
    )


@pytest.fixture
def populated_store(sample_credential) -> InMemoryCredentialStore:
    """In-memory store with credentials spread across targets and types."""
    return InMemoryCredentialStore(
        [
            sample_credential,
            StoredCredential(
                user_name="Alpha@x.com",
                target_name="www.sampledomain.com",
                credential_type=CredentialType.GENERIC,
                secret="alpha-pass",
            ),
            StoredCredential(
                user_name="CORP\\svc_backup",
                target_name="fileserver01",
                credential_type=CredentialType.DOMAIN_PASSWORD,
                secret="backup-pass",
            ),
            StoredCredential(
                user_name="stevejoseph@sampledomain.com",
                target_name="mail.sampledomain.com",
                credential_type=CredentialType.DOMAIN_PASSWORD,
                secret="mail-pass",
            ),
        ]
    )


@pytest.fixture
def make_native_record():
    """Factory for native CREDENTIAL dicts."""
    return native_record


@pytest.fixture
def win32_error():
    """Exception class raised by the fake win32cred module."""
    return FakeWin32Error
