"""Tests for the credential lookup pipeline."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from credfetch.config.settings import LookupSettings
from credfetch.credentials import (
    MISSING_MODULE_MESSAGE,
    NOT_FOUND_MESSAGE,
    CredentialLookup,
    InMemoryCredentialStore,
    InvalidQueryError,
    StoreAccessError,
    WindowsCredentialStore,
    create_default_store,
    dispatch_query,
    get_stored_credential,
    select_credential,
)
from credfetch.enums import CredentialType
from credfetch.models.credential import CredentialQuery, StoredCredential
from credfetch.models.result import Failure, Success


@pytest.fixture
def spy_store():
    """Store mock recording which of the four lookups was called."""
    store = MagicMock()
    store.name = "spy"
    store.prepare.return_value = Success(None)
    for method in ("list_all", "find_by_target", "find_by_type", "find_by_target_and_type"):
        getattr(store, method).return_value = []
    return store


class TestDispatchQuery:
    """Each filter combination reaches its own store call."""

    def test_target_and_type(self, spy_store):
        dispatch_query(spy_store, CredentialQuery("u", "www.example.com", "GENERIC"))

        spy_store.find_by_target_and_type.assert_called_once_with("www.example.com", CredentialType.GENERIC)
        spy_store.find_by_target.assert_not_called()
        spy_store.find_by_type.assert_not_called()
        spy_store.list_all.assert_not_called()

    def test_target_only(self, spy_store):
        dispatch_query(spy_store, CredentialQuery("u", "www.example.com", None))

        spy_store.find_by_target.assert_called_once_with("www.example.com")
        spy_store.find_by_target_and_type.assert_not_called()
        spy_store.find_by_type.assert_not_called()
        spy_store.list_all.assert_not_called()

    def test_type_only(self, spy_store):
        dispatch_query(spy_store, CredentialQuery("u", None, "DOMAIN_PASSWORD"))

        spy_store.find_by_type.assert_called_once_with(CredentialType.DOMAIN_PASSWORD)
        spy_store.find_by_target_and_type.assert_not_called()
        spy_store.find_by_target.assert_not_called()
        spy_store.list_all.assert_not_called()

    def test_no_filters(self, spy_store):
        dispatch_query(spy_store, CredentialQuery("u", None, None))

        spy_store.list_all.assert_called_once_with()
        spy_store.find_by_target_and_type.assert_not_called()
        spy_store.find_by_target.assert_not_called()
        spy_store.find_by_type.assert_not_called()

    def test_empty_strings_mean_not_specified(self, spy_store):
        dispatch_query(spy_store, CredentialQuery("u", "", ""))

        spy_store.list_all.assert_called_once_with()

    def test_default_type_with_target_uses_both_filters(self, spy_store):
        dispatch_query(spy_store, CredentialQuery("u", "www.example.com"))

        spy_store.find_by_target_and_type.assert_called_once_with("www.example.com", CredentialType.GENERIC)


class TestSelectCredential:
    """Test username post-filtering."""

    def test_case_insensitive_match(self):
        stored = StoredCredential(user_name="Alpha@x.com", target_name="t")

        result = select_credential([stored], "alpha@X.COM")

        assert isinstance(result, Success)
        assert result.value is stored

    def test_first_match_wins(self):
        first = StoredCredential(user_name="alice", target_name="a", secret="1")
        second = StoredCredential(user_name="ALICE", target_name="b", secret="2")

        result = select_credential([first, second], "Alice")

        assert result.value is first

    @pytest.mark.parametrize("requested", ["alic", "alice*", "*", "alice "])
    def test_no_partial_or_wildcard_match(self, requested):
        result = select_credential([StoredCredential(user_name="alice", target_name="a")], requested)

        assert isinstance(result, Failure)
        assert result.errors == (NOT_FOUND_MESSAGE,)

    def test_empty_candidates(self):
        assert select_credential([], "alice") == Failure.of(NOT_FOUND_MESSAGE)


class TestCredentialLookup:
    """Test the full pipeline."""

    def test_sample_scenario_returns_record(self, sample_credential):
        store = InMemoryCredentialStore([sample_credential])

        result = get_stored_credential(
            "stevejoseph@sampledomain.com", "www.sampledomain.com", "GENERIC", store=store
        )

        assert isinstance(result, Success)
        assert result.value == sample_credential
        assert result.status == "Success"

    def test_sample_scenario_empty_store(self):
        result = get_stored_credential(
            "stevejoseph@sampledomain.com",
            "www.sampledomain.com",
            "GENERIC",
            store=InMemoryCredentialStore(),
        )

        assert isinstance(result, Failure)
        assert result.to_dict() == {"Status": "Failed", "ErrorLog": ["No credential exists for the given user."]}

    def test_username_match_ignores_case(self, populated_store):
        result = get_stored_credential("alpha@X.COM", "www.sampledomain.com", store=populated_store)

        assert result.value.user_name == "Alpha@x.com"

    def test_type_filter_narrows_candidates(self, populated_store):
        result = get_stored_credential(
            "stevejoseph@sampledomain.com", None, CredentialType.DOMAIN_PASSWORD, store=populated_store
        )

        assert result.value.target_name == "mail.sampledomain.com"

    def test_any_target_any_type_returns_first_match(self, populated_store):
        result = get_stored_credential("STEVEJOSEPH@sampledomain.com", None, None, store=populated_store)

        assert result.value.target_name == "www.sampledomain.com"

    def test_wrong_type_for_target_fails(self, populated_store):
        result = get_stored_credential("corp\\svc_backup", "fileserver01", "GENERIC", store=populated_store)

        assert isinstance(result, Failure)
        assert result.errors[-1] == NOT_FOUND_MESSAGE

    def test_invalid_type_rejected_before_store_access(self, spy_store):
        with pytest.raises(InvalidQueryError):
            get_stored_credential("alice", "www.example.com", "WEB_PASSWORD", store=spy_store)

        spy_store.prepare.assert_not_called()
        spy_store.find_by_target_and_type.assert_not_called()

    @pytest.mark.parametrize("credential_type", [1, b"GENERIC", object()], ids=["int", "bytes", "object"])
    def test_non_string_type_rejected_before_store_access(self, spy_store, credential_type):
        with pytest.raises(InvalidQueryError, match="Invalid credential type"):
            get_stored_credential("alice", "db01", credential_type, store=spy_store)

        spy_store.prepare.assert_not_called()
        spy_store.find_by_target.assert_not_called()

    def test_non_string_type_does_not_fall_back_to_target_lookup(self, populated_store):
        with pytest.raises(InvalidQueryError):
            get_stored_credential("corp\\svc_backup", "fileserver01", 2, store=populated_store)

    def test_missing_dependency_skips_store_query(self, spy_store):
        spy_store.prepare.return_value = Failure.of("pip failed", MISSING_MODULE_MESSAGE)

        result = get_stored_credential("alice", "www.example.com", store=spy_store)

        assert isinstance(result, Failure)
        assert MISSING_MODULE_MESSAGE in result.to_dict()["ErrorLog"]
        spy_store.find_by_target_and_type.assert_not_called()
        spy_store.find_by_target.assert_not_called()
        spy_store.find_by_type.assert_not_called()
        spy_store.list_all.assert_not_called()

    def test_store_error_reported_without_not_found(self, spy_store):
        spy_store.find_by_target.side_effect = StoreAccessError("CredEnumerate: Access is denied.")

        result = get_stored_credential("alice", "www.example.com", None, store=spy_store)

        assert result.errors == ("CredEnumerate: Access is denied.",)

    def test_unexpected_store_exception_is_captured(self, spy_store):
        spy_store.list_all.side_effect = RuntimeError("store exploded")

        result = get_stored_credential("alice", None, None, store=spy_store)

        assert isinstance(result, Failure)
        assert result.errors == ("store exploded",)

    def test_retrieve_with_windows_store(self, wincred_store, fake_win32cred, make_native_record):
        fake_win32cred.CredRead.side_effect = None
        fake_win32cred.CredRead.return_value = make_native_record(
            "stevejoseph@sampledomain.com", "www.sampledomain.com", password="P@ss"
        )

        result = CredentialLookup(store=wincred_store).retrieve(
            CredentialQuery("SteveJoseph@SampleDomain.com", "www.sampledomain.com")
        )

        assert result.value.secret == "P@ss"

    def test_enumerate_ignores_user(self, populated_store):
        result = CredentialLookup(store=populated_store).enumerate(target="www.sampledomain.com")

        assert [c.user_name for c in result.value] == ["stevejoseph@sampledomain.com", "Alpha@x.com"]

    def test_enumerate_reports_prepare_failure(self, spy_store):
        spy_store.prepare.return_value = Failure.of("missing")

        result = CredentialLookup(store=spy_store).enumerate()

        assert result == Failure.of("missing")


class TestCreateDefaultStore:
    """Test default store construction from settings."""

    def test_bootstrap_configured_from_settings(self):
        settings = LookupSettings(auto_install=False, package_name="pywin32==306", install_timeout=30)

        store = create_default_store(settings)

        assert isinstance(store, WindowsCredentialStore)
        assert store.bootstrap.auto_install is False
        assert store.bootstrap.package_name == "pywin32==306"
        assert store.bootstrap.install_timeout == 30

    @patch("credfetch.credentials.bootstrap.importlib.import_module")
    def test_lookup_without_store_uses_windows_store(self, mock_import):
        mock_import.side_effect = ImportError("No module named 'win32cred'")
        settings = LookupSettings(auto_install=False)

        result = get_stored_credential("alice", "www.example.com", settings=settings)

        assert isinstance(result, Failure)
        assert result.errors == ("No module named 'win32cred'", MISSING_MODULE_MESSAGE)

    def test_lookup_keeps_injected_store(self):
        store = Mock()

        assert CredentialLookup(store=store).store is store
