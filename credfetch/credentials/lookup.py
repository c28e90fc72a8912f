"""Credential lookup pipeline.

A lookup runs four steps and stops at the first failure:

1. prepare the store (loads win32cred, installing pywin32 if needed)
2. dispatch to one of four store queries based on the filters supplied
3. select the first record whose user name matches exactly, ignoring case
4. return Success(credential) or Failure(errors)
"""

from collections.abc import Sequence

import structlog

from credfetch.config.settings import LookupSettings
from credfetch.enums import CredentialType
from credfetch.exceptions import CredentialError
from credfetch.models.credential import CredentialQuery, StoredCredential
from credfetch.models.result import Failure, Result, Success

from .backend import CredentialStore
from .bootstrap import DependencyBootstrap
from .wincred_backend import WindowsCredentialStore

log = structlog.get_logger(__name__)

NOT_FOUND_MESSAGE = "No credential exists for the given user."


def dispatch_query(store: CredentialStore, query: CredentialQuery) -> list[StoredCredential]:
    """Run the store query matching the filters present on ``query``.

    Raises:
        StoreAccessError: If the store fails
    """
    if query.has_target and query.has_type:
        return store.find_by_target_and_type(query.target, query.credential_type)
    if query.has_target:
        return store.find_by_target(query.target)
    if query.has_type:
        return store.find_by_type(query.credential_type)
    return store.list_all()


def select_credential(candidates: Sequence[StoredCredential], user_name: str) -> Result[StoredCredential]:
    """Pick the first candidate whose user name equals ``user_name`` ignoring case."""
    for candidate in candidates:
        if candidate.matches_user(user_name):
            return Success(candidate)
    return Failure.of(NOT_FOUND_MESSAGE)


def create_default_store(settings: LookupSettings | None = None) -> WindowsCredentialStore:
    """Build the Windows store with a bootstrap configured from settings."""
    settings = settings or LookupSettings()
    bootstrap = DependencyBootstrap(
        module_name=settings.module_name,
        package_name=settings.package_name,
        auto_install=settings.auto_install,
        user_install=settings.user_install,
        install_timeout=settings.install_timeout,
    )
    return WindowsCredentialStore(bootstrap=bootstrap)


class CredentialLookup:
    """Retrieve a single stored credential.

    Example:
        >>> lookup = CredentialLookup()
        >>> result = lookup.retrieve(CredentialQuery("stevejoseph@sampledomain.com", "www.sampledomain.com"))
        >>> if isinstance(result, Failure):
        ...     print(result.to_dict())
    """

    def __init__(self, store: CredentialStore | None = None, settings: LookupSettings | None = None) -> None:
        self.settings = settings or LookupSettings()
        self.store: CredentialStore = store if store is not None else create_default_store(self.settings)

    def retrieve(self, query: CredentialQuery) -> Result[StoredCredential]:
        """Run the lookup pipeline for ``query``.

        Bootstrap and store failures never raise; they come back as Failure.
        """
        bound = log.bind(store=self.store.name, **query.describe())
        bound.debug("credential_lookup_started")

        prepared = self.store.prepare()
        if isinstance(prepared, Failure):
            bound.warning("credential_store_unavailable", errors=list(prepared.errors))
            return prepared

        candidates = self.candidates(query)
        if isinstance(candidates, Failure):
            return candidates

        selected = select_credential(candidates.value, query.user_name)
        if isinstance(selected, Failure):
            bound.info("credential_not_found", candidates=len(candidates.value))
        else:
            bound.info("credential_found", target_name=selected.value.target_name)
        return selected

    def candidates(self, query: CredentialQuery) -> Result[list[StoredCredential]]:
        """Dispatch ``query`` to the store, converting store errors to Failure.

        The store must already be prepared.
        """
        try:
            return Success(dispatch_query(self.store, query))
        except CredentialError as e:
            log.error("credential_store_query_failed", store=self.store.name, error=e.message)
            return Failure.of(e.message)
        except Exception as e:
            # Stores without their own error wrapping
            log.error("credential_store_query_failed", store=self.store.name, error=str(e), exc_info=True)
            return Failure.of(str(e))

    def enumerate(
        self,
        target: str | None = None,
        credential_type: CredentialType | str | None = None,
    ) -> Result[list[StoredCredential]]:
        """List every stored credential passing the filters, regardless of user."""
        prepared = self.store.prepare()
        if isinstance(prepared, Failure):
            return prepared
        # user_name is not used for matching here; dispatch only reads the filters
        query = CredentialQuery(user_name="*", target=target, credential_type=credential_type)
        return self.candidates(query)


def get_stored_credential(
    user_name: str,
    target: str | None = None,
    credential_type: CredentialType | str | None = CredentialType.GENERIC,
    *,
    store: CredentialStore | None = None,
    settings: LookupSettings | None = None,
) -> Result[StoredCredential]:
    """Retrieve the stored credential for ``user_name``.

    Args:
        user_name: Credential owner, matched exactly and case-insensitively
        target: Target name filter; None for no target filter
        credential_type: Type filter; None for no type filter
        store: Store to query (defaults to the Windows Credential Manager)
        settings: Settings used to build the default store

    Returns:
        Success with the first matching credential, or Failure with the
        ordered error messages

    Raises:
        InvalidQueryError: If user_name is empty or credential_type is not a known literal

    Example:
        >>> result = get_stored_credential(
        ...     "stevejoseph@sampledomain.com", "www.sampledomain.com", "GENERIC"
        ... )
        >>> result.status
        'Success'
    """
    query = CredentialQuery(user_name=user_name, target=target, credential_type=credential_type)
    return CredentialLookup(store=store, settings=settings).retrieve(query)
