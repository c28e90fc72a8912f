"""CLI commands for credential retrieval.

This module provides the ``credfetch credentials`` command group for looking
up credentials held by the Windows Credential Manager.

Commands:
    - get: Retrieve the credential for one user (secret masked by default)
    - list: List stored credentials passing the target/type filters
    - check: Check that the Credential Manager access library loads

Example:
    Retrieve a credential::

        $ credfetch credentials get stevejoseph@sampledomain.com --target www.sampledomain.com
        $ credfetch credentials get stevejoseph@sampledomain.com --any-type --json
        $ credfetch credentials check
"""

import json
import sys

import click

from credfetch.config.settings import LookupSettings
from credfetch.credentials import CredentialLookup, InvalidQueryError, create_default_store
from credfetch.enums import CredentialType
from credfetch.models.credential import CredentialQuery, StoredCredential
from credfetch.models.result import Failure
from credfetch.utils.logging_config import get_logger

log = get_logger(__name__)

TYPE_CHOICE = click.Choice([member.value for member in CredentialType], case_sensitive=False)


def _settings(ctx: click.Context) -> LookupSettings:
    obj = ctx.obj or {}
    return obj.get("settings") or LookupSettings()


def _lookup(ctx: click.Context) -> CredentialLookup:
    settings = _settings(ctx)
    return CredentialLookup(store=create_default_store(settings), settings=settings)


def _resolve_type(ctx: click.Context, credential_type: str | None, any_type: bool) -> CredentialType | None:
    """Turn --type/--any-type into the query's type filter."""
    if any_type and credential_type:
        raise click.UsageError("--type and --any-type are mutually exclusive")
    if any_type:
        return None
    if credential_type:
        return CredentialType.parse(credential_type)
    return _settings(ctx).default_type


def _echo_failure(failure: Failure, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(failure.to_dict(), indent=2))
        return
    click.echo(click.style(f"Status: {failure.status}", fg="red"), err=True)
    for error in failure.errors:
        click.echo(click.style(f"  {error}", fg="red"), err=True)


def _echo_credential(credential: StoredCredential, show_secret: bool) -> None:
    for field_name, value in credential.to_dict(include_secret=show_secret).items():
        if value is not None:
            click.echo(f"{field_name}: {value}")


@click.group(name="credentials")
def credentials_group():
    """Retrieve credentials from the Windows Credential Manager.

    Examples:

        # Credential for a user on a target (type defaults to GENERIC)
        credfetch credentials get alice@example.com --target www.example.com

        # Same user on any target and any type
        credfetch credentials get alice@example.com --any-type

        # Check that the access library is installed
        credfetch credentials check
    """
    pass


@credentials_group.command(name="get")
@click.argument("user_name")
@click.option("--target", default=None, help="Target name the credential applies to")
@click.option("--type", "credential_type", type=TYPE_CHOICE, default=None, help="Credential type filter")
@click.option("--any-type", is_flag=True, help="Do not filter on credential type")
@click.option("--show-secret", is_flag=True, help="Show the secret in clear text (default: masked)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def get_credential(
    ctx: click.Context,
    user_name: str,
    target: str | None,
    credential_type: str | None,
    any_type: bool,
    show_secret: bool,
    as_json: bool,
):
    """Retrieve the stored credential for USER_NAME.

    The user name is matched exactly, ignoring case. Exits with status 1
    when no credential is returned.

    Examples:

        credfetch credentials get stevejoseph@sampledomain.com --target www.sampledomain.com

        credfetch credentials get svc_backup --type DOMAIN_PASSWORD --json
    """
    try:
        query = CredentialQuery(
            user_name=user_name,
            target=target,
            credential_type=_resolve_type(ctx, credential_type, any_type),
        )
    except InvalidQueryError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)

    result = _lookup(ctx).retrieve(query)

    if isinstance(result, Failure):
        _echo_failure(result, as_json)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.value.to_dict(include_secret=show_secret), indent=2))
    else:
        _echo_credential(result.value, show_secret)
        if not show_secret:
            click.echo(click.style("Use --show-secret to display the secret", fg="yellow"))


@credentials_group.command(name="list")
@click.option("--target", default=None, help="Target name filter")
@click.option("--type", "credential_type", type=TYPE_CHOICE, default=None, help="Credential type filter")
@click.option("--json", "as_json", is_flag=True, help="Print the records as JSON")
@click.pass_context
def list_credentials(ctx: click.Context, target: str | None, credential_type: str | None, as_json: bool):
    """List stored credentials. Secrets are always masked.

    Without filters every credential visible to the current user is listed.
    """
    result = _lookup(ctx).enumerate(target=target, credential_type=credential_type)

    if isinstance(result, Failure):
        _echo_failure(result, as_json)
        sys.exit(1)

    records = [credential.to_dict() for credential in result.value]
    if as_json:
        click.echo(json.dumps(records, indent=2))
        return

    if not records:
        click.echo(click.style("No credentials found", fg="yellow"))
        return

    for credential in result.value:
        kind = str(credential.credential_type) if credential.credential_type else "UNKNOWN"
        click.echo(f"{credential.target_name}  {credential.user_name or '-'}  [{kind}]")
    click.echo(f"{len(records)} credential(s)")


@credentials_group.command(name="check")
@click.pass_context
def check_store(ctx: click.Context):
    """Check that the Credential Manager access library is available.

    Installs the library when it is missing and auto-install is enabled.
    """
    settings = _settings(ctx)
    store = create_default_store(settings)

    click.echo(f"Credential store ({store.name}): ", nl=False)
    prepared = store.prepare()
    if isinstance(prepared, Failure):
        click.echo(click.style("Not available", fg="red"))
        for error in prepared.errors:
            click.echo(f"  {error}")
        click.echo(f"  Install with: pip install {settings.package_name}")
        log.debug("store_check_failed", store=store.name, errors=list(prepared.errors))
        sys.exit(1)

    click.echo(click.style("Available", fg="green"))
