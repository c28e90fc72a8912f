"""CLI commands for credfetch.

The CLI is built using Click with the main entry point ``credfetch``.

Key Commands:
    credentials (credfetch.cli.credentials):
        Command group for retrieving credentials from the Windows
        Credential Manager (get, list, check).

Usage Examples:
    Retrieve a credential::

        $ credfetch credentials get alice@example.com --target www.example.com

    Check the access library::

        $ credfetch credentials check
"""

from credfetch.cli.credentials import credentials_group

__all__ = ["credentials_group"]
