"""Configuration for credfetch.

Type-safe settings built on pydantic-settings, loadable from environment
variables (``CREDFETCH_*``) and YAML files.

Example:
    >>> from credfetch.config import LookupSettings
    >>> settings = LookupSettings.from_yaml("credfetch.yaml")
    >>> settings.auto_install
    True
"""

from credfetch.config.settings import LookupSettings

__all__ = ["LookupSettings"]
