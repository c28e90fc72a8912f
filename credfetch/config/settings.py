"""
Configuration system using Pydantic for type-safe settings management.

Settings come from, in increasing priority: field defaults, ``CREDFETCH_*``
environment variables and an optional YAML file passed to ``from_yaml``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credfetch.enums import CredentialType
from credfetch.exceptions import ConfigurationError


class LookupSettings(BaseSettings):
    """Lookup, bootstrap and logging settings.

    Example:
        >>> settings = LookupSettings.from_yaml("credfetch.yaml")
        >>> settings.default_type
        <CredentialType.GENERIC: 'GENERIC'>
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDFETCH_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    default_type: CredentialType = Field(
        default=CredentialType.GENERIC, description="Credential type used when no type is given"
    )
    auto_install: bool = Field(default=True, description="Install the access library when it is missing")
    module_name: str = Field(default="win32cred", description="Module providing Credential Manager access")
    package_name: str = Field(default="pywin32", description="Distribution installed when the module is missing")
    user_install: bool = Field(
        default=True, description="Install into the user site-packages (pip --user) when not in a virtualenv"
    )
    install_timeout: float = Field(default=300.0, gt=0, le=3600, description="Seconds allowed for the install")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log renderer")

    @field_validator("default_type", mode="before")
    @classmethod
    def parse_default_type(cls, value: object) -> object:
        """Accept type literals in any case."""
        if isinstance(value, str):
            return CredentialType.parse(value)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value

    @classmethod
    def from_yaml(cls, config_path: str) -> LookupSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            LookupSettings instance

        Raises:
            ConfigurationError: If config file is invalid or contains invalid fields
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        # An empty file means "all defaults"
        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines (starting with #) are preserved unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            stripped = line.lstrip()
            if stripped.startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
