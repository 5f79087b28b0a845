"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gmusic_cli.exceptions import ConfigurationError
from gmusic_cli.models.config import ClientConfig

log = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "email": "",
    "password": "",
    "storage_directory": ".",
    "request_timeout": 60,
}


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ClientConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated ClientConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or validation
            fails.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'gmusic-cli init' first."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if self._migrate_if_needed():
            log.info(
                "[yellow]Configuration file was updated with new default values."
                "[/yellow]"
            )

        try:
            config_from_file = self.get_config_as_dict()
        except ValueError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}") from e

        if cli_options:
            config_from_file.update(cli_options)

        try:
            config_dir = self.config_file_path.parent
            return ClientConfig(**config_from_file, config_path=str(config_dir))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save; missing keys get defaults.
        """
        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {}

        for key in sorted(ClientConfig.get_ini_keys()):
            value = settings.get(key, DEFAULTS.get(key))
            if value is not None:
                config["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        return {
            "email": section.get("email", DEFAULTS["email"]),
            "password": section.get("password", DEFAULTS["password"]),
            "storage_directory": section.get(
                "storage_directory", DEFAULTS["storage_directory"]
            ),
            "request_timeout": section.getint(
                "request_timeout", DEFAULTS["request_timeout"]
            ),
        }

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        needs_saving = False
        config_section = self._parser["DEFAULT"]

        for key in sorted(ClientConfig.get_ini_keys()):
            if key not in config_section:
                config_section[key] = str(DEFAULTS[key])
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
