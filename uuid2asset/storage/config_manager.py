"""
Manages loading and validation of the optional INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from uuid2asset.exceptions import ConfigurationError
from uuid2asset.models.config import FetchConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """
    Handles the application's INI config file.

    The file is optional: it only supplies defaults, and every key can be
    overridden from the command line.
    """

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, cli_options: dict[str, Any]) -> FetchConfig:
        """
        Loads defaults from the INI file (if present), applies CLI overrides,
        and validates the result.

        Args:
            cli_options: Options provided via the command line. Must include
                `server_url`.

        Returns:
            A validated FetchConfig object.

        Raises:
            ConfigurationError: If the config file is invalid or validation fails.
        """
        config_data = self.read_file_settings()
        config_data.update(cli_options)

        try:
            return FetchConfig(
                **config_data, config_path=str(self.config_file_path.parent)
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the keys present in the 'DEFAULT' section into a dictionary."""
        section = self._parser["DEFAULT"]
        readers = {
            "max_workers": section.getint,
            "progress_interval": section.getint,
            "timeout": section.getfloat,
            "retry_delay": section.getfloat,
            "output_dir": section.get,
        }
        config = {key: read(key) for key, read in readers.items() if key in section}

        if "max_attempts" in section:
            raw = section.get("max_attempts", "").strip().lower()
            config["max_attempts"] = (
                None if raw in ("", "0", "none", "unlimited") else int(raw)
            )
        if "extensions" in section:
            config["extensions"] = [
                e.strip() for e in section.get("extensions", "").split(",") if e.strip()
            ]

        unknown = set(section) - FetchConfig.get_ini_keys()
        for key in sorted(unknown):
            log.warning(f"[yellow]Ignoring unknown config key '{key}'.[/yellow]")
        return config

    def read_file_settings(self) -> dict[str, Any]:
        """Returns the settings present in the INI file, or an empty dict if absent."""
        if not self.config_file_path.is_file():
            return {}
        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
            settings = self._get_config_as_dict()
        except (configparser.Error, ValueError) as e:
            raise ConfigurationError(
                f"Error parsing configuration file '{self.config_file_path}': {e}"
            ) from e

        log.debug(f"Loaded defaults from {self.config_file_path}")
        return settings
