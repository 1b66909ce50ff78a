"""YAML settings for the install path.

The installer runs with built-in defaults; a YAML file passed with
``--config`` can override any of them, and CLI flags override the file.

Example file::

    base_url: https://mirror.example.com/privado/releases/download/latest/privado-
    install_root: /opt/privado
    use_system_checksum_tool: true
"""

import dataclasses
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.exceptions import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = (
    "https://github.com/Privado-Inc/privado/releases/download/latest/privado-"
)
DEFAULT_TOOL_NAME = "privado"
DEFAULT_SYSTEM_BIN_DIR = Path("/usr/local/bin")

_PATH_FIELDS = ("install_root", "system_bin_dir", "download_dir")


def _default_install_root() -> Path:
    return Path.home() / ".privado"


def _default_download_dir() -> Path:
    return Path(tempfile.gettempdir())


@dataclass
class InstallSettings:
    """Settings that drive a single install run."""

    base_url: str = DEFAULT_BASE_URL
    install_root: Path = field(default_factory=_default_install_root)
    system_bin_dir: Path = DEFAULT_SYSTEM_BIN_DIR
    download_dir: Path = field(default_factory=_default_download_dir)
    tool_name: str = DEFAULT_TOOL_NAME
    use_system_checksum_tool: bool = False
    timeout: int = 30
    max_retries: int = 3

    @property
    def bin_dir(self) -> Path:
        """Directory the release archive is extracted into."""
        return self.install_root / "bin"

    def merged(self, overrides: Dict[str, Any]) -> "InstallSettings":
        """
        Return a copy with non-None overrides applied.

        Raises:
            SettingsError: If an override names an unknown setting
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        _check_keys(values)
        return dataclasses.replace(self, **_coerce(values))


def _check_keys(values: Dict[str, Any]) -> None:
    known = {f.name for f in dataclasses.fields(InstallSettings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise SettingsError(
            f"Unknown install settings: {', '.join(unknown)}. "
            f"Known: {', '.join(sorted(known))}"
        )


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    coerced = dict(values)
    for name in _PATH_FIELDS:
        if name in coerced:
            coerced[name] = Path(coerced[name]).expanduser()
    for name in ("timeout", "max_retries"):
        if name in coerced:
            try:
                coerced[name] = int(coerced[name])
            except (TypeError, ValueError):
                raise SettingsError(
                    f"Setting '{name}' must be an integer, got {coerced[name]!r}"
                )
    if "use_system_checksum_tool" in coerced and not isinstance(
        coerced["use_system_checksum_tool"], bool
    ):
        raise SettingsError("Setting 'use_system_checksum_tool' must be true or false")
    return coerced


def load_install_settings(config_path: Optional[Path] = None) -> InstallSettings:
    """
    Load install settings, applying a YAML file on top of the defaults.

    Args:
        config_path: Optional YAML file; None means defaults only

    Returns:
        InstallSettings instance

    Raises:
        SettingsError: If the file is missing, invalid YAML, not a mapping,
            or contains unknown keys
    """
    settings = InstallSettings()
    if config_path is None:
        return settings

    if not config_path.exists():
        raise SettingsError(f"Settings file not found: {config_path}")

    logger.debug(f"Loading install settings from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Cannot read {config_path}: {e}") from e

    if data is None:
        return settings
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {config_path} must contain a mapping")

    return settings.merged(data)
