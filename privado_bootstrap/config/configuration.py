"""
Process configuration for the Privado CLI.

``bootstrap_configuration()`` is called once at process start and its result
is passed to every component that needs it. All paths are derived from the
home directory at construction time; only ``cache_directory`` is filled in
afterwards, by the cache resolver.
"""

import logging
import os
import platform as host_platform
import sys
import tempfile
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Mapping, Optional

from ..core.exceptions import CacheResolutionError
from .cache import CacheResolver

logger = logging.getLogger(__name__)

# Environment variables
DEV_MODE_ENV = "PRIVADO_DEV"
IMAGE_TAG_ENV = "PRIVADO_TAG"
CI_USER_IDENTIFIER_ENV = "PRIVADO_CI_USER_ID"
DOCKER_ACCESS_KEY_ENV = "PRIVADO_DOCKER_ACCESS_KEY"

PRODUCTION_TELEMETRY_HOST = "cli.privado.ai"
DEVELOPER_TELEMETRY_HOST = "t.cli.privado.ai"
PRODUCTION_IMAGE_TAG = "latest"
DEVELOPER_IMAGE_TAG = "dev"
IMAGE_REPOSITORY = "public.ecr.aws/privado/privado"

CONFIG_DIR_NAME = ".privado"

_TRUE_STRINGS = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_STRINGS = ("0", "f", "F", "FALSE", "false", "False")

# Runtime arch spellings used in release file names
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """
    Parse a boolean the way the CLI's flag handling does.

    Returns:
        True or False for recognised spellings, None otherwise

    Example:
        >>> parse_bool("T"), parse_bool("false"), parse_bool("yes")
        (True, False, None)
    """
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    return None


def is_developer_mode(
    environ: Mapping[str, str], argv0: str, temp_dir: str
) -> bool:
    """
    Decide whether the CLI runs in developer mode.

    Developer mode is on when PRIVADO_DEV parses as true, or when the
    running executable lives under the system temp directory (a build run
    straight from a compiler cache rather than an installed release).
    """
    if parse_bool(environ.get(DEV_MODE_ENV)):
        return True
    if argv0 and os.path.abspath(argv0).startswith(temp_dir):
        logger.debug(f"Executable {argv0} is under {temp_dir}, using developer mode")
        return True
    return False


def runtime_platform_string() -> str:
    """Host platform in release file naming, e.g. 'linux-amd64'."""
    if sys.platform.startswith("linux"):
        os_name = "linux"
    elif sys.platform == "win32":
        os_name = "windows"
    else:
        os_name = sys.platform
    machine = host_platform.machine()
    arch = _ARCH_NAMES.get(machine.lower(), machine.lower())
    return f"{os_name}-{arch}"


@dataclass(frozen=True)
class ContainerConfiguration:
    """Paths inside the analysis container and the image to run."""

    image_url: str
    docker_access_key_env: str = DOCKER_ACCESS_KEY_ENV
    user_key_volume_dir: str = "/app/keys/user.key"
    docker_key_volume_dir: str = "/app/keys/docker.key"
    user_config_volume_dir: str = "/app/config/config.json"
    log_config_volume_dir: str = "/app/config/log4j2.xml"
    source_code_volume_dir: str = "/app/code"
    internal_rules_volume_dir: str = "/app/rules"
    external_rules_volume_dir: str = "/app/external-rules"
    m2_package_cache_volume_dir: str = "/root/.m2"
    gradle_package_cache_volume_dir: str = "/root/.gradle"
    core_bin_path: str = "/usr/local/bin/core"


@dataclass
class Configuration:
    """Configuration shared by every component of one CLI process."""

    home_directory: Optional[Path]
    configuration_directory: Optional[Path]
    user_configuration_file_path: Optional[Path]
    user_key_directory: Optional[Path]
    user_key_path: Optional[Path]
    developer_mode: bool
    image_tag: str
    telemetry_endpoint: str
    repository_release_filename: str
    container: ContainerConfiguration
    cache_directory: Optional[Path] = None
    ci_user_identifier_env_key: str = CI_USER_IDENTIFIER_ENV
    m2_cache_directory_name: str = ".m2"
    gradle_cache_directory_name: str = ".gradle"
    privacy_results_path_suffix: str = str(Path(CONFIG_DIR_NAME) / "privado.json")
    privacy_reports_directory_suffix: str = ""
    repository: str = "https://github.com/Privado-Inc/privado-cli"
    repository_name: str = "Privado-Inc/privado-cli"
    slowdown_time: timedelta = field(default=timedelta(milliseconds=600))

    def cache_resolver(self) -> CacheResolver:
        """Cache resolver rooted at this configuration's directory."""
        return CacheResolver(self.configuration_directory)

    def to_dict(self) -> dict:
        """Plain representation for display and JSON output."""

        def _s(value):
            return str(value) if value is not None else None

        return {
            "home_directory": _s(self.home_directory),
            "configuration_directory": _s(self.configuration_directory),
            "user_configuration_file_path": _s(self.user_configuration_file_path),
            "user_key_directory": _s(self.user_key_directory),
            "user_key_path": _s(self.user_key_path),
            "cache_directory": _s(self.cache_directory),
            "developer_mode": self.developer_mode,
            "image_tag": self.image_tag,
            "image_url": self.container.image_url,
            "telemetry_endpoint": self.telemetry_endpoint,
            "repository": self.repository,
            "repository_release_filename": self.repository_release_filename,
            "slowdown_ms": int(self.slowdown_time.total_seconds() * 1000),
        }


def _resolve_home() -> Optional[Path]:
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        logger.debug(f"Home directory unavailable: {e}")
        return None


def bootstrap_configuration(
    environ: Optional[Mapping[str, str]] = None,
    argv0: Optional[str] = None,
    temp_dir: Optional[str] = None,
    home: Optional[Path] = None,
    resolve_cache: bool = True,
) -> Configuration:
    """
    Build the process configuration.

    Home and cache directory resolution are best effort: failures leave the
    affected fields as None instead of aborting startup.

    Args:
        environ: Environment mapping (default: os.environ)
        argv0: Path of the running executable (default: sys.argv[0])
        temp_dir: System temp directory (default: tempfile.gettempdir())
        home: Home directory override (default: Path.home())
        resolve_cache: Resolve or create the cache directory before returning

    Returns:
        Configuration instance
    """
    environ = os.environ if environ is None else environ
    argv0 = sys.argv[0] if argv0 is None else argv0
    temp_dir = tempfile.gettempdir() if temp_dir is None else temp_dir
    home = _resolve_home() if home is None else home

    developer_mode = is_developer_mode(environ, argv0, temp_dir)
    if developer_mode:
        telemetry_host = DEVELOPER_TELEMETRY_HOST
        image_tag = environ.get(IMAGE_TAG_ENV) or DEVELOPER_IMAGE_TAG
    else:
        telemetry_host = PRODUCTION_TELEMETRY_HOST
        image_tag = PRODUCTION_IMAGE_TAG

    config_dir = home / CONFIG_DIR_NAME if home is not None else None

    configuration = Configuration(
        home_directory=home,
        configuration_directory=config_dir,
        user_configuration_file_path=config_dir / "config.json" if config_dir else None,
        user_key_directory=config_dir / "keys" if config_dir else None,
        user_key_path=config_dir / "keys" / "user.key" if config_dir else None,
        developer_mode=developer_mode,
        image_tag=image_tag,
        telemetry_endpoint=f"https://{telemetry_host}/api/event?version=2",
        repository_release_filename=f"privado-{runtime_platform_string()}.tar.gz",
        container=ContainerConfiguration(image_url=f"{IMAGE_REPOSITORY}:{image_tag}"),
    )

    if resolve_cache:
        try:
            configuration.cache_directory = configuration.cache_resolver().initialize()
        except CacheResolutionError as e:
            logger.debug(f"Cache directory not available yet: {e}")

    logger.debug(
        f"Configuration ready (developer_mode={developer_mode}, "
        f"cache={configuration.cache_directory})"
    )
    return configuration
