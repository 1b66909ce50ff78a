"""
Env command implementation.

Builds the process configuration, resolving (and if needed creating) the
primary cache directory, and prints it. Package manager caches are resolved
on request.
"""

import json
import logging

from privado_bootstrap.config.configuration import bootstrap_configuration
from privado_bootstrap.config.package_cache import PackageCacheResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the env command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)

    Raises:
        CacheResolutionError: If a requested package cache cannot be resolved
    """
    configuration = bootstrap_configuration()
    data = configuration.to_dict()

    if args.package_cache:
        resolver = PackageCacheResolver(configuration)
        data["package_caches"] = {
            name: str(resolver.resolve(name)) for name in args.package_cache
        }

    if args.json:
        print(json.dumps(data, indent=2))
        return 0

    for key, value in data.items():
        if key == "package_caches":
            for name, location in value.items():
                print(f"package_cache[{name}]: {location}")
        else:
            print(f"{key}: {value if value is not None else '(unavailable)'}")
    return 0
