"""
privado-bootstrap CLI argument parser.

This module implements the command-line interface using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from privado_bootstrap.cli.utils import print_error
from privado_bootstrap.core.exceptions import PrivadoBootstrapError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("privado-bootstrap")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """privado-bootstrap command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="privado-bootstrap",
            description="Install the Privado CLI and resolve its local environment",
            epilog='Use "privado-bootstrap COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"privado-bootstrap {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to a YAML file with install settings",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_env_command(subparsers)
        self._add_doctor_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Download, verify and install the latest Privado CLI",
            description=(
                "Download the latest Privado CLI release for this platform, "
                "verify its checksum and put it on PATH"
            ),
        )
        parser.add_argument(
            "--os-type",
            metavar="TOKEN",
            help="OS token to use instead of the host's (e.g. linux-gnu, darwin, msys)",
        )
        parser.add_argument(
            "--machine",
            metavar="TOKEN",
            help="Machine token to use instead of the host's (x86_64, arm64)",
        )
        parser.add_argument(
            "--skip-preflight",
            action="store_true",
            help="Do not check that Docker is reachable",
        )
        parser.add_argument(
            "--system-checksum",
            action="store_true",
            default=None,
            help="Hash with the OS checksum tool (md5sum, md5, certutil)",
        )
        parser.add_argument(
            "--base-url",
            metavar="URL",
            help="Release download URL prefix",
        )
        parser.add_argument(
            "--install-root",
            type=Path,
            metavar="PATH",
            help="Install root (default: ~/.privado)",
        )

    def _add_env_command(self, subparsers):
        """Add 'env' subcommand."""
        parser = subparsers.add_parser(
            "env",
            help="Show resolved configuration and cache directories",
            description="Resolve the CLI configuration and cache directories",
        )
        parser.add_argument(
            "--package-cache",
            action="append",
            metavar="NAME",
            default=[],
            help="Resolve the cache directory of a package manager (m2, gradle)",
        )
        parser.add_argument(
            "--json", action="store_true", help="Print machine-readable JSON"
        )

    def _add_doctor_command(self, subparsers):
        """Add 'doctor' subcommand."""
        subparsers.add_parser(
            "doctor",
            help="Check the environment",
            description="Run preflight checks and platform detection",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except PrivadoBootstrapError as e:
            print_error(str(e), getattr(e, "remediation", None))
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return e.exit_code

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "privado_bootstrap.cli.commands.install",
            "env": "privado_bootstrap.cli.commands.env",
            "doctor": "privado_bootstrap.cli.commands.doctor",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
