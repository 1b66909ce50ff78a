"""
Entry point for running privado-bootstrap as a module.

Usage: python -m privado_bootstrap [command] [options]
"""

from privado_bootstrap.cli.parser import main

if __name__ == "__main__":
    main()
