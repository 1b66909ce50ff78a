"""
Entry point for running the privado-bootstrap CLI as a module.

Usage: python -m privado_bootstrap.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
