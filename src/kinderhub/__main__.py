"""Main entry point for the kinderhub CLI.

Usage:
    python -m kinderhub --help
"""

from kinderhub.cli import main

if __name__ == "__main__":
    main()
