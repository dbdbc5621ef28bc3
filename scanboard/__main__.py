"""Entry point for running the scanboard CLI with ``python -m scanboard``."""

from .cli import main

if __name__ == "__main__":
    main()
