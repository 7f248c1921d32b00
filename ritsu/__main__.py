"""Run the Ritsu command-line interface with ``python -m ritsu``."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
