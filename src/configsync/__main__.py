"""Allow running configsync with ``python -m configsync``."""

from .cli import main

if __name__ == "__main__":
    main()
