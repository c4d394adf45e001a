"""Allow ``python -m fsearch``."""

from fsearch.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
