"""Entry point for running the blog CLI with `python -m blog`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
