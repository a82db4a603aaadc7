"""Module entrypoint for ``python -m blockvim``."""

from .cli import main


if __name__ == "__main__":
    main()
