"""Allow ``python -m dyntable``."""

from dyntable.cli import app

if __name__ == "__main__":
    app()
