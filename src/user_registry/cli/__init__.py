"""Main CLI application module."""

from .commands import app


def main() -> None:
    """Main entry point for the CLI."""
    app()


__all__ = ["app", "main"]


if __name__ == "__main__":
    main()
