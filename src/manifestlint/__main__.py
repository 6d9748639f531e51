"""Allow ``python -m manifestlint`` to behave like the CLI entry point."""

from manifestlint.cli import cli

if __name__ == "__main__":  # pragma: no cover
    cli()
