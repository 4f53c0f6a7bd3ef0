"""content-modeller CLI module entry point.

Enables running the CLI via: python -m content_modeller.cli
"""

from content_modeller.cli.main import cli

if __name__ == "__main__":
    cli()
