# File: nestgen/__main__.py
"""
nestgen - Module entry point.

Allows running the generator directly via::

    python -m nestgen User -s prisma/schema.prisma -o src
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from nestgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
