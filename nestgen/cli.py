# File: nestgen/cli.py
"""
nestgen - Command-Line Interface
=================================

CLI built on the standard-library ``argparse`` module.

Usage examples::

    # Every model in the default schema (prisma/schema.prisma)
    nestgen

    # Only some models, into a custom folder
    nestgen User Post -s prisma/schema.prisma -o src

    # Reproduce the "first model only" behaviour
    nestgen --first-only

    # Settings from a file, no swagger decorators, preview only
    nestgen -c nestgen.yaml --no-swagger --dry-run -v

Exit codes:
    0 - success
    3 - file-system failure while writing output
    4 - input failure (schema/config unreadable, invalid config)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``nestgen`` logger.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("nestgen")
    root_logger.setLevel(level)

    # Repeated cli_main() calls in one process must not stack handlers
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


def _resolve_verbosity(args: argparse.Namespace) -> int:
    if args.quiet:
        logging.disable(logging.CRITICAL)
        return -1
    logging.disable(logging.NOTSET)
    return args.verbose


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from nestgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="nestgen",
        description=(
            "nestgen - NestJS resource generator.\n\n"
            "Reads a Prisma-style schema and writes validated DTOs, an entity, "
            "a service, a controller and a module for each model."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s\n"
            "  %(prog)s User Post -o src\n"
            "  %(prog)s --first-only -s prisma/schema.prisma\n"
            "  %(prog)s -c nestgen.yaml --dry-run -v\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"nestgen v{__version__}",
    )

    parser.add_argument(
        "models",
        nargs="*",
        metavar="MODEL",
        help="Model names to generate (exact match). Default: all models.",
    )

    # --- Input / output ---
    io_group = parser.add_argument_group("input / output")
    io_group.add_argument(
        "-s", "--schema",
        type=str,
        default=None,
        metavar="PATH",
        help="Schema file (default: prisma/schema.prisma).",
    )
    io_group.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Output root directory (default: generated).",
    )
    io_group.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="CONFIG",
        help="YAML or JSON file with generation settings.",
    )

    # --- Config overrides ---
    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--first-only",
        action="store_true",
        default=False,
        help="Without MODEL arguments, generate only the first model.",
    )
    config_group.add_argument(
        "--exclude",
        nargs="+",
        default=None,
        metavar="FIELD",
        help="Field names left out of create-DTOs (replaces the default list).",
    )
    config_group.add_argument(
        "--no-swagger",
        action="store_true",
        default=False,
        help="Don't emit @nestjs/swagger decorators.",
    )
    config_group.add_argument(
        "--no-guards",
        action="store_true",
        default=False,
        help="Don't guard controllers with the auth guard.",
    )
    config_group.add_argument(
        "--no-common",
        action="store_true",
        default=False,
        help="Don't emit common/dto/base-query.dto.",
    )
    config_group.add_argument(
        "--extension",
        type=str,
        default=None,
        metavar="EXT",
        help="Extension of generated files (default: ts).",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render everything but don't write files to disk.",
    )
    mode_group.add_argument(
        "--manifest",
        action="store_true",
        default=False,
        help="Write nestgen-manifest.json with file checksums.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except the exit code.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map CLI arguments onto ``GenerationConfig`` field names."""
    overrides: Dict[str, Any] = {}

    if args.schema is not None:
        overrides["schema_path"] = args.schema
    if args.output is not None:
        overrides["output_dir"] = args.output
    if args.extension is not None:
        overrides["file_extension"] = args.extension
    if args.exclude is not None:
        overrides["excluded_fields"] = args.exclude

    # Flags only override when set, so a config file value survives otherwise
    if args.first_only:
        overrides["first_model_only"] = True
    if args.no_swagger:
        overrides["enable_swagger"] = False
    if args.no_guards:
        overrides["enable_guards"] = False
    if args.no_common:
        overrides["generate_common"] = False
    if args.manifest:
        overrides["write_manifest"] = True

    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(args: argparse.Namespace) -> int:
    """Run the pipeline and return the exit code."""
    from nestgen.generator import GenerationReport, ResourceGenerator, build_config
    from nestgen.models import GenerationConfig

    try:
        config: GenerationConfig = build_config(
            args.config, _build_config_overrides(args)
        )
    except (OSError, ValueError) as exc:
        logger.error("Failed to load configuration: %s", exc)
        return EXIT_INPUT_ERROR

    schema_path: Path = Path(config.schema_path)
    if not schema_path.is_file():
        logger.error("Schema file not found: %s", schema_path)
        return EXIT_INPUT_ERROR

    logger.info("Schema:  %s", schema_path.resolve())
    logger.info("Output:  %s", Path(config.output_dir).resolve())
    if args.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    generator: ResourceGenerator = ResourceGenerator(config, dry_run=args.dry_run)

    try:
        report: GenerationReport = generator.generate_from_file(
            model_names=args.models or None,
        )
    except OSError as exc:
        # The schema was checked above, so a failure here is on the write side
        # unless the file vanished or became unreadable in between.
        if exc.filename is not None and Path(exc.filename) == schema_path:
            logger.error("Failed to read schema: %s", exc)
            return EXIT_INPUT_ERROR
        logger.error("Failed to write output: %s", exc)
        return EXIT_EXPORT_ERROR
    except ValueError as exc:
        # UnicodeDecodeError from a schema that isn't UTF-8
        logger.error("Failed to read schema %s: %s", schema_path, exc)
        return EXIT_INPUT_ERROR

    if not args.quiet:
        print(report.summary())

    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    _setup_logging(_resolve_verbosity(args))

    exit_code: int = _run_generation(args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Resources generated successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


def main() -> None:
    """Console-script entry point."""
    cli_main()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("nestgen.cli loaded.")
