# File: nestgen/scaffold.py
"""
nestgen - Resource Scaffolder
==============================

``nestgen-scaffold resource <name>`` copies a fixed set of template files
into ``<output>/<name>/``. ``__NAME__`` becomes the raw name (paths and
routes), ``__CLASS__`` its PascalCase form and ``__VAR__`` its camelCase
form (variable names). No schema is involved.

The default templates ship inside the package (``resource_templates/``);
``-t`` points at another directory with the same layout. Every template is
read before anything is written, so a missing template aborts the command
with nothing on disk.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence, Tuple, Union

from nestgen.utils import read_file, to_camel_case, to_pascal_case, write_file

logger: logging.Logger = logging.getLogger("nestgen.scaffold")

NAME_PLACEHOLDER: str = "__NAME__"
CLASS_PLACEHOLDER: str = "__CLASS__"
VAR_PLACEHOLDER: str = "__VAR__"

DEFAULT_TEMPLATES_DIR: Path = Path(__file__).resolve().parent / "resource_templates"

# (template file, target path pattern relative to the resource folder)
RESOURCE_FILES: Tuple[Tuple[str, str], ...] = (
    ("module.template", "{name}.module.ts"),
    ("controller.template", "{name}.controller.ts"),
    ("service.template", "{name}.service.ts"),
    ("dto/create-dto.template", "dto/create-{name}.dto.ts"),
    ("dto/update-dto.template", "dto/update-{name}.dto.ts"),
)


@dataclass(frozen=True, slots=True)
class ScaffoldResult:
    """Files written by one ``scaffold_resource`` call."""

    name: str
    resource_dir: str
    files: List[str] = field(default_factory=list)


def render_template(text: str, name: str) -> str:
    """Replace every placeholder occurrence in *text*."""
    return (
        text.replace(NAME_PLACEHOLDER, name)
        .replace(CLASS_PLACEHOLDER, to_pascal_case(name))
        .replace(VAR_PLACEHOLDER, to_camel_case(name))
    )


def scaffold_resource(
    name: str,
    output_dir: Union[str, Path] = "src",
    templates_dir: Optional[Union[str, Path]] = None,
) -> ScaffoldResult:
    """
    Write the resource files for *name*.

    Existing files at the target paths are overwritten.

    Raises:
        ValueError: If *name* is empty.
        FileNotFoundError: If a template is missing.
        OSError: On any other read or write failure.
    """
    if not name or not name.strip():
        raise ValueError("Resource name must not be empty.")
    name = name.strip()

    source_dir: Path = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
    resource_dir: Path = Path(output_dir) / name

    rendered: Dict[str, str] = {}
    for template_name, target_pattern in RESOURCE_FILES:
        template_text: str = read_file(source_dir / template_name)
        rendered[target_pattern.format(name=name)] = render_template(template_text, name)

    written: List[str] = []
    for rel_path, content in rendered.items():
        write_file(resource_dir / rel_path, content)
        written.append(rel_path)
        logger.debug("Wrote %s", resource_dir / rel_path)

    logger.info("Resource %s scaffolded into %s.", name, resource_dir)
    return ScaffoldResult(name=name, resource_dir=str(resource_dir), files=written)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    from nestgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="nestgen-scaffold",
        description="Scaffold an empty NestJS resource from templates.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"nestgen v{__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resource = subparsers.add_parser("resource", help="Generate a new resource.")
    resource.add_argument("name", help="Resource name, e.g. 'user'.")
    resource.add_argument(
        "-o", "--output",
        default="src",
        metavar="DIR",
        help="Parent directory of the resource folder (default: src).",
    )
    resource.add_argument(
        "-t", "--templates",
        default=None,
        metavar="TEMPLATES_DIR",
        help="Directory holding the template files (default: built-in).",
    )
    resource.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    return parser


def scaffold_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Entry point for ``nestgen-scaffold``. Exits 0 on success, 4 on failure."""
    from nestgen.cli import EXIT_INPUT_ERROR, EXIT_SUCCESS, _setup_logging

    args: argparse.Namespace = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        result: ScaffoldResult = scaffold_resource(
            args.name, args.output, args.templates
        )
    except (OSError, ValueError) as exc:
        logger.error("Failed to scaffold resource %s: %s", args.name, exc)
        sys.exit(EXIT_INPUT_ERROR)

    print(f"Resource {result.name} generated successfully.")
    sys.exit(EXIT_SUCCESS)


def main() -> None:
    """Console-script entry point."""
    scaffold_main()


__all__: List[str] = [
    "NAME_PLACEHOLDER",
    "CLASS_PLACEHOLDER",
    "VAR_PLACEHOLDER",
    "DEFAULT_TEMPLATES_DIR",
    "RESOURCE_FILES",
    "ScaffoldResult",
    "render_template",
    "scaffold_resource",
    "scaffold_main",
    "main",
]
