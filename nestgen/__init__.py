# File: nestgen/__init__.py
"""
nestgen - NestJS Resource Generator
====================================

Reads a Prisma-style data-model schema and writes, per model, validated
create/update/search DTOs, an entity, a Prisma-backed service, a REST
controller and a module for a NestJS application.

Architecture overview::

    ┌──────────────┐     ┌───────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ ResourceGenerator │────▶│ TemplateGenerator│
    │   (cli.py)   │     │  (generator.py)   │     │  (templates.py)  │
    └──────────────┘     └─────────┬─────────┘     └──────────────────┘
                                   │
                      ┌────────────┼────────────┐
                      ▼            ▼            ▼
               ┌──────────┐ ┌───────────┐ ┌───────────┐
               │  parser  │ │  models   │ │ exporters │
               │  (.py)   │ │  (.py)    │ │  (.py)    │
               └──────────┘ └───────────┘ └───────────┘

Usage::

    # As a library
    from nestgen import ResourceGenerator, build_config
    gen = ResourceGenerator(build_config(overrides={"output_dir": "src"}))
    gen.generate_from_file("prisma/schema.prisma", model_names=["User"])

    # From the command line
    nestgen User -s prisma/schema.prisma -o src -v
    nestgen-scaffold resource user

Public API:
    - ResourceGenerator  - Master orchestrator
    - GenerationConfig   - Generation settings model
    - SchemaDefinition   - Parsed schema model
    - TemplateGenerator  - TypeScript artifact renderer
    - ResourceExporter   - File-system writer
    - scaffold_resource  - Placeholder-template scaffolder
"""

from __future__ import annotations

__version__: str = "0.2.0"
__author__: str = "nestgen contributors"
__license__: str = "MIT"

from nestgen.models import (
    EnumDefinition,
    FieldInfo,
    GenerationConfig,
    ModelDefinition,
    SchemaDefinition,
)
from nestgen.parser import classify_field, load_schema, parse_schema
from nestgen.utils import (
    Timer,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    write_file,
)
from nestgen.templates import TemplateGenerator
from nestgen.exporters import ExportManifest, ExportResult, ResourceExporter
from nestgen.generator import (
    GenerationReport,
    ResourceGenerator,
    build_config,
    load_config_file,
)
from nestgen.scaffold import scaffold_resource

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Core orchestrator
    "ResourceGenerator",
    "GenerationReport",
    "build_config",
    "load_config_file",
    # Models
    "EnumDefinition",
    "FieldInfo",
    "GenerationConfig",
    "ModelDefinition",
    "SchemaDefinition",
    # Parsing
    "classify_field",
    "load_schema",
    "parse_schema",
    # Templates
    "TemplateGenerator",
    # Exporters
    "ResourceExporter",
    "ExportManifest",
    "ExportResult",
    # Scaffolding
    "scaffold_resource",
    # Utilities
    "Timer",
    "to_camel_case",
    "to_kebab_case",
    "to_pascal_case",
    "to_plural",
    "write_file",
]
