# File: nestgen/generator.py
"""
nestgen - Generation Pipeline (Orchestrator)
=============================================

Connects every phase::

    Schema Reader → Model/Enum Extractor → Field Classifier
                  → Template Rendering → Export

``ResourceGenerator`` backs both the programmatic API and the CLI.

Workflow::

    1. Build a ``GenerationConfig`` (defaults ← config file ← overrides).
    2. Read and parse the schema file (parser.py).
    3. Select models: explicit names, else all (or the first only).
    4. Render every artifact per model (templates.py).
    5. Write the files (exporters.py).
    6. Return a ``GenerationReport``.

Error handling strategy:
    - Data-shape issues never reach this module; the parser drops or
      defaults them.
    - ``OSError`` from reading the schema or writing output is not caught:
      it aborts the whole run and propagates to the caller.
    - Invalid configuration raises ``ValueError``.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml
from pydantic import ValidationError

from nestgen.exporters import ExportManifest, ExportResult, ResourceExporter
from nestgen.models import GenerationConfig, ModelDefinition, SchemaDefinition
from nestgen.parser import load_schema
from nestgen.templates import TemplateGenerator
from nestgen.utils import Timer, read_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.generator")

_CONFIG_KEYS: tuple = ("config", "nestgen", "generation_config")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """Summary of one ``ResourceGenerator`` run."""

    schema_file: str = ""
    output_directory: str = ""
    dry_run: bool = False

    models_found: List[str] = field(default_factory=list)
    models_generated: List[str] = field(default_factory=list)
    models_missing: List[str] = field(default_factory=list)

    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    manifest: Optional[ExportManifest] = None

    @property
    def files(self) -> List[str]:
        if self.manifest is None:
            return []
        return [record.relative_path for record in self.manifest.files]

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        lines.append(f"{'='*60}")
        lines.append("  nestgen - Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Schema:           {self.schema_file}")
        lines.append(f"  Output:           {self.output_directory}")
        if self.dry_run:
            lines.append("  Mode:             dry-run (nothing written)")
        lines.append(f"  Models found:     {len(self.models_found)}")
        lines.append(f"  Models generated: {len(self.models_generated)}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")

        if self.step_metrics:
            lines.append(f"{'─'*60}")
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                lines.append(
                    f"    ✓ {step.step_name:<20s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        if self.models_generated:
            lines.append(f"{'─'*60}")
            lines.append(f"  Generated: {', '.join(self.models_generated)}")

        if self.models_missing:
            lines.append(f"{'─'*60}")
            lines.append(f"  Not in schema: {', '.join(self.models_missing)}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load a JSON object. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(read_file(path))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping. An empty file is an empty mapping."""
    try:
        data: Any = yaml.safe_load(read_file(path))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a config file (YAML or JSON) and return the raw settings mapping.

    Settings may sit at the top level or under ``config:`` / ``nestgen:``.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    config_path: Path = Path(path)
    suffix: str = config_path.suffix.lower()

    if suffix == ".json":
        raw: Dict[str, Any] = _load_json_file(config_path)
    else:
        # YAML is a superset of JSON, so anything else goes through PyYAML
        raw = _load_yaml_file(config_path)

    for key in _CONFIG_KEYS:
        if key in raw:
            nested: Any = raw[key]
            if not isinstance(nested, dict):
                raise ValueError(f"'{key}' in {config_path} must be a mapping.")
            return dict(nested)
    return raw


def build_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GenerationConfig:
    """
    Build a validated ``GenerationConfig``.

    Precedence (lowest first): defaults, *config_file*, *overrides*.

    Raises:
        FileNotFoundError: If *config_file* doesn't exist.
        ValueError: If the merged settings don't validate.
    """
    data: Dict[str, Any] = {}
    if config_file is not None:
        data.update(load_config_file(config_file))
        logger.info("Loaded config file %s (%d keys).", config_file, len(data))
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GenerationConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc


# ---------------------------------------------------------------------------
# ResourceGenerator - orchestrator
# ---------------------------------------------------------------------------


class ResourceGenerator:
    """
    Pipeline orchestrator.

    Usage::

        generator = ResourceGenerator(build_config(overrides={"output_dir": "src"}))

        # From the configured schema file
        report = generator.generate_from_file(model_names=["User"])

        # From an already-parsed schema
        report = generator.generate(schema, output_dir=Path("./out"))

        print(report.summary())

    The generator is reusable: create it once and call generate() many times.
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self._config: GenerationConfig = config or GenerationConfig()
        self._dry_run: bool = dry_run
        self._templates: TemplateGenerator = TemplateGenerator(self._config)

        logger.debug(
            "ResourceGenerator initialised: schema=%s, output=%s, dry_run=%s.",
            self._config.schema_path,
            self._config.output_dir,
            dry_run,
        )

    @property
    def config(self) -> GenerationConfig:
        return self._config

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        schema_path: Optional[Union[str, Path]] = None,
        output_dir: Optional[Union[str, Path]] = None,
        *,
        model_names: Optional[Sequence[str]] = None,
    ) -> GenerationReport:
        """
        Full pipeline: read schema → parse → render → export.

        Paths default to the config's ``schema_path`` / ``output_dir``.

        Raises:
            OSError: If the schema can't be read or output can't be written.
        """
        path: Path = Path(schema_path or self._config.schema_path)

        with Timer("parse_schema") as t_parse:
            schema: SchemaDefinition = load_schema(path)

        report: GenerationReport = GenerationReport()
        report.schema_file = str(path)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Parse Schema",
            elapsed_seconds=t_parse.elapsed,
            detail=f"{len(schema.models)} models, {len(schema.enums)} enums",
        ))

        return self._run_pipeline(
            schema,
            Path(output_dir or self._config.output_dir),
            model_names,
            report,
        )

    # -----------------------------------------------------------------
    # Public: generate from an in-memory schema
    # -----------------------------------------------------------------

    def generate(
        self,
        schema: SchemaDefinition,
        output_dir: Optional[Union[str, Path]] = None,
        *,
        model_names: Optional[Sequence[str]] = None,
    ) -> GenerationReport:
        report: GenerationReport = GenerationReport()
        report.schema_file = schema.source_file or "<memory>"
        return self._run_pipeline(
            schema,
            Path(output_dir or self._config.output_dir),
            model_names,
            report,
        )

    def render(
        self,
        schema: SchemaDefinition,
        *,
        model_names: Optional[Sequence[str]] = None,
    ) -> Dict[str, str]:
        """Render files for the selected models without touching the disk."""
        return self._templates.generate_all(self.select_models(schema, model_names))

    def select_models(
        self,
        schema: SchemaDefinition,
        model_names: Optional[Sequence[str]] = None,
    ) -> List[ModelDefinition]:
        return schema.select(model_names, first_only=self._config.first_model_only)

    # -----------------------------------------------------------------
    # Internal: pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        schema: SchemaDefinition,
        output_dir: Path,
        model_names: Optional[Sequence[str]],
        report: GenerationReport,
    ) -> GenerationReport:
        pipeline_start: float = time.perf_counter()

        report.output_directory = str(output_dir)
        report.dry_run = self._dry_run
        report.models_found = schema.model_names

        selected: List[ModelDefinition] = self.select_models(schema, model_names)
        report.models_generated = [m.name for m in selected]
        if model_names:
            report.models_missing = [
                n for n in dict.fromkeys(model_names) if schema.get_model(n) is None
            ]
            if report.models_missing:
                logger.warning(
                    "Requested model(s) not found in schema: %s",
                    ", ".join(report.models_missing),
                )

        with Timer("render") as t_render:
            generated_files: Dict[str, str] = self._templates.generate_all(selected)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Render",
            elapsed_seconds=t_render.elapsed,
            detail=f"{len(generated_files)} files for {len(selected)} models",
        ))

        exporter: ResourceExporter = ResourceExporter(
            self._config,
            output_dir,
            dry_run=self._dry_run,
        )
        with Timer("export") as t_export:
            export_result: ExportResult = exporter.export(generated_files)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Export",
            elapsed_seconds=t_export.elapsed,
            detail=f"{export_result.manifest.total_bytes:,} bytes",
        ))

        report.manifest = export_result.manifest
        report.total_files = export_result.manifest.total_files
        report.total_bytes = export_result.manifest.total_bytes
        report.total_lines = export_result.manifest.total_lines
        report.total_elapsed_seconds = time.perf_counter() - pipeline_start

        logger.info(
            "Generated %d file(s) for %d model(s) into %s.",
            report.total_files,
            len(selected),
            output_dir,
        )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ResourceGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "load_config_file",
    "build_config",
]

logger.debug("nestgen.generator loaded.")
