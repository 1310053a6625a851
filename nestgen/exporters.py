# File: nestgen/exporters.py
"""
nestgen - Resource Exporter (File-System Writer)
=================================================

Responsible for:
    1. Creating per-model output folders (created if absent, reused otherwise).
    2. Writing every generated file, replacing whatever is at the same path.
    3. Optionally writing a checksum manifest for reproducibility checks.

File-system errors are not caught here: a failed write aborts the export and
propagates to the caller. Files written before the failure stay on disk.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from nestgen.models import GenerationConfig
from nestgen.utils import Timer, count_lines, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.exporters")

MANIFEST_FILENAME: str = "nestgen-manifest.json"


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    relative_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """
    Manifest of all exported files.

    Holds relative paths and checksums only, so the serialised manifest is
    identical across runs over an unchanged schema.
    """

    generator_version: str = ""
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    files: List[FileRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generator_version": self.generator_version,
            "total_files": self.total_files,
            "total_bytes": self.total_bytes,
            "total_lines": self.total_lines,
            "files": [
                {
                    "relative_path": f.relative_path,
                    "size_bytes": f.size_bytes,
                    "line_count": f.line_count,
                    "sha256": f.sha256,
                }
                for f in self.files
            ],
        }

    def to_json(self, indent_size: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False) + "\n"


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Result returned by ``ResourceExporter.export()``."""

    manifest: ExportManifest
    output_directory: str
    dry_run: bool
    elapsed_seconds: float
    written: Tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# ResourceExporter class
# ---------------------------------------------------------------------------


class ResourceExporter:
    """
    Writes generated files under one output root.

    Usage::

        exporter = ResourceExporter(config, output_dir=Path("./src/generated"))
        result = exporter.export(generated_files)
        print(result.manifest.to_json())

    Not thread-safe; two exporters on the same tree race with
    last-write-wins.
    """

    def __init__(
        self,
        config: GenerationConfig,
        output_dir: Path,
        *,
        atomic_writes: bool = True,
        dry_run: bool = False,
    ) -> None:
        self._config: GenerationConfig = config
        self._output_dir: Path = Path(output_dir)
        self._atomic_writes: bool = atomic_writes
        self._dry_run: bool = dry_run
        self._file_records: List[FileRecord] = []

        logger.debug(
            "ResourceExporter initialised: output_dir=%s, atomic=%s, dry_run=%s.",
            self._output_dir,
            self._atomic_writes,
            self._dry_run,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(self, generated_files: Dict[str, str]) -> ExportResult:
        """
        Write *generated_files* (``relative_path → content``) to disk.

        Raises:
            OSError: On any directory creation or write failure.
        """
        self._file_records = []
        written: List[str] = []

        with Timer("export") as timer:
            for rel_path in sorted(generated_files):
                content: str = generated_files[rel_path]
                self._file_records.append(self._record(rel_path, content))
                if self._dry_run:
                    logger.info("[dry-run] Would write %s", rel_path)
                    continue
                write_file(
                    self._output_dir / rel_path,
                    content,
                    atomic=self._atomic_writes,
                )
                written.append(rel_path)

            manifest: ExportManifest = self._build_manifest()
            if self._config.write_manifest and not self._dry_run:
                write_file(
                    self._output_dir / MANIFEST_FILENAME,
                    manifest.to_json(),
                    atomic=self._atomic_writes,
                )
                logger.debug("Wrote manifest to %s.", self._output_dir / MANIFEST_FILENAME)

        logger.info(
            "Export %s: %d files, %d bytes, %.3fs.",
            "simulated" if self._dry_run else "completed",
            manifest.total_files,
            manifest.total_bytes,
            timer.elapsed,
        )

        return ExportResult(
            manifest=manifest,
            output_directory=str(self._output_dir),
            dry_run=self._dry_run,
            elapsed_seconds=timer.elapsed,
            written=tuple(written),
        )

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    @staticmethod
    def _record(rel_path: str, content: str) -> FileRecord:
        return FileRecord(
            relative_path=rel_path,
            size_bytes=len(content.encode("utf-8")),
            line_count=count_lines(content),
            sha256=sha256_hex(content),
        )

    def _build_manifest(self) -> ExportManifest:
        from nestgen import __version__

        return ExportManifest(
            generator_version=__version__,
            total_files=len(self._file_records),
            total_bytes=sum(r.size_bytes for r in self._file_records),
            total_lines=sum(r.line_count for r in self._file_records),
            files=list(self._file_records),
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "MANIFEST_FILENAME",
    "ResourceExporter",
    "ExportManifest",
    "ExportResult",
    "FileRecord",
]

logger.debug("nestgen.exporters loaded.")
