# ggml_probe/analysis/analyzer.py
"""
Header analyzer: maps a model file, hashes it and decodes its GGML header
into findings plus a reason matrix.
"""
from __future__ import annotations

import hashlib
from typing import List, Optional

from loguru import logger

from ggml_probe.analysis.base import AnalysisReport
from ggml_probe.io.file_reader import LocalFileSource
from ggml_probe.model_formats.ggml.ggml import (
    DispatchError,
    GGMLError,
    ModelDescriptor,
    VersionError,
)
from ggml_probe.model_formats.ggml.ggml_decoder import decode_ggml
from ggml_probe.observability import Timer, to_dict

AVAILABLE_STAGES: List[str] = ["sha256", "header"]


class HeaderAnalyzer:
    """Runs the inspection stages for one GGML file."""

    def __init__(self, path: str, hint: str = "llama"):
        self.path = path
        self.hint = hint
        self.src = LocalFileSource(path)

    def run(self, stages: List[str]) -> AnalysisReport:
        """
        Orchestrates the inspection, running only the specified stages.

        Args:
            stages: A list of stages to run (e.g., ["sha256", "header"]).
        """
        with self.src.open() as mf:
            mv = mf.view

            report = AnalysisReport(
                file_path=self.path,
                file_size=mf.size,
                sha256_hex="not_run",
                hint=self.hint,
                metadata={},
            )

            if "sha256" in stages:
                with Timer("sha256") as t_hash:
                    h = hashlib.sha256()
                    h.update(mv)
                    report.sha256_hex = h.hexdigest()
                report.stages_run.append("sha256")
                logger.debug("SHA256 computed in {ms:.2f}ms", ms=t_hash.duration_ms)

            if "header" in stages:
                reader = mf.reader()
                with Timer("header") as t_core:
                    try:
                        ggml = decode_ggml(reader, self.hint)
                    except GGMLError as e:
                        logger.error(
                            "Header decode failed for {path}: {error}", path=self.path, error=e
                        )
                        report.reject(
                            e.stage, str(e), offset=reader.tell(), subject=_subject(e, self.hint)
                        )
                    else:
                        self._record_descriptor(ggml, reader.tell(), report)
                report.stages_run.append("header")
                logger.debug("Header decoded in {ms:.2f}ms", ms=t_core.duration_ms)

            return report

    def _record_descriptor(
        self, ggml: ModelDescriptor, header_end: int, report: AnalysisReport
    ) -> None:
        report.metadata.update(to_dict(ggml))
        report.header_end = header_end
        version = ggml.version
        report.add("header:magic", True, f"{ggml.magic:#010x}", start=0, end=4)
        report.add(
            "header:container",
            True,
            ggml.container.name() if version is None else f"{ggml.container.name()} v{version}",
            start=4,
            end=4 if version is None else 8,
        )
        report.add(
            "header:hyperparameters",
            True,
            f"{ggml.model_type} record",
            start=header_end - _record_size(ggml),
            end=header_end,
        )
        report.add("header:num_vocab", ggml.num_vocab > 0, str(ggml.num_vocab))
        report.add(
            "header:file_type",
            True,
            f"{ggml.file_type_name} ({ggml.file_type})",
        )
        report.add(
            "header:bounds",
            header_end <= report.file_size,
            f"Header region: [0, {header_end}) of {report.file_size}",
        )


def _record_size(ggml: ModelDescriptor) -> int:
    layout = getattr(type(ggml.hyperparameters), "LAYOUT", None)
    return layout.size if layout is not None else 0


def _subject(err: GGMLError, hint: str) -> Optional[str]:
    if isinstance(err, VersionError):
        return err.container
    if isinstance(err, DispatchError):
        return hint
    return None
