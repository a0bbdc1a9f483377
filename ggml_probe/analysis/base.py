# ggml_probe/analysis/base.py
"""
Inspection report models. A rejected header leaves one entry in the reason
matrix naming the decode stage, the byte offset and the subject it failed on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Finding:
    """One header check."""

    name: str  # "header:<check>"
    ok: bool
    details: str = ""
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def check(self) -> str:
        return self.name.split(":", 1)[-1]


@dataclass
class ReasonEntry:
    """Why the decoder rejected the file."""

    stage: str  # GGMLError.stage: "magic" | "read" | "container" | "dispatch"
    reason: str
    offset: int  # stream position when the decode stopped
    subject: Optional[str] = None  # container name or architecture hint


@dataclass
class AnalysisReport:
    """Inspection report for one model file."""

    file_path: str
    file_size: int
    sha256_hex: str
    hint: str
    metadata: Dict[str, Any]
    header_end: Optional[int] = None
    findings: List[Finding] = field(default_factory=list)
    reason_matrix: List[ReasonEntry] = field(default_factory=list)
    stages_run: List[str] = field(default_factory=list)

    def add(self, name: str, ok: bool, details: str = "", **context: Any) -> None:
        self.findings.append(Finding(name=name, ok=ok, details=details, context=context))

    def reject(
        self, stage: str, reason: str, *, offset: int, subject: Optional[str] = None
    ) -> None:
        """Record a decode failure as a failed finding plus a reason entry."""
        self.add(f"header:{stage}", False, reason, offset=offset)
        self.reason_matrix.append(
            ReasonEntry(stage=stage, reason=reason, offset=offset, subject=subject)
        )

    @property
    def decoded(self) -> bool:
        return self.header_end is not None

    @property
    def ok(self) -> bool:
        return all(f.ok for f in self.findings)
