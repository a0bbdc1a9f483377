# ggml_probe/reporting/console_reporter.py
"""
Console reporting for header inspection results.
"""
from __future__ import annotations

from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

from ggml_probe.analysis.base import AnalysisReport, Finding

console = Console()

# Findings appear in on-disk order.
HEADER_ORDER = [
    "magic",
    "container",
    "hyperparameters",
    "num_vocab",
    "file_type",
    "bounds",
]

HPARAM_ROWS = ["n_vocab", "n_embd", "n_mult", "n_head", "n_layer", "n_rot", "file_type"]


def _render_summary(rep: AnalysisReport) -> None:
    """Render a high-level summary table."""
    t = Table(title="GGML Header Summary", box=box.SIMPLE_HEAVY)
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Path", rep.file_path)
    t.add_row("Size (bytes)", str(rep.file_size))
    t.add_row("Hint", rep.hint)
    t.add_row("SHA-256", rep.sha256_hex)
    console.print(t)


def _render_findings(title: str, findings: List[Finding]) -> None:
    table = Table(title=title, box=box.ROUNDED, show_lines=False, title_style="bold magenta")
    table.add_column("Status", justify="center", width=8)
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Region", justify="right", style="dim")
    table.add_column("Details", style="white")

    sort_map = {name: i for i, name in enumerate(HEADER_ORDER)}
    findings = sorted(findings, key=lambda f: sort_map.get(f.check, 999))

    for f in findings:
        status = "[green]PASS[/green]" if f.ok else "[bold red]FAIL[/bold red]"
        check_name = f.check.replace("_", " ").title()
        ctx = f.context
        region = f"[{ctx['start']}, {ctx['end']})" if "start" in ctx else ""
        table.add_row(status, check_name, region, f.details)

    console.print(table)


def _render_hyperparameters(rep: AnalysisReport) -> None:
    hparams = rep.metadata.get("hyperparameters")
    if not isinstance(hparams, dict):
        return
    t = Table(title=f"Hyperparameters ({rep.metadata.get('model_type', rep.hint)})", box=box.SIMPLE)
    t.add_column("Field", style="bold")
    t.add_column("Value", justify="right")
    for key in HPARAM_ROWS:
        if key in hparams:
            t.add_row(key, str(hparams[key]))
    console.print(t)


def _render_reason_matrix(rep: AnalysisReport) -> None:
    """Render the reason matrix table."""
    if not rep.reason_matrix:
        return
    rt = Table(
        title="Reason Matrix (Rejected Decode Stages)",
        box=box.SIMPLE_HEAVY,
        show_lines=False,
    )
    rt.add_column("Stage", style="bold")
    rt.add_column("Subject", style="cyan")
    rt.add_column("Offset", justify="right", style="dim")
    rt.add_column("Reason")
    for entry in rep.reason_matrix:
        rt.add_row(entry.stage, entry.subject or "-", str(entry.offset), entry.reason)
    console.print(rt)


def render_report(rep: AnalysisReport) -> None:
    """Render the full console report for a GGML header."""
    _render_summary(rep)
    header = [f for f in rep.findings if f.name.startswith("header:")]
    if header:
        _render_findings("Header Checks", header)
    _render_hyperparameters(rep)
    _render_reason_matrix(rep)
