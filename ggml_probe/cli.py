# ggml_probe/cli.py
"""
cli.py

Rich console CLI:
- inspect: decode the header of a GGML-family model file, print summary,
           header checks, hyperparameters and reason matrix.
- version: show the package version.
"""
from __future__ import annotations

import argparse
import os
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from ggml_probe import __version__
from ggml_probe.analysis.analyzer import AVAILABLE_STAGES, HeaderAnalyzer
from ggml_probe.logging import configure_logging
from ggml_probe.model_formats.ggml.ggml_hparams import HYPERPARAMETER_READERS
from ggml_probe.reporting import console_reporter
from ggml_probe.reporting.json_reporter import write_json

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ggprobe",
        description="Decode and validate GGML/GGMF/GGJT/GGLA model headers.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", title="Available Commands", metavar="<command>")

    sp_inspect = sub.add_parser("inspect", help="Inspect the header of a local model file")
    sp_inspect.add_argument("path", help="Path to a ggml/ggmf/ggjt/ggla model file")
    sp_inspect.add_argument(
        "--hint",
        default="llama",
        help=(
            "Architecture whose hyperparameter layout to read.\n"
            f"Registered: {', '.join(sorted(HYPERPARAMETER_READERS))}."
        ),
    )
    sp_inspect.add_argument("--debug", action="store_true", help="Enable debug logging")
    sp_inspect.add_argument(
        "--log-json", action="store_true", help="Emit log records as JSON lines"
    )
    sp_inspect.add_argument(
        "--json-out", type=str, default=None, help="Write JSON report to this path"
    )
    sp_inspect.add_argument(
        "--stage",
        nargs="+",
        choices=AVAILABLE_STAGES,
        metavar="STAGE",
        help=(
            f"Run only specific stages. Defaults to all stages if not provided.\n"
            f"Available stages: {', '.join(AVAILABLE_STAGES)}."
        ),
    )

    sub.add_parser("version", help="Show the version of ggml-probe")

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "version":
        console.print(f"ggml-probe version {__version__}")
        return 0

    if args.cmd == "inspect":
        configure_logging(debug=args.debug, serialize=args.log_json)
        path = args.path
        if not os.path.exists(path):
            console.print(f"[red]File not found:[/red] {path}")
            return 2

        stages_to_run = args.stage or AVAILABLE_STAGES
        console.print(f"[dim]Running stages: {', '.join(stages_to_run)}...[/dim]")

        rep = HeaderAnalyzer(path, hint=args.hint).run(stages=stages_to_run)

        console.print(
            Panel(
                f"[bold]Result:[/bold] {'[green]OK[/green]' if rep.ok else '[red]FAILED[/red]'}",
                style="bold cyan",
            )
        )
        console_reporter.render_report(rep)

        if args.json_out:
            write_json(rep, args.json_out)
            console.print(f"[dim]Wrote JSON report → {args.json_out}[/dim]")

        return 0 if rep.ok else 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
