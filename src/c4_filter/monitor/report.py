"""Run report.

Renders a build manifest (`<out_dir>/manifests/<run_id>.json`) as rich tables:
overall stats, per-source stats, and failure reasons sorted by count.
READ-ONLY: never touches the run's outputs.
"""

from __future__ import annotations
import glob
import json
import os
from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

def load_manifest(out_dir: str, run_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Load the manifest for `run_id`, or the most recent one in `out_dir`."""
    manifest_dir = os.path.join(out_dir, "manifests")
    if run_id:
        path = os.path.join(manifest_dir, f"{run_id}.json")
        candidates = [path] if os.path.exists(path) else []
    else:
        candidates = glob.glob(os.path.join(manifest_dir, "*.json"))
    if not candidates:
        return None
    latest = max(candidates, key=os.path.getmtime)
    with open(latest, "r", encoding="utf-8") as f:
        return json.load(f)

def _pct(passed: int, total: int) -> str:
    return f"{passed / total * 100:.1f}%" if total else "-"

def render_report(manifest: Dict[str, Any], console: Optional[Console] = None) -> None:
    console = console or Console()
    stats = manifest.get("stats") or {}
    pipe = manifest.get("pipeline") or {}
    mem = pipe.get("memory_usage") or {}

    console.print(Panel(
        f"Run ID: [bold]{manifest.get('run_id', '?')}[/bold]\n"
        f"Stages: {' -> '.join(manifest.get('stages') or [])}",
        title="[bold cyan]c4-filter run[/bold cyan]",
        border_style="cyan",
    ))

    overall = Table(box=box.SIMPLE, show_header=True)
    overall.add_column("Total", justify="right", style="cyan")
    overall.add_column("Passed", justify="right", style="green")
    overall.add_column("Rejected", justify="right", style="red")
    overall.add_column("Pass rate", justify="right", style="magenta")
    overall.add_column("Unique n-grams", justify="right", style="yellow")
    overall.add_column("Est. MB", justify="right", style="yellow")
    overall.add_row(
        str(stats.get("total", 0)),
        str(stats.get("passed", 0)),
        str(stats.get("failed", 0)),
        _pct(stats.get("passed", 0), stats.get("total", 0)),
        str(pipe.get("unique_ngrams", 0)),
        f"{float(mem.get('estimated_mb', 0.0)):.2f}",
    )
    console.print(Panel(overall, title="[bold]Pipeline Statistics[/bold]", border_style="cyan"))

    sources = manifest.get("sources") or {}
    if sources:
        st = Table(title="[bold]Sources[/bold]", box=box.ROUNDED, border_style="green")
        st.add_column("Source", style="cyan", no_wrap=True)
        st.add_column("Total", justify="right")
        st.add_column("Passed", justify="right", style="green")
        st.add_column("Rejected", justify="right", style="red")
        st.add_column("Output", style="yellow", max_width=50)
        for name, info in sources.items():
            s = info.get("stats") or {}
            st.add_row(name, str(s.get("total", 0)), str(s.get("passed", 0)), str(s.get("failed", 0)), str(info.get("docs_path", "")))
        console.print(st)

    reasons = stats.get("failure_reasons") or {}
    if reasons:
        rt = Table(title="[bold]Failure reasons[/bold]", box=box.ROUNDED, border_style="red")
        rt.add_column("Filter", style="cyan")
        rt.add_column("Documents", justify="right", style="red")
        for name, count in sorted(reasons.items(), key=lambda kv: (-kv[1], kv[0])):
            rt.add_row(name, str(count))
        console.print(rt)
