from __future__ import annotations
from typing import List

from rich.console import Console
from rich.table import Table

from ..schemas import AnalysisResult, HistoryItem

BADGE_STYLES = {
    "Disinformation": "bold red",
    "Misleading": "bold yellow",
    "NSFW Content": "bold magenta",
    "Not Disinformation": "bold green",
}


def print_result(res: AnalysisResult, console: Console = None) -> None:
    console = console or Console()
    style = BADGE_STYLES.get(res.classification, "bold")
    console.rule(f"[{style}]{res.classification}[/{style}] ({res.confidence}% confidence, {res.content_type})")
    console.print(res.first_sentences(3))

    if res.key_terms:
        console.print("[dim]Key terms:[/dim] " + ", ".join(res.key_terms))

    if res.verification_sources or res.recommendations:
        t = Table(title="Verify")
        t.add_column("Sources"); t.add_column("Recommendations")
        rows = max(len(res.verification_sources), len(res.recommendations))
        for i in range(rows):
            src = res.verification_sources[i] if i < len(res.verification_sources) else ""
            rec = res.recommendations[i] if i < len(res.recommendations) else ""
            t.add_row(src, rec)
        console.print(t)

    if res.timestamp:
        console.print(f"[dim]{res.timestamp}[/dim]")


def print_history(items: List[HistoryItem], console: Console = None) -> None:
    console = console or Console()
    if not items:
        console.print("[dim]No analyses yet.[/dim]")
        return
    t = Table(title=f"History ({len(items)})")
    t.add_column("When"); t.add_column("Classification"); t.add_column("Conf."); t.add_column("Content")
    for it in items:
        style = BADGE_STYLES.get(it.classification, "")
        t.add_row(it.timestamp or "-", f"[{style}]{it.classification}[/{style}]" if style else it.classification,
                  f"{it.confidence}%", it.content)
    console.print(t)
