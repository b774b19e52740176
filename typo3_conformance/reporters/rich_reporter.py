"""
Rich terminal reporter - score panel, category table and open items
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from typo3_conformance.runner import ConformanceRun


# Tier key -> color
TIER_COLORS = {
    "excellent": "green",
    "good": "cyan",
    "fair": "yellow",
}


class RichReporter:
    """Rich terminal reporter"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def report(self, run: ConformanceRun) -> None:
        self.console.print()
        self.console.print("─" * 80, style="dim")
        self.console.print(
            "TYPO3 Extension Conformance Report",
            style="bold cyan",
            justify="center",
        )
        self.console.print("─" * 80, style="dim")

        self._print_score_panel(run)
        self._print_categories(run)
        self._print_checks(run)
        self._print_action_items(run)

        self.console.print()
        self.console.print(f"[dim]Report written to {escape(str(run.report_path))}[/dim]")
        if not run.assembly.summary_updated:
            self.console.print("[yellow]Warning:[/yellow] summary table not found, scores not written")

    def _print_score_panel(self, run: ConformanceRun) -> None:
        card = run.card
        tier = card.tier
        color = TIER_COLORS.get(tier.key, "white")

        bar_width = 30
        filled = int(card.total / card.max_total * bar_width) if card.max_total else 0
        filled = min(max(filled, 0), bar_width)
        bar = "█" * filled + "░" * (bar_width - filled)

        content = Text()
        content.append("Total: ", style="bold")
        content.append(f"{card.total}", style=f"bold {color}")
        content.append(f" / {card.max_total}\n", style="dim")
        content.append(f"[{bar}]\n\n", style=color)
        content.append("Level: ", style="bold")
        content.append(f"{tier.glyph}\n\n", style=f"bold {color}")
        content.append(f"Extension: {run.project.name}", style="dim")

        self.console.print(Panel(
            content,
            title="[bold]Conformance Score[/bold]",
            border_style=color,
        ))

    def _print_categories(self, run: ConformanceRun) -> None:
        self.console.print()
        self.console.print("[bold]◆ Categories[/bold]")
        self.console.print()

        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Category", style="cyan", width=26)
        table.add_column("Score", justify="right", width=8)
        table.add_column("Status", width=14)

        for category, score in run.card.rows():
            status = "[green]passed[/green]" if run.card.passed(category.key) else "[yellow]issues[/yellow]"
            table.add_row(category.label, f"{score}/{category.max_score}", status)

        self.console.print(table)

    def _print_checks(self, run: ConformanceRun) -> None:
        self.console.print()
        self.console.print("[bold]◆ Checks[/bold]")
        self.console.print()

        for result in run.results:
            failures = result.count("fail")
            warnings = result.count("warn")
            if not result.passed:
                icon, style = "❌", "red"
            elif warnings:
                icon, style = "⚠️", "yellow"
            else:
                icon, style = "✅", "green"
            self.console.print(
                f"  [{style}]{icon} {result.title}[/{style}] "
                f"[dim]({failures} failed, {warnings} warnings)[/dim]"
            )

    def _print_action_items(self, run: ConformanceRun) -> None:
        checklist = run.assembly.checklist
        if not checklist.high:
            return
        self.console.print()
        self.console.print("[bold]◆ High priority[/bold]")
        self.console.print()
        for item in checklist.high:
            self.console.print(f"  [red]•[/red] {item}")
