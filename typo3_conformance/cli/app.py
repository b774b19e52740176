"""
CLI entry module - command line interface built with Typer

Commands:
1. check    - full conformance run with report and score
2. report   - complete an existing report from given category scores
3. baseline - PHPStan baseline hygiene only
4. version
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from typo3_conformance.checks.phpstan_baseline import PhpstanBaselineCheck
from typo3_conformance.config import load_config
from typo3_conformance.errors import ConformanceError
from typo3_conformance.project import load_project
from typo3_conformance.report import assemble_report
from typo3_conformance.report.markdown import bullet
from typo3_conformance.reporters import JsonReporter, RichReporter
from typo3_conformance.runner import run_conformance
from typo3_conformance.scorer import build_score_card

# Typer application instance
app = typer.Typer(
    name="typo3-conformance",
    help="TYPO3 extension conformance checker and report generator.",
    add_completion=False,
)

# Rich Console for output
console = Console()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _config_path(value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None


@app.command()
def check(
    target: str = typer.Argument(
        ".",
        help="Path to the extension to check",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Report path (default: .conformance-reports/conformance_<timestamp>.md)",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML scoring configuration",
    ),
    format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default) or json",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed output",
    ),
) -> None:
    """
    Run all conformance checks and write the markdown report.

    Examples:
        typo3-conformance check
        typo3-conformance check ./my_extension --format json
        typo3-conformance check -o report.md --config scoring.yaml
    """
    setup_logging(verbose)

    if format not in ("rich", "json"):
        console.print(f"[red]Error:[/red] Unknown format: {escape(format)}")
        raise typer.Exit(1)

    try:
        scoring = load_config(_config_path(config), Path(target))
        run = run_conformance(
            target,
            output=Path(output) if output else None,
            config=scoring,
        )
    except ConformanceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if format == "json":
        reporter = JsonReporter()
    else:
        reporter = RichReporter(console)
    reporter.report(run)

    raise typer.Exit(0 if run.passed else 1)


@app.command()
def report(
    project: str = typer.Argument(..., help="Path to the extension"),
    report_file: str = typer.Argument(..., metavar="REPORT", help="Markdown report to complete"),
    structure: Optional[int] = typer.Argument(None, help="Extension Architecture score"),
    coding: Optional[int] = typer.Argument(None, help="Coding Guidelines score"),
    architecture: Optional[int] = typer.Argument(None, help="PHP Architecture score"),
    testing: Optional[int] = typer.Argument(None, help="Testing Standards score"),
    best_practices: Optional[int] = typer.Option(
        None,
        "--best-practices",
        "-b",
        help="Best Practices score (default from configuration)",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML scoring configuration",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed output",
    ),
) -> None:
    """
    Add the summary scores, assessment and action checklist to a report.

    Omitted scores take the configured defaults.

    Examples:
        typo3-conformance report . report.md 18 15 18 16
        typo3-conformance report ./my_extension report.md --best-practices 14
    """
    setup_logging(verbose)

    try:
        extension = load_project(project)
        scoring = load_config(_config_path(config), extension.path)
        card = build_score_card(
            structure=structure,
            coding=coding,
            architecture=architecture,
            testing=testing,
            best_practices=best_practices,
            config=scoring,
        )
        result = assemble_report(extension, Path(report_file), card)
    except ConformanceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not result.summary_updated:
        console.print("[yellow]Warning:[/yellow] Summary table not found, scores were not written")
    if verbose:
        console.print(f"[dim]Total score: {result.total}/{card.max_total} ({card.tier.label})[/dim]")
    console.print("[green]✅ Final report generated successfully[/green]")


@app.command()
def baseline(
    target: str = typer.Argument(
        ".",
        help="Path to the extension",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed output",
    ),
) -> None:
    """
    Check that uncommitted changes do not add errors to the PHPStan baseline.
    """
    setup_logging(verbose)

    try:
        extension = load_project(target)
    except ConformanceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"Checking PHPStan baseline hygiene in: {escape(str(extension.path))}")
    result = PhpstanBaselineCheck().run(extension)
    for subsection in result.subsections:
        for line in subsection.preamble:
            console.print(line, markup=False)
        for finding in subsection.findings:
            console.print(bullet(finding.status, finding.message), markup=False)
            for detail in finding.details:
                console.print(bullet(detail.status, detail.message, 1), markup=False)

    raise typer.Exit(0 if result.passed else 1)


@app.command()
def version() -> None:
    """Show the version of the conformance checker."""
    from typo3_conformance import __version__
    console.print(f"[bold]TYPO3 Conformance Checker[/bold] v{__version__}")


if __name__ == "__main__":
    app()
