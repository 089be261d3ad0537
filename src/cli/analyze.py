"""
Command-line interface for the Decision Cascade Engine.

Commands:
- analyze: Analyze a decision bundle stored as JSON
- track: Summarize predicted versus actual outcomes
- serve: Run the HTTP API

Usage:
    decision-engine analyze bundle.json --time-on-duty 800
    decision-engine analyze bundle.json --json
    decision-engine track outcomes.json
"""

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.config import get_settings, setup_logging
from src.models.analysis import DecisionAnalysis
from src.models.requests import DecisionAnalysisRequest
from src.models.tracking import DecisionTracking, TrackingRequest
from src.services.decision_analyzer import DecisionAnalyzer
from src.services.outcome_tracker import OutcomeTracker
from src.utils.errors import DecisionEngineError

app = typer.Typer(
    name="decision-engine",
    help="Decision Cascade Engine CLI",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _load(path: Path, model: type) -> BaseModel:
    """Read and validate a JSON file, exiting with code 1 on failure."""
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        err_console.print(f"[bold red]✗[/bold red] Cannot read {path}: {e}")
        raise typer.Exit(1)
    except ValidationError as e:
        err_console.print(f"[bold red]✗[/bold red] Invalid bundle {path}:")
        for err in e.errors():
            loc = ".".join(str(part) for part in err["loc"])
            err_console.print(f"  • {loc}: {err['msg']}")
        raise typer.Exit(1)


def _render_analysis(analysis: DecisionAnalysis) -> None:
    table = Table(title=f"Decision {analysis.decision_id}")
    table.add_column("Rank", justify="right")
    table.add_column("Option", style="cyan")
    table.add_column("Overall", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Critical breaches", style="red")

    by_id = {a.option.id: a for a in analysis.analyzed_options}
    for option_id in analysis.ranking:
        analyzed = by_id[option_id]
        marker = " ★" if option_id == analysis.recommendation else ""
        table.add_row(
            str(analyzed.rank),
            f"{option_id} {analyzed.option.label}{marker}",
            f"{analyzed.overall_score:.2f}",
            f"{analyzed.option.confidence:.0%}",
            ", ".join(d.value for d in analyzed.critical_breaches) or "-",
        )

    console.print(table)

    summary = f"[bold]Recommended:[/bold] {analysis.recommendation}"
    if analysis.fallback_recommendation:
        summary += "\n[yellow]Every option breaches a critical dimension (fallback)[/yellow]"
    for caveat in analysis.caveats:
        summary += f"\n[yellow]•[/yellow] {caveat}"
    console.print(Panel.fit(summary, border_style="green"))

    load = analysis.cognitive_load_warning
    if load is not None:
        style = "red" if load.recommend_consultation else "blue"
        lines = [f"Fatigue: {load.fatigue_level.value} ({load.time_on_duty} min on duty)"]
        if load.recommend_consultation:
            lines.append("Consult a second decision-maker before authorizing")
        if load.recommend_break:
            lines.append("Take a break before authorizing")
        console.print(Panel.fit("\n".join(lines), title="Cognitive load", border_style=style))

    for warning in analysis.warnings:
        console.print(f"[yellow]⚠ {warning.code}[/yellow] {warning.message}")


def _render_tracking(tracking: DecisionTracking) -> None:
    table = Table(title=f"Decision {tracking.decision_id}: {tracking.status.value}")
    table.add_column("Consequence", style="cyan")
    table.add_column("Predicted", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Status")

    for outcome in tracking.consequence_tracking:
        table.add_row(
            outcome.description,
            "-" if outcome.predicted_impact is None else f"{outcome.predicted_impact:g}",
            "-" if outcome.actual_impact is None else f"{outcome.actual_impact:g}",
            outcome.status.value,
        )

    console.print(table)
    console.print(
        f"Predicted {tracking.predicted_score:g}, actual {tracking.actual_score:g}, "
        f"accuracy {tracking.accuracy:.0%}"
    )
    for discrepancy in tracking.discrepancies:
        console.print(f"[red]✗ {discrepancy.type.value}[/red] {discrepancy.description}")


@app.command()
def analyze(
    bundle: Path = typer.Argument(..., help="JSON file shaped like the analyze request"),
    time_on_duty: Optional[int] = typer.Option(
        None, "--time-on-duty", min=0, help="Minutes on duty (overrides the bundle)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw analysis JSON"),
    strict: bool = typer.Option(False, "--strict", help="Fail on consequence sign mismatches"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Emit engine logs"),
):
    """
    Analyze a decision bundle and recommend an option.
    """
    if verbose:
        setup_logging()

    request = _load(bundle, DecisionAnalysisRequest)

    analyzer = DecisionAnalyzer.from_settings(get_settings())
    if strict:
        analyzer.strict_signs = True

    try:
        analysis = analyzer.analyze(
            request.decision,
            request.consequence_templates,
            request.baselines,
            precedents=request.precedents,
            time_on_duty=time_on_duty if time_on_duty is not None else request.time_on_duty,
            policy=request.scoring_policy,
        )
    except DecisionEngineError as e:
        err_console.print(f"[bold red]✗ {e.code}[/bold red] {e.message}")
        for suggestion in e.suggestions:
            err_console.print(f"  • {suggestion}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(analysis.to_wire(), indent=2))
    else:
        _render_analysis(analysis)


@app.command()
def track(
    outcomes: Path = typer.Argument(..., help="JSON file shaped like the track request"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw tracking JSON"),
):
    """
    Compare predicted and observed outcomes of an approved decision.
    """
    request = _load(outcomes, TrackingRequest)
    tracker = OutcomeTracker(discrepancy_threshold=get_settings().DISCREPANCY_THRESHOLD)
    tracking = tracker.track(request)

    if as_json:
        typer.echo(json.dumps(tracking.to_wire(), indent=2))
    else:
        _render_tracking(tracking)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn

    settings = get_settings()
    console.print(f"[bold blue]→[/bold blue] Serving {settings.PROJECT_NAME} {settings.VERSION}")
    uvicorn.run(
        "src.api.main:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    app()
