"""CLI entry point for docfresh."""

from __future__ import annotations

import logging
import os
import re
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from docfresh.config import DEFAULT_CONFIG_PATH, DEFAULT_CONFIG_TEMPLATE, load_config
from docfresh.errors import DocfreshError
from docfresh.output.annotations import staleness_annotation, staleness_level
from docfresh.pipeline import EXIT_FAILURE, AuditResult, exit_code_for, run_audit

app = typer.Typer(
    name="docfresh",
    help="Flag docs whose related source files changed after they were last verified.",
)

config_app = typer.Typer(help="Manage docfresh configuration.")
app.add_typer(config_app, name="config")

err_console = Console(stderr=True)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class FormatChoice(str, Enum):
    json = "json"
    markdown = "markdown"
    both = "both"


def _setup_logging(level: int) -> None:
    """Send docfresh log records to stderr through rich."""
    pkg_logger = logging.getLogger("docfresh")
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, RichHandler):
            pkg_logger.removeHandler(handler)
    pkg_logger.addHandler(
        RichHandler(console=err_console, show_time=False, show_path=False)
    )
    pkg_logger.setLevel(level)


def _build_overrides(
    threshold: int | None,
    format: FormatChoice | None,
    output: str | None,
) -> dict[str, Any]:
    """Translate CLI flags into config overrides."""
    overrides: dict[str, Any] = {}
    if threshold is not None:
        overrides["threshold"] = threshold

    out: dict[str, Any] = {}
    if format is not None:
        out["format"] = format.value
    if output is not None:
        if format is FormatChoice.json:
            out["json_file"] = output
        elif format is FormatChoice.markdown:
            out["markdown_file"] = output
        else:
            # One base name, two reports: swap or append the extension
            base = re.sub(r"\.(json|md)$", "", output)
            out["json_file"] = f"{base}.json"
            out["markdown_file"] = f"{base}.md"
    if out:
        overrides["output"] = out
    return overrides


def _print_summary(result: AuditResult) -> None:
    report = result.report
    for path in result.written:
        rprint(f"[green]Report written:[/green] {path}")

    rprint("\n[bold]--- Staleness Check Summary ---[/bold]")
    rprint(f"Fresh docs: {report.fresh_count}")
    rprint(f"Stale docs: {report.stale_count}")
    rprint(f"Unchecked docs: {report.unchecked_count}")

    if report.has_stale:
        rprint(
            f"\n[yellow]Stale documentation detected[/yellow] "
            f"(level: {staleness_level(report)})."
        )
        for doc in report.stale_documents:
            rprint(f"  - {doc.title} ({len(doc.changes)} changed artifact(s))")
    else:
        rprint("\n[green]All documentation is up to date![/green]")


@app.command()
def check(
    config: Annotated[
        str, typer.Option("--config", "-c", help="Path to config file")
    ] = DEFAULT_CONFIG_PATH,
    threshold: Annotated[
        int | None, typer.Option("--threshold", "-t", min=1, help="Staleness threshold in days")
    ] = None,
    format: Annotated[
        FormatChoice | None, typer.Option("--format", "-f", help="Report format")
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Report output path")
    ] = None,
    annotate: Annotated[
        bool, typer.Option("--annotate", help="Print a GitHub Actions annotation when stale")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Verbose logging")
    ] = False,
) -> None:
    """Check documentation for staleness against git history.

    Exit codes: 0 all fresh, 1 stale docs found, 2 configuration/VCS/output failure.
    """
    _setup_logging(logging.DEBUG if verbose else logging.INFO)

    try:
        cfg = load_config(config, _build_overrides(threshold, format, output))
    except DocfreshError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_FAILURE)

    if not verbose:
        _setup_logging(_LOG_LEVELS[cfg.log_level])
    else:
        rprint(Syntax(yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False), "yaml"))

    rprint(f"[bold]Checking[/bold] docs under {cfg.docs_root} (threshold: {cfg.threshold} days)...")

    try:
        result = run_audit(cfg)
    except DocfreshError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_FAILURE)

    _print_summary(result)

    if annotate and result.report.has_stale:
        # Workflow commands must be emitted verbatim on stdout
        typer.echo(staleness_annotation(result.report, os.environ.get("GITHUB_WORKSPACE")))

    raise typer.Exit(exit_code_for(result.report))


@config_app.command("show")
def config_show(
    config: Annotated[
        str, typer.Option("--config", "-c", help="Path to config file")
    ] = DEFAULT_CONFIG_PATH,
) -> None:
    """Show the resolved configuration."""
    cfg = load_config(config)
    rprint(Syntax(yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    path: Annotated[
        str, typer.Option("--path", help="Where to write the config file")
    ] = DEFAULT_CONFIG_PATH,
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create a default config file."""
    target = Path(path)
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
