from __future__ import annotations

from pathlib import Path
import logging
import typer

from rich.console import Console
from rich.table import Table

from crossfile.core.config import AnalyzeConfig
from crossfile.core.errors import BudgetExceeded, InvalidInput
from crossfile.ingestion.walker import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, walk_repo
from crossfile.analysis.graph_analyzer import build_dependency_graph
from crossfile.analysis.runner import run_analysis
from crossfile.presets import DEFAULT_RULES, DEFAULT_RULES_PATH, load_rules, save_rules
from crossfile.reporting.markdown import write_report
from crossfile.reporting.exporters import export_dependency_graph, export_json_report
from crossfile.utils.logging_config import setup_logging


app = typer.Typer(add_completion=False, help="Cross-file dependency and code quality analysis")
console = Console()

SEVERITY_STYLE = {"error": "red", "warning": "yellow", "info": "blue"}


def _configure_logging(verbose: int) -> None:
    # the package logger already logs warnings to stderr
    if verbose <= 0:
        return
    setup_logging(level=logging.INFO if verbose == 1 else logging.DEBUG, force=True)


def _load_files(root: Path, include: list[str], exclude: list[str], max_bytes: int):
    if not root.exists():
        typer.secho(f"Path not found: {root}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    files = walk_repo(root, include, exclude, max_bytes, follow_symlinks=False)
    if not files:
        typer.secho("No files matched include/exclude filters.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=0)
    return files


@app.command("serve-api")
def serve_api(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Run the FastAPI web service."""
    import uvicorn
    uvicorn.run("crossfile.web.service:app", host=host, port=port, reload=False)


@app.command("init-rules")
def init_rules(
    output: str = typer.Option(str(DEFAULT_RULES_PATH), help="Where to write the rules file"),
    force: bool = typer.Option(False, help="Overwrite an existing file"),
) -> None:
    """Write the default rules and budgets to a YAML file for editing."""
    out = Path(output)
    if out.exists() and not force:
        typer.secho(f"{out} already exists; pass --force to overwrite", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    save_rules(DEFAULT_RULES, out)
    console.print(f"[green]Wrote default rules to {out}[/]")


@app.command("graph")
def graph(
    path: str = typer.Argument(..., help="Folder to analyze"),
    include: list[str] = typer.Option(DEFAULT_INCLUDE, help="Glob patterns to include"),
    exclude: list[str] = typer.Option(DEFAULT_EXCLUDE, help="Glob patterns to exclude"),
    max_bytes: int = typer.Option(2_000_000, help="Per-file size cap in bytes"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for info, -vv for debug logs"),
) -> None:
    """Print the dependency graph: nodes, cycles, missing imports and unused files."""
    _configure_logging(verbose)
    files = _load_files(Path(path), include, exclude, max_bytes)
    try:
        result = build_dependency_graph(files)
    except InvalidInput as e:
        typer.secho(f"Invalid input: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    table = Table(title="Dependency Graph")
    table.add_column("File", overflow="fold")
    table.add_column("Imports", justify="right")
    table.add_column("Used by", justify="right")
    table.add_column("Exports", justify="right")
    table.add_column("Missing", overflow="fold")
    for node in result.nodes.values():
        table.add_row(
            node.path,
            str(len(node.dependencies)),
            str(len(node.dependents)),
            str(len(node.exports)),
            ", ".join(node.missing),
        )
    console.print(table)

    console.rule("[bold]Cycles")
    if not result.cycles:
        console.print("No cycles found.")
    for cycle in result.cycles:
        console.print(f"[red]{' -> '.join(cycle)}[/]")

    console.rule("[bold]Missing dependencies")
    if not result.missing:
        console.print("No missing dependencies.")
    for m in result.missing:
        console.print(f'[red]"{m.missing_specifier}"[/] in {m.file}')

    console.rule("[bold]Unused files")
    if not result.unused:
        console.print("No unused files.")
    for p in result.unused:
        console.print(f"[yellow]{p}[/]")


@app.command("analyze")
def analyze(
    path: str = typer.Argument(..., help="Folder to analyze"),
    include: list[str] = typer.Option(DEFAULT_INCLUDE, help="Glob patterns to include"),
    exclude: list[str] = typer.Option(DEFAULT_EXCLUDE, help="Glob patterns to exclude"),
    max_bytes: int = typer.Option(2_000_000, help="Per-file size cap in bytes"),
    output_dir: str = typer.Option("reports", help="Output directory for reports"),
    rules_file: str = typer.Option(str(DEFAULT_RULES_PATH), help="Rules/thresholds file"),
    workers: int = typer.Option(4, help="Worker threads for per-file analysis"),
    max_rows: int = typer.Option(25, help="Issues shown in the console table"),
    show_digest: bool = typer.Option(False, "--digest", help="Print the project digest"),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of reporting partial results when a budget is hit"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for info, -vv for debug logs"),
) -> None:
    """Analyze a folder and write report.md, report.json and dep-graph.json."""
    _configure_logging(verbose)
    cfg = AnalyzeConfig(
        path=Path(path),
        include=include,
        exclude=exclude,
        max_bytes=max_bytes,
        output_dir=Path(output_dir),
        rules_path=Path(rules_file),
        max_workers=workers,
    )
    rules = load_rules(cfg.rules_path)

    console.rule("[bold]Scanning repository")
    files = _load_files(cfg.path, cfg.include, cfg.exclude, cfg.max_bytes)
    console.print(f"{len(files)} files loaded from {cfg.path}")

    console.rule("[bold]Analyzing")
    try:
        result = run_analysis(files, rules=rules, max_workers=cfg.max_workers, raise_on_budget=strict)
    except InvalidInput as e:
        typer.secho(f"Invalid input: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    except BudgetExceeded as e:
        typer.secho(f"Analysis budget exceeded: {e.reason}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    table = Table(title=f"Issues ({len(result.issues)})")
    table.add_column("Severity", justify="center")
    table.add_column("Category")
    table.add_column("Location", overflow="fold")
    table.add_column("Message", overflow="fold")
    for issue in result.issues[:max_rows]:
        style = SEVERITY_STYLE.get(issue.severity, "white")
        loc = ", ".join(issue.files) + (f":{issue.line}" if issue.line else "")
        table.add_row(f"[{style}]{issue.severity}[/]", issue.category, loc, issue.message)
    console.print(table)
    if len(result.issues) > max_rows:
        console.print(f"... and {len(result.issues) - max_rows} more")
    for event in result.budget_events:
        console.print(f"[yellow]Truncated:[/] {event}")

    if show_digest:
        console.rule("[bold]Project digest")
        console.print(result.digest, markup=False, highlight=False)

    console.rule("[bold]Writing reports")
    try:
        out_dir = cfg.resolve_output_dir()
        md_out = write_report(result, out_dir)
        json_out = export_json_report(result, out_dir)
        dep_out = export_dependency_graph(result.graph, out_dir)
    except OSError as e:
        typer.secho(f"Report export failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"Wrote artifacts: {md_out}, {json_out}, {dep_out}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
