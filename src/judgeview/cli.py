# src/judgeview/cli.py
from __future__ import annotations

import logging
from pathlib import Path

import typer

from judgeview.config import BrowserConfig, load_config
from judgeview.errors import JudgeviewError, LoadError
from judgeview.filters import label_counts
from judgeview.render import render_jsonl, render_label_counts, render_table, render_tsv
from judgeview.session import BrowserSession
from judgeview.types import FilterOutcome
from judgeview.utils.logging import setup_logging

app = typer.Typer(add_completion=False, help="judgeview: browse per-shot relevance judgments.")
logger = logging.getLogger(__name__)

RENDERERS = {"table": render_table, "jsonl": render_jsonl, "tsv": render_tsv}


# ============================================================================
# Shared helpers
# ============================================================================
def _open(
    config: Path | None,
    source: str | None,
    strict: bool | None,
    log_level: str | None,
) -> tuple[BrowserConfig, BrowserSession]:
    cfg = load_config(config, {"source": source, "strict": strict, "log_level": log_level})
    setup_logging(cfg.log_level)
    if config is not None:
        logger.info("Loaded config: %s", config)
    return cfg, BrowserSession.from_config(cfg)


def _report(err: JudgeviewError) -> None:
    msg = err.hint() if isinstance(err, LoadError) else f"Error: {err}"
    typer.secho(msg, err=True, fg=typer.colors.RED)


def _fail(err: JudgeviewError) -> typer.Exit:
    _report(err)
    return typer.Exit(code=1)


def _dataset(cfg: BrowserConfig, dataset: str | None) -> str:
    try:
        return cfg.resolve_dataset(dataset)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--dataset") from e


def _print_query_info(session: BrowserSession) -> None:
    typer.echo(f"Query {session.query_id}: {session.query_text}")


def _print_outcome(outcome: FilterOutcome) -> None:
    typer.echo(render_table(outcome.records))
    typer.echo(outcome.summary())


# ============================================================================
# Commands
# ============================================================================
@app.command()
def queries(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    source: str | None = typer.Option(None, "--source", help="Data directory or http(s) base URL."),
    dataset: str | None = typer.Option(None, "--dataset", "-d", help="Dataset name (file prefix)."),
    strict: bool | None = typer.Option(None, "--strict/--lenient", help="Fail on malformed lines."),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """List the query catalog of a dataset."""
    cfg, session = _open(config, source, strict, log_level)
    try:
        catalog = session.load_dataset(_dataset(cfg, dataset))
    except JudgeviewError as e:
        raise _fail(e) from e
    for qid, text in catalog.items():
        typer.echo(f"{qid}: {text}")


@app.command()
def show(
    query: str = typer.Option(..., "--query", "-q", help="Query id from the catalog."),
    judgement: list[str] | None = typer.Option(
        None, "--judgement", "-j", help="Accepted judgement label (repeatable)."
    ),
    stratum: list[str] | None = typer.Option(
        None, "--stratum", "-s", help="Accepted stratum label (repeatable)."
    ),
    fmt: str = typer.Option("table", "--format", "-f", help="table | jsonl | tsv"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    source: str | None = typer.Option(None, "--source", help="Data directory or http(s) base URL."),
    dataset: str | None = typer.Option(None, "--dataset", "-d", help="Dataset name (file prefix)."),
    strict: bool | None = typer.Option(None, "--strict/--lenient", help="Fail on malformed lines."),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Show the judgments of one query, filtered by judgement and stratum."""
    if fmt not in RENDERERS:
        raise typer.BadParameter(f"unknown format {fmt!r}", param_hint="--format")
    cfg, session = _open(config, source, strict, log_level)
    try:
        session.load_dataset(_dataset(cfg, dataset))
        session.select_query(query)
    except JudgeviewError as e:
        raise _fail(e) from e

    outcome = session.update_filters(judgements=judgement or None, strata=stratum or None)
    if fmt == "table":
        _print_query_info(session)
        _print_outcome(outcome)
    else:
        typer.echo(RENDERERS[fmt](outcome.records), nl=False)


@app.command()
def labels(
    query: str = typer.Option(..., "--query", "-q"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    source: str | None = typer.Option(None, "--source", help="Data directory or http(s) base URL."),
    dataset: str | None = typer.Option(None, "--dataset", "-d", help="Dataset name (file prefix)."),
    strict: bool | None = typer.Option(None, "--strict/--lenient", help="Fail on malformed lines."),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Count a query's judgments per judgement label and stratum."""
    cfg, session = _open(config, source, strict, log_level)
    try:
        session.load_dataset(_dataset(cfg, dataset))
        session.select_query(query)
    except JudgeviewError as e:
        raise _fail(e) from e
    _print_query_info(session)
    typer.echo(render_label_counts(label_counts(session.all_results)))


BROWSE_HELP = """\
  <id>            select a query
  (empty)         clear the selection
  j LABEL,...     accept these judgement labels
  s LABEL,...     accept these strata
  reset           restore the default filters
  list            list the queries again
  q               quit"""


@app.command()
def browse(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    source: str | None = typer.Option(None, "--source", help="Data directory or http(s) base URL."),
    dataset: str | None = typer.Option(None, "--dataset", "-d", help="Dataset name (file prefix)."),
    strict: bool | None = typer.Option(None, "--strict/--lenient", help="Fail on malformed lines."),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Interactive browser: pick a query, then refine the filters."""
    cfg, session = _open(config, source, strict, log_level)
    try:
        catalog = session.load_dataset(_dataset(cfg, dataset))
    except JudgeviewError as e:
        raise _fail(e) from e

    for qid, text in catalog.items():
        typer.echo(f"{qid}: {text}")
    typer.echo(BROWSE_HELP)

    while True:
        cmd = typer.prompt(">", default="", show_default=False).strip()
        if cmd in ("q", "quit", "exit"):
            break
        if cmd == "list":
            for qid, text in session.catalog.items():
                typer.echo(f"{qid}: {text}")
            continue
        if not cmd:
            session.clear_query()
            typer.echo("Selection cleared.")
            continue

        head, _, rest = cmd.partition(" ")
        if head in ("j", "s", "reset"):
            picked = [x.strip() for x in rest.split(",") if x.strip()]
            if head == "j":
                outcome = session.update_filters(judgements=picked)
            elif head == "s":
                outcome = session.update_filters(strata=picked)
            else:
                outcome = session.set_criteria(None)
            if session.query_id is not None:
                _print_outcome(outcome)
            continue

        try:
            outcome = session.select_query(cmd)
        except JudgeviewError as e:
            _report(e)
            session.dismiss_error()
            continue
        judgements, strata = session.available_labels()
        _print_query_info(session)
        typer.echo(f"Judgements: {', '.join(judgements) or '-'}")
        typer.echo(f"Strata: {', '.join(strata) or '-'}")
        _print_outcome(outcome)


if __name__ == "__main__":
    app()
