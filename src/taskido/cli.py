"""Taskido CLI - tasks and timelines from a markdown vault."""

import json
import logging
import sys
from datetime import date

import click

from .adapters import FileVault, NoteNotFoundError
from .config import Config, load_config
from .core.annotations import Priority
from .core.filters import apply_quick_filter, by_status, sort_tasks
from .core.formatting import format_counters, format_task_line, format_timeline
from .core.status import classify_all
from .core.tasks import Status
from .core.timeline import COUNTER_NAMES, Timeline, aggregate, select_counter
from .extraction import add_task, extract_tasks, quick_entry_files, toggle_task

PRIORITY_CHOICES = [p.value for p in Priority]
STATUS_CHOICES = [s.value for s in Status]


def _setup_logging(debug: bool, level: int = logging.WARNING) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else level,
    )


def _parse_day(value: str | None, option: str) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}", param_hint=option)


def _load(ctx: click.Context) -> tuple[Config, FileVault, date]:
    """Config, store and reference day for a command."""
    obj = ctx.obj or {}
    config = load_config()
    if obj.get("vault"):
        config.vault_dir = obj["vault"]
    today = obj.get("today") or date.today()
    return config, FileVault(config.vault_path), today


def _filtered(
    store: FileVault,
    config: Config,
    start: str | None,
    end: str | None,
    priorities: tuple[str, ...],
) -> list:
    tasks = extract_tasks(store, config)
    return apply_quick_filter(
        tasks,
        _parse_day(start, "--from"),
        _parse_day(end, "--to"),
        priorities,
    )


def _timeline_json(timeline: Timeline) -> dict:
    return {
        "today": timeline.today.isoformat(),
        "entry_date": timeline.entry_date.isoformat(),
        "years": timeline.years,
        "counters": timeline.counters.to_dict(),
        "days": {
            key: [t.to_dict() for t in tasks]
            for key, tasks in timeline.day_buckets.items()
        },
    }


@click.group()
@click.version_option()
@click.option("--vault", default=None, help="Vault directory (overrides config)")
@click.option("--today", "today_str", default=None, help="Reference day (YYYY-MM-DD)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, vault: str | None, today_str: str | None, debug: bool):
    """Taskido - task timeline for a markdown vault."""
    _setup_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["vault"] = vault
    ctx.obj["today"] = _parse_day(today_str, "--today")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--status", "statuses", multiple=True, type=click.Choice(STATUS_CHOICES),
              help="Only tasks with this status (repeatable)")
@click.option("--from", "start", default=None, help="Range start (YYYY-MM-DD)")
@click.option("--to", "end", default=None, help="Range end (YYYY-MM-DD)")
@click.option("--priority", "priorities", multiple=True, type=click.Choice(PRIORITY_CHOICES),
              help="Only tasks with this priority (repeatable)")
@click.option("--sort", "sort_expr", default=None, help="Sort fields, e.g. 'priority,-due'")
@click.pass_context
def tasks(ctx, as_json: bool, statuses: tuple[str, ...], start: str | None,
          end: str | None, priorities: tuple[str, ...], sort_expr: str | None):
    """List tasks with their status."""
    config, store, today = _load(ctx)
    try:
        found = classify_all(_filtered(store, config, start, end, priorities), today, config.task_order)
        if statuses:
            found = [t for t in found if by_status(statuses)(t)]
        found = sort_tasks(found, sort_expr or config.sort)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in found], indent=2, ensure_ascii=False))
        return

    if not found:
        click.echo("No tasks.")
        return

    for task in found:
        click.echo(f"{format_task_line(task, today, config.hide_tags)}  :{task.line}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--from", "start", default=None, help="Range start (YYYY-MM-DD)")
@click.option("--to", "end", default=None, help="Range end (YYYY-MM-DD)")
@click.option("--priority", "priorities", multiple=True, type=click.Choice(PRIORITY_CHOICES),
              help="Only tasks with this priority (repeatable)")
@click.option("--only", "counter", default=None, type=click.Choice(COUNTER_NAMES),
              help="Only show tasks behind one counter")
@click.option("--today-focus", is_flag=True, help="Only show today's tasks")
@click.pass_context
def timeline(ctx, as_json: bool, start: str | None, end: str | None,
             priorities: tuple[str, ...], counter: str | None, today_focus: bool):
    """Show the task timeline."""
    config, store, today = _load(ctx)
    try:
        result = aggregate(_filtered(store, config, start, end, priorities), today, config.timeline_options())
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if counter:
        keep = {id(t) for t in select_counter(result, counter)}
        for view in result.year_views:
            for bucket in view.days:
                bucket.tasks = [t for t in bucket.tasks if id(t) in keep]

    if as_json:
        click.echo(json.dumps(_timeline_json(result), indent=2, ensure_ascii=False))
        return

    click.echo(
        format_timeline(
            result,
            date_format=config.date_format,
            hide_tags=config.hide_tags,
            today_focus=today_focus,
        ),
        nl=False,
    )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def counters(ctx, as_json: bool):
    """Show the todo/overdue/unplanned/done/cancelled counters."""
    config, store, today = _load(ctx)
    result = aggregate(extract_tasks(store, config), today, config.timeline_options())

    if as_json:
        click.echo(json.dumps(result.counters.to_dict(), indent=2))
    else:
        click.echo(format_counters(result.counters))


@main.command()
@click.pass_context
def files(ctx):
    """List files offered for new tasks."""
    config, store, today = _load(ctx)
    for path in quick_entry_files(config, today):
        marker = "" if store.exists(path) else " (new)"
        click.echo(f"{path}{marker}")


@main.command()
@click.argument("text")
@click.option("--file", "-f", "path", default=None,
              help="Note to add to (defaults to the first quick-entry file)")
@click.pass_context
def add(ctx, text: str, path: str | None):
    """Add a task. Shorthand like 'due tomorrow' is expanded."""
    config, store, today = _load(ctx)
    if path is None:
        choices = quick_entry_files(config, today)
        if not choices:
            click.echo("Error: no file to add to; pass --file", err=True)
            sys.exit(1)
        path = choices[0]

    try:
        line = add_task(store, config, path, text, today)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Added to {path}: {line}")


@main.command()
@click.argument("path")
@click.argument("line_no", metavar="LINE", type=int)
@click.pass_context
def toggle(ctx, path: str, line_no: int):
    """Toggle completion of the task at PATH:LINE (0-based line)."""
    config, store, today = _load(ctx)
    try:
        new_line = toggle_task(store, path, line_no, today)
    except (ValueError, NoteNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(new_line.strip())


@main.command()
@click.option("--interval", type=int, default=None, help="Seconds between refreshes")
@click.pass_context
def watch(ctx, interval: int | None):
    """Re-extract tasks on an interval and print counter changes."""
    from .watch import run_watch

    if not ctx.obj.get("debug"):
        logging.getLogger("taskido").setLevel(logging.INFO)

    config, store, _ = _load(ctx)
    last: dict[str, str] = {}

    def on_change(snapshot):
        day = ctx.obj.get("today") or date.today()
        line = format_counters(aggregate(snapshot, day, config.timeline_options()).counters)
        if last.get("counters") != line:
            last["counters"] = line
            click.echo(line)

    click.echo(f"Watching {config.vault_path}...")
    click.echo("Press Ctrl+C to stop")
    try:
        run_watch(store, config, on_change, interval)
    except KeyboardInterrupt:
        click.echo("\nStopped.")


if __name__ == "__main__":
    main()
