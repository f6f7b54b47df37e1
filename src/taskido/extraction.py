"""Shared workflow layer between the CLI and the note store.

Turns notes into task records, builds timelines, and routes task edits
back through the store.
"""

import logging
from collections.abc import Callable
from datetime import date
from pathlib import PurePosixPath

from .config import Config
from .core.editing import expand_quick_entry, new_task_line, toggle_line
from .core.notes import LinkRef, ListItem, NoteMetadata, Position, SectionRef
from .core.tasks import TaskRecord, parse_line
from .core.timeline import Timeline, aggregate
from .ports import NoteStore
from .snapshot import TaskSnapshot

logger = logging.getLogger(__name__)

PathFilter = Callable[[str], bool]


# ============== File Filters ==============


def is_under(parent: str, path: str) -> bool:
    """Check if path lies under the parent folder, by path segments."""
    parents = PurePosixPath(parent.strip("/")).parts
    paths = PurePosixPath(path).parts
    if len(parents) > len(paths):
        return False
    return all(p == q for p, q in zip(parents, paths))


def exclude_paths_filter(folders: list[str]) -> PathFilter:
    return lambda path: not any(is_under(f, path) for f in folders)


def include_paths_filter(folders: list[str]) -> PathFilter:
    return lambda path: any(is_under(f, path) for f in folders)


def select_notes(store: NoteStore, config: Config) -> list[str]:
    """Note paths that pass the configured path filters."""
    paths = store.list_notes()
    if config.include_paths:
        paths = [p for p in paths if include_paths_filter(config.include_paths)(p)]
    if config.exclude_paths:
        paths = [p for p in paths if exclude_paths_filter(config.exclude_paths)(p)]
    return paths


def passes_tag_filters(metadata: NoteMetadata, config: Config) -> bool:
    """A note must carry any include tag and none of the exclude tags."""
    if not config.include_tags and not config.exclude_tags:
        return True
    tags = metadata.file_tags()
    if config.include_tags and not any(t in tags for t in config.include_tags):
        return False
    if config.exclude_tags and any(t in tags for t in config.exclude_tags):
        return False
    return True


# ============== Extraction ==============


def find_parent(item: ListItem, metadata: NoteMetadata) -> SectionRef | None:
    """The nearest heading above a list item. Nested items share their list's heading."""
    parent = None
    for section in metadata.sections:
        if section.kind == "heading" and section.position.start_line < item.position.start_line:
            if parent is None or section.position.start_line > parent.position.start_line:
                parent = section
    return parent


def _slice(content: str, position: Position) -> str:
    return content[position.start_offset:position.end_offset]


def tasks_from_note(path: str, content: str, metadata: NoteMetadata) -> list[TaskRecord]:
    """Parse every task list item of one note."""
    tasks = []
    for item in metadata.list_items:
        if item.task is None:
            continue
        line_no = item.position.start_line
        outlinks: list[LinkRef] = [l for l in metadata.links if l.position.start_line == line_no]
        line_tags = [t.tag for t in metadata.tags if t.position.start_line == line_no]

        task = parse_line(
            _slice(content, item.position),
            path,
            section=find_parent(item, metadata),
            position=item.position,
            outlinks=outlinks,
            front_matter=metadata.front_matter,
            tags=line_tags,
        )
        if task:
            tasks.append(task)
    return tasks


def extract_tasks(store: NoteStore, config: Config) -> list[TaskRecord]:
    """Read every selected note and collect its tasks."""
    tasks: list[TaskRecord] = []
    for path in select_notes(store, config):
        try:
            content = store.read(path)
        except OSError as e:
            logger.error(f"Read file {path} failed: {e}")
            continue
        metadata = store.metadata(path, content)
        if not passes_tag_filters(metadata, config):
            continue
        tasks.extend(tasks_from_note(path, content, metadata))
    logger.debug(f"Extracted {len(tasks)} tasks")
    return tasks


def refresh(store: NoteStore, config: Config, snapshot: TaskSnapshot) -> bool:
    """Re-extract into the snapshot. Returns False if superseded."""
    token = snapshot.begin()
    tasks = extract_tasks(store, config)
    return snapshot.commit(token, tasks)


def build_timeline(store: NoteStore, config: Config, today: date) -> Timeline:
    """Extract all tasks and aggregate them into a timeline."""
    return aggregate(extract_tasks(store, config), today, config.timeline_options())


# ============== Task Edits ==============


def daily_note_path(config: Config, today: date) -> str:
    folder = config.daily_note_folder.strip("/")
    name = today.strftime(config.daily_note_format) + ".md"
    return f"{folder}/{name}" if folder else name


def quick_entry_files(config: Config, today: date) -> list[str]:
    """Files offered for new tasks: task files, inbox, today's daily note."""
    files = list(config.task_files)
    if config.inbox:
        files.append(config.inbox)
    if config.daily_note_format:
        files.append(daily_note_path(config, today))
    return list(dict.fromkeys(files))


def add_task(store: NoteStore, config: Config, path: str, text: str, today: date) -> str:
    """Expand quick-entry shorthand and append the task to a note."""
    line = new_task_line(expand_quick_entry(text + " ", today))
    store.append_task(path, line, config.section_for_new_tasks)
    logger.info(f"Added task to {path}: {line}")
    return line


def toggle_task(store: NoteStore, path: str, line_no: int, today: date) -> str:
    """Toggle completion of the task on a note line."""
    lines = store.read(path).split("\n")
    if not 0 <= line_no < len(lines):
        raise ValueError(f"Line {line_no} out of range for {path}")
    new_line = toggle_line(lines[line_no], today)
    store.replace_line(path, line_no, new_line)
    logger.info(f"Toggled task {path}:{line_no}")
    return new_line
