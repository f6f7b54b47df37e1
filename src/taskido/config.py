"""Configuration management for Taskido."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.status import DEFAULT_STATUS_ORDER, normalize_status_order
from .core.tasks import Status
from .core.timeline import ENTRY_POSITIONS, TimelineOptions
from .core.filters import sort_key

logger = logging.getLogger(__name__)

TASKIDO_HOME = Path(os.environ.get("TASKIDO_HOME", Path.home() / "taskido"))
CONFIG_FILE = TASKIDO_HOME / "config" / "taskido.conf"

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Config:
    """Taskido configuration."""

    vault_dir: str = ""
    task_files: list[str] = field(default_factory=list)
    inbox: str = "Inbox.md"
    include_paths: list[str] = field(default_factory=list)
    exclude_paths: list[str] = field(default_factory=list)
    include_tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    task_order: tuple[Status, ...] = DEFAULT_STATUS_ORDER
    sort: str = "order"
    date_format: str = "%a, %b %d"
    daily_note_folder: str = ""
    daily_note_format: str = "%Y-%m-%d"
    section_for_new_tasks: str = "## Tasks"
    forward: bool = False
    entry_position: str = "today"
    hide_tags: list[str] = field(default_factory=list)
    refresh_interval: int = 30

    @property
    def vault_path(self) -> Path:
        if self.vault_dir:
            return Path(self.vault_dir).expanduser()
        return TASKIDO_HOME / "vault"

    def timeline_options(self) -> TimelineOptions:
        return TimelineOptions(
            status_order=self.task_order,
            sort=self.sort,
            forward=self.forward,
            entry_position=self.entry_position,
        )


def _split_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _unquote(value: str) -> str:
    """Handle quoted values with inline comments: "value" # comment"""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if " # " in value:
        value = value.split(" # ")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskido.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "vault_dir":
                    config.vault_dir = value
                case "task_files":
                    config.task_files = _split_list(value)
                case "inbox":
                    config.inbox = value
                case "include_paths":
                    config.include_paths = _split_list(value)
                case "exclude_paths":
                    config.exclude_paths = _split_list(value)
                case "include_tags":
                    config.include_tags = _split_list(value)
                case "exclude_tags":
                    config.exclude_tags = _split_list(value)
                case "task_order":
                    try:
                        config.task_order = normalize_status_order(_split_list(value))
                    except ValueError as e:
                        logger.warning(f"Invalid TASK_ORDER, using default: {e}")
                case "sort":
                    try:
                        sort_key(value)
                        config.sort = value
                    except ValueError as e:
                        logger.warning(f"Invalid SORT, using default: {e}")
                case "date_format":
                    config.date_format = value
                case "daily_note_folder":
                    config.daily_note_folder = value
                case "daily_note_format":
                    config.daily_note_format = value
                case "section_for_new_tasks":
                    config.section_for_new_tasks = value
                case "forward":
                    config.forward = value.lower() in TRUE_VALUES
                case "entry_position":
                    if value in ENTRY_POSITIONS:
                        config.entry_position = value
                    else:
                        logger.warning(f"Invalid ENTRY_POSITION {value!r}, using 'today'")
                case "hide_tags":
                    config.hide_tags = _split_list(value)
                case "refresh_interval":
                    try:
                        config.refresh_interval = max(1, int(value))
                    except ValueError:
                        logger.warning(f"Invalid REFRESH_INTERVAL {value!r}, using default")

    if os.environ.get("TASKIDO_VAULT"):
        config.vault_dir = os.environ["TASKIDO_VAULT"]

    return config
