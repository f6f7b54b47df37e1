"""Tests for configuration loading."""

from pathlib import Path

import pytest

from taskido.config import TASKIDO_HOME, Config, load_config
from taskido.core.status import DEFAULT_STATUS_ORDER
from taskido.core.tasks import Status


@pytest.fixture(autouse=True)
def no_vault_env(monkeypatch):
    monkeypatch.delenv("TASKIDO_VAULT", raising=False)


def write_conf(tmp_path, text: str) -> Path:
    path = tmp_path / "taskido.conf"
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.conf")
        assert config == Config()
        assert config.task_order == DEFAULT_STATUS_ORDER

    def test_parses_keys(self, tmp_path):
        path = write_conf(
            tmp_path,
            """
# Vault settings
VAULT_DIR = "~/notes"  # my vault
TASK_FILES = Tasks.md, Projects/Work.md
EXCLUDE_PATHS = Archive, Templates
INCLUDE_TAGS = #work
SORT = priority,-due
DATE_FORMAT = '%Y-%m-%d'
FORWARD = yes
ENTRY_POSITION = top
REFRESH_INTERVAL = 10
HIDE_TAGS = #daily
""",
        )
        config = load_config(path)

        assert config.vault_dir == "~/notes"
        assert config.task_files == ["Tasks.md", "Projects/Work.md"]
        assert config.exclude_paths == ["Archive", "Templates"]
        assert config.include_tags == ["#work"]
        assert config.sort == "priority,-due"
        assert config.date_format == "%Y-%m-%d"
        assert config.forward is True
        assert config.entry_position == "top"
        assert config.refresh_interval == 10
        assert config.hide_tags == ["#daily"]

    def test_task_order(self, tmp_path):
        config = load_config(write_conf(tmp_path, "TASK_ORDER = done, overdue\n"))
        assert config.task_order == (Status.DONE, Status.OVERDUE)

    def test_invalid_values_keep_defaults(self, tmp_path):
        path = write_conf(
            tmp_path,
            "TASK_ORDER = done, later\nSORT = colour\nENTRY_POSITION = middle\nREFRESH_INTERVAL = soon\n",
        )
        config = load_config(path)

        assert config.task_order == DEFAULT_STATUS_ORDER
        assert config.sort == "order"
        assert config.entry_position == "today"
        assert config.refresh_interval == 30

    def test_unknown_keys_and_junk_ignored(self, tmp_path):
        config = load_config(write_conf(tmp_path, "COLOUR = blue\nnot a setting\n"))
        assert config == Config()

    def test_env_overrides_vault(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TASKIDO_VAULT", str(tmp_path))
        config = load_config(write_conf(tmp_path, "VAULT_DIR = ~/notes\n"))
        assert config.vault_dir == str(tmp_path)


class TestConfig:
    def test_vault_path_expands_user(self):
        assert Config(vault_dir="~/notes").vault_path == Path.home() / "notes"

    def test_vault_path_default(self):
        assert Config().vault_path == TASKIDO_HOME / "vault"

    def test_timeline_options(self):
        config = Config(sort="-due", forward=True, entry_position="bottom")
        options = config.timeline_options()
        assert options.sort == "-due"
        assert options.forward is True
        assert options.entry_position == "bottom"
        assert options.status_order == DEFAULT_STATUS_ORDER
