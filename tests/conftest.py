"""Shared test fixtures for vmscaffold tests."""
from pathlib import Path
from types import SimpleNamespace

import pytest

from vmscaffold.core.config import ScaffoldConfig
from vmscaffold.core.logger import reset_file_logging
from vmscaffold.scaffold import ScaffoldManager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep user environment and config files out of tests."""
    for var in (
        "VMSCAFFOLD_CONFIG",
        "VMSCAFFOLD_BOX",
        "VMSCAFFOLD_MEMORY",
        "VMSCAFFOLD_CPUS",
        "VMSCAFFOLD_TEMPLATES_DIR",
        "VMSCAFFOLD_GIT",
        "VMSCAFFOLD_MOCK",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("vmscaffold.core.config.CONFIG_PATHS", [])


@pytest.fixture(autouse=True)
def detach_log_files():
    """Drop file handlers added by --log-file / --verbose runs."""
    yield
    reset_file_logging()


@pytest.fixture
def git_calls(monkeypatch):
    """Replace subprocess.run for git with a fake that creates .git."""
    calls = []

    def fake_run(args, cwd=None, **kwargs):
        calls.append((tuple(args), cwd))
        if args[1:2] == ["init"] and cwd:
            (Path(cwd) / ".git").mkdir(exist_ok=True)
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setattr("vmscaffold.services.git_manager.subprocess.run", fake_run)
    return calls


@pytest.fixture
def manager(tmp_path, git_calls):
    """ScaffoldManager writing into tmp_path with fake git."""
    return ScaffoldManager(config=ScaffoldConfig(), output_dir=tmp_path)
