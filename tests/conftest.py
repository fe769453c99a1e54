"""
Shared test fixtures — mock process runner and a project skeleton.

The mock runner materialises a minimal application skeleton when the
template create command runs, so pipelines can run end to end without
composer, php or a network.
"""

import json
from pathlib import Path

import pytest

from appstrap.adapters.mock import MockProcessRunner

SKELETON_ENV = """\
APP_NAME=PocketFrame
APP_ENV=local
APP_KEY=
APP_DEBUG=true

DB_CONNECTION=mysql
# DB_HOST=127.0.0.1
# DB_PORT=3306
# DB_DATABASE=pocketframe
# DB_USERNAME=root
# DB_PASSWORD=

MAIL_MAILER=log
"""


def materialise_skeleton(root: Path, with_package_json: bool = False) -> Path:
    """Write the files a fresh application template ships with."""
    root.mkdir(parents=True)
    (root / ".env.example").write_text(SKELETON_ENV)
    (root / "composer.json").write_text(json.dumps({"name": "pocketframe/application"}))
    (root / "public").mkdir()
    (root / "public" / "index.php").write_text("<?php\n")
    if with_package_json:
        (root / "package.json").write_text(json.dumps({"name": "app", "private": True}))
    return root


def skeleton_handler(with_package_json: bool = False):
    """Create-command handler: ``composer create-project <pkg> <name> ...``."""

    def _create(command, cwd):
        materialise_skeleton(Path(cwd) / command[3], with_package_json=with_package_json)
        return "Installing pocketframe/application"

    return _create


@pytest.fixture
def make_runner():
    """Build a mock runner whose create command materialises a skeleton."""

    def _make(available_tools=None, with_package_json=False) -> MockProcessRunner:
        runner = MockProcessRunner(available_tools=available_tools)
        runner.on("composer create-project", skeleton_handler(with_package_json))
        return runner

    return _make


@pytest.fixture
def mock_runner(make_runner) -> MockProcessRunner:
    """Runner where every tool exists and create-project builds a skeleton."""
    return make_runner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty, writable parent directory for new projects."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def write_document(tmp_path: Path):
    """Write a configuration document and return its path."""

    def _write(data: dict, name: str = "appstrap.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return _write


@pytest.fixture
def sqlite_document(write_document) -> Path:
    return write_document(
        {"db_driver": "sqlite", "with_docker": False, "telemetry": False, "init_git": False}
    )


@pytest.fixture
def skeleton_env() -> str:
    """The ``.env.example`` a fresh template ships with."""
    return SKELETON_ENV
