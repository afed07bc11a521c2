"""Test configuration for CLI tests."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from reconfiguring global logging during tests."""
    with patch("doccloud_cli.main.configure_logging") as mock:
        yield mock


@pytest.fixture
def config_file(tmp_path):
    """publish.json describing two compiled books under tmp_path/build."""
    build = tmp_path / "build"
    for name in ("book-1", "book-2"):
        (build / name / "sub").mkdir(parents=True)
        (build / name / "index.html").write_text(f"<h1>{name}</h1>")
        (build / name / "sub" / "page.html").write_text("<p>page</p>")

    path = tmp_path / "publish.json"
    path.write_text(
        json.dumps(
            {
                "name": "pandora-cloud",
                "version": "1.0.0",
                "books": [
                    {"name": "book-1", "outdir": str(build)},
                    {"name": "book-2", "outdir": str(build)},
                ],
            }
        )
    )
    return path
