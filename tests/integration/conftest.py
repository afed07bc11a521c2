"""Shared fixtures for end-to-end publish tests.

Builds a real compiled-output tree on disk; Doc Cloud itself is mocked with
respx in the tests.
"""

from pathlib import Path

import pytest

from doccloud_common import Settings
from doccloud_publisher import BookRef, ProgressCounter, PublishConfig

DOC_CLOUD_URL = "https://doccloud.test/api/packages"

BOOK_FILES = {
    "book-1": {
        "index.html": b"<h1>Book 1</h1>",
        "sub/page.html": b"<p>page</p>",
        "img/cover.png": b"\x89PNG\r\n\x1a\n" + bytes(range(64)),
    },
    "book-2": {
        "index.html": b"<h1>Book 2</h1>",
        "api/reference/index.html": b"<h2>API</h2>",
    },
}


@pytest.fixture
def build_dir(tmp_path) -> Path:
    outdir = tmp_path / "build"
    for book, files in BOOK_FILES.items():
        for relative, content in files.items():
            path = outdir / book / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
    return outdir


@pytest.fixture
def publish_config(build_dir) -> PublishConfig:
    return PublishConfig(
        name="pandora-cloud",
        version="1.0.0",
        books=[
            BookRef(name="book-1", outdir=str(build_dir)),
            BookRef(name="book-2", outdir=str(build_dir)),
        ],
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(doc_cloud_url=DOC_CLOUD_URL, upload_timeout=10)


@pytest.fixture
def scratch(tmp_path) -> Path:
    return tmp_path / "scratch"


@pytest.fixture
def progress() -> ProgressCounter:
    return ProgressCounter()
