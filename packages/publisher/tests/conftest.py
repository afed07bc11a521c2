"""Test configuration for publisher tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from doccloud_publisher import BookRef, ProgressCounter, PublishConfig


class RecordingProgress:
    """ProgressSink that records every call, in order."""

    def __init__(self):
        self.calls: list[tuple] = []

    def expand_to(self, total: int) -> None:
        self.calls.append(("expand_to", total))

    def expand_by(self, units: int) -> None:
        self.calls.append(("expand_by", units))

    def tick(self) -> None:
        self.calls.append(("tick",))

    def fill(self) -> None:
        self.calls.append(("fill",))

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


def write_book(outdir: Path, name: str, files: dict[str, bytes]) -> Path:
    """Create ``outdir/name`` with ``files`` (relative posix path -> content)."""
    root = outdir / name
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    return root


@pytest.fixture
def make_book():
    return write_book


@pytest.fixture
def build_dir(tmp_path) -> Path:
    """Compiled output for book-1 and book-2 sharing one outdir."""
    outdir = tmp_path / "build"
    write_book(
        outdir,
        "book-1",
        {
            "index.html": b"<h1>Book 1</h1>",
            "sub/page.html": b"<p>page</p>",
            "assets/logo.png": bytes(range(256)),
        },
    )
    write_book(
        outdir,
        "book-2",
        {
            "index.html": b"<h1>Book 2</h1>",
            "deep/er/chapter.html": b"<p>chapter</p>",
        },
    )
    return outdir


@pytest.fixture
def config(build_dir) -> PublishConfig:
    return PublishConfig(
        name="pandora-cloud",
        version="1.0.0",
        books=[
            BookRef(name="book-1", outdir=str(build_dir)),
            BookRef(name="book-2", outdir=str(build_dir)),
        ],
    )


@pytest.fixture
def storage(tmp_path) -> Path:
    path = tmp_path / "storage"
    path.mkdir()
    return path


@pytest.fixture
def recording_progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def progress() -> ProgressCounter:
    return ProgressCounter()
