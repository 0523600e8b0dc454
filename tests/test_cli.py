import json
from pathlib import Path
from typing import Callable, List

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from scanbook import cli
from scanbook.assembly import count_pdf_pages
from scanbook.capture import CameraSource
from scanbook.cli import app
from scanbook.storage import FallbackBookStore
from scanbook.storage.config import StorageConfig

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "api_base_url": "http://127.0.0.1:9",
        "library_dir": str(tmp_path / "library"),
        "request_timeout": 0.5,
    }))
    return str(path)


def test_assemble_writes_pdf(tmp_path: Path, config_path: str, make_image: Callable[..., bytes]) -> None:
    """Test that the assemble command writes one page per image."""
    images = []
    for i, size in enumerate([(400, 600), (600, 400)]):
        path = tmp_path / f"page-{i}.jpg"
        path.write_bytes(make_image(*size))
        images.append(str(path))
    output = tmp_path / "scan.pdf"

    result = runner.invoke(app, ["--config", config_path, "assemble", *images, "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert count_pdf_pages(output.read_bytes()) == 2


def test_assemble_reports_bad_page(tmp_path: Path, config_path: str) -> None:
    """Test that decode failures exit with an error."""
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"nope")
    result = runner.invoke(app, ["--config", config_path, "assemble", str(bad), "-o", str(tmp_path / "x.pdf")])
    assert result.exit_code == 1
    assert not (tmp_path / "x.pdf").exists()


def test_add_book_and_notes_fall_back_to_local_store(tmp_path: Path, config_path: str, make_pdf: Callable[..., bytes]) -> None:
    """Test book and note commands when the API server is unreachable."""
    pdf_path = tmp_path / "Reader.pdf"
    pdf_path.write_bytes(make_pdf("Page one text"))

    result = runner.invoke(app, ["--config", config_path, "add", str(pdf_path), "--author", "Ada"])
    assert result.exit_code == 0, result.output
    book_id = result.output.strip().split("(")[-1].rstrip(")")

    listing = runner.invoke(app, ["--config", config_path, "books"])
    assert "Reader - Ada" in listing.output

    text = runner.invoke(app, ["--config", config_path, "page-text", book_id, "1"])
    assert text.exit_code == 0
    assert "Page one text" in text.output

    runner.invoke(app, ["--config", config_path, "notes", "add", book_id, "1", "remember this"])
    notes = runner.invoke(app, ["--config", config_path, "notes", "list", book_id])
    assert "p.1: remember this" in notes.output


class DroppingCapture:
    """Camera stand-in that delivers `good_reads` frames, then stops delivering."""

    def __init__(self, good_reads: int) -> None:
        self.good_reads = good_reads
        self.reads = 0

    def isOpened(self) -> bool:
        return True

    def set(self, prop: int, value: float) -> bool:
        return True

    def read(self):
        self.reads += 1
        if self.reads > self.good_reads:
            return False, None
        return True, np.full((120, 160, 3), 80, dtype=np.uint8)

    def release(self) -> None:
        pass


def _add_book(config_path: str, pdf_path: Path, *extra: str) -> str:
    result = runner.invoke(app, ["--config", config_path, "add", str(pdf_path), *extra])
    assert result.exit_code == 0, result.output
    return result.output.strip().split("(")[-1].rstrip(")")


def test_scan_keeps_pages_after_camera_failure(tmp_path: Path, config_path: str, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a dropped frame is reported and the pages captured before it are still written."""
    # start() reads one frame, the first capture a second one; every later read fails.
    monkeypatch.setattr(
        cli, "CameraSource",
        lambda device_index: CameraSource(device_index=device_index, capture_factory=lambda index: DroppingCapture(2)),
    )
    output = tmp_path / "scan.pdf"

    result = runner.invoke(app, ["--config", config_path, "scan", "-o", str(output)], input="\n\n\nq\n")

    assert result.exit_code == 0, result.output
    assert "delivered no frame" in result.output
    assert count_pdf_pages(output.read_bytes()) == 1


def test_books_search_matches_title_or_author(tmp_path: Path, config_path: str, make_pdf: Callable[..., bytes]) -> None:
    """Test case-insensitive filtering of the book listing."""
    for name, author in [("Calculus", "Spivak"), ("Poems", "Dickinson")]:
        pdf_path = tmp_path / f"{name}.pdf"
        pdf_path.write_bytes(make_pdf(name))
        _add_book(config_path, pdf_path, "--author", author)

    by_title = runner.invoke(app, ["--config", config_path, "books", "--search", "calc"])
    by_author = runner.invoke(app, ["--config", config_path, "books", "-s", "DICKINSON"])

    assert "Calculus - Spivak" in by_title.output and "Poems" not in by_title.output
    assert "Poems - Dickinson" in by_author.output and "Calculus" not in by_author.output


def test_export_writes_stored_pdf(tmp_path: Path, config_path: str, make_pdf: Callable[..., bytes]) -> None:
    """Test that export writes the stored document unchanged."""
    pdf_path = tmp_path / "Reader.pdf"
    pdf_path.write_bytes(make_pdf("one", "two"))
    book_id = _add_book(config_path, pdf_path)
    output = tmp_path / "out" / "copy.pdf"

    result = runner.invoke(app, ["--config", config_path, "export", book_id, "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_bytes() == pdf_path.read_bytes()

    missing = runner.invoke(app, ["--config", config_path, "export", "no-such-book", "-o", str(output)])
    assert missing.exit_code == 1


def test_render_page_with_zoom(tmp_path: Path, config_path: str, make_pdf: Callable[..., bytes]) -> None:
    """Test that render writes a PNG whose size follows the zoom steps."""
    pdf_path = tmp_path / "Reader.pdf"
    pdf_path.write_bytes(make_pdf("one", "two"))
    book_id = _add_book(config_path, pdf_path)
    small, large = tmp_path / "small.png", tmp_path / "large.png"

    first = runner.invoke(app, ["--config", config_path, "render", book_id, "2", "--zoom", "1.0", "-o", str(small)])
    second = runner.invoke(app, ["--config", config_path, "render", book_id, "2", "--zoom", "1.0", "--steps", "5", "-o", str(large)])

    assert first.exit_code == 0, first.output
    assert "zoom 2.0" in second.output
    with Image.open(small) as before, Image.open(large) as after:
        assert after.width > before.width

    out_of_range = runner.invoke(app, ["--config", config_path, "render", book_id, "3", "-o", str(small)])
    assert out_of_range.exit_code == 1


def test_store_is_created_once_and_closed(tmp_path: Path, config_path: str, make_pdf: Callable[..., bytes], monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a command shares one book store and closes it when done."""
    pdf_path = tmp_path / "Reader.pdf"
    pdf_path.write_bytes(make_pdf("Page one text"))
    book_id = _add_book(config_path, pdf_path)

    created: List[FallbackBookStore] = []
    create_book_store = StorageConfig.create_book_store

    def recording_factory(config):
        store = create_book_store(config)
        created.append(store)
        return store

    monkeypatch.setattr(StorageConfig, "create_book_store", staticmethod(recording_factory))
    result = runner.invoke(app, ["--config", config_path, "page-text", book_id, "1"])

    assert result.exit_code == 0, result.output
    assert len(created) == 1
    assert created[0].remote._client.is_closed
