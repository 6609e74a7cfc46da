"""Shared pytest fixtures for unit tests."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import cv2
import fitz
import numpy as np
import pytest

from PdfCompare.ComparisonConfig import ComparisonConfig, ComparisonPaths, ComparisonSettings
from PdfCompare.ComparisonModels import Coordinates
from PdfCompare.Staging import base_name, page_png_path
from PdfCompare.engines import ENGINES
from PdfCompare.engines.native import NativeEngine

Rect = Tuple[int, int, int, int]


def blank_page(width: int = 120, height: int = 80) -> np.ndarray:
    """Return a white BGR page."""
    return np.full((height, width, 3), 255, dtype=np.uint8)


def with_block(image: np.ndarray, x: int, y: int, width: int, height: int, color=(0, 0, 0)) -> np.ndarray:
    """Return a copy of ``image`` with a solid block of ``width * height`` pixels."""
    image = image.copy()
    image[y:y + height, x:x + width] = color
    return image


def write_png(path: Path, image: np.ndarray) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), image)
    return str(path)


class FakeEngine:
    """Stages prepared page images instead of rendering documents.

    Masks and crops are delegated to the native engine and recorded in ``calls``.
    """

    name = "fake"

    def __init__(self):
        self.documents: Dict[str, List[np.ndarray]] = {}
        self.calls: List[Tuple[str, str, Coordinates]] = []
        self.rendered: List[str] = []
        self._native = NativeEngine()

    def add_document(self, filename: str, pages: Sequence[np.ndarray]) -> str:
        self.documents[filename] = list(pages)
        return filename

    def pdf_to_png(self, source: str, output_png: str, config: Optional[ComparisonConfig] = None) -> List[str]:
        pages = self.documents[Path(source).name]
        self.rendered.append(source)
        output_dir = Path(output_png).parent
        name = base_name(output_png)
        return [
            write_png(Path(page_png_path(output_dir, name, index, len(pages))), page)
            for index, page in enumerate(pages)
        ]

    def apply_mask(self, image_path: str, coordinates: Coordinates, color: str) -> None:
        self.calls.append(("mask", image_path, coordinates))
        self._native.apply_mask(image_path, coordinates, color)

    def apply_crop(self, image_path: str, coordinates: Coordinates) -> None:
        self.calls.append(("crop", image_path, coordinates))
        self._native.apply_crop(image_path, coordinates)


@pytest.fixture
def fake_engine(monkeypatch: pytest.MonkeyPatch) -> FakeEngine:
    """Register a ``fake`` image engine for the duration of a test."""

    engine = FakeEngine()
    monkeypatch.setitem(ENGINES, "fake", lambda: engine)
    return engine


@pytest.fixture
def staging_paths(tmp_path: Path) -> ComparisonPaths:
    """Return staging and document roots below the test's temporary directory."""

    return ComparisonPaths(
        actual_pdf_root_folder=str(tmp_path / "actualPdfs"),
        baseline_pdf_root_folder=str(tmp_path / "baselinePdfs"),
        actual_png_root_folder=str(tmp_path / "actualPngs"),
        baseline_png_root_folder=str(tmp_path / "baselinePngs"),
        diff_png_root_folder=str(tmp_path / "diffPngs"),
    )


@pytest.fixture
def make_config(staging_paths: ComparisonPaths) -> Callable[..., ComparisonConfig]:
    """Build a ``ComparisonConfig`` using the temporary staging roots.

    Keyword arguments are split between settings and the config itself.
    """

    setting_names = set(ComparisonSettings.__dataclass_fields__)

    def _make(**kwargs) -> ComparisonConfig:
        settings = {key: kwargs.pop(key) for key in list(kwargs) if key in setting_names}
        settings.setdefault("density", 72)
        return ComparisonConfig(settings=ComparisonSettings(**settings), paths=staging_paths, **kwargs)

    return _make


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., str]:
    """Create a PDF with ``pages`` pages of 200x150 points.

    ``blocks`` maps a page index to filled black rectangles ``(x0, y0, x1, y1)``.
    Rendered at 72 DPI one point equals one pixel.
    """

    def _make(name: str, pages: int = 1, blocks: Optional[Dict[int, List[Rect]]] = None, directory: Optional[Path] = None) -> str:
        blocks = blocks or {}
        directory = directory or tmp_path / "pdfs"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        doc = fitz.open()
        for page_index in range(pages):
            page = doc.new_page(width=200, height=150)
            page.insert_text((20, 30), f"Page {page_index + 1}", fontsize=12)
            for x0, y0, x1, y1 in blocks.get(page_index, []):
                page.draw_rect(fitz.Rect(x0, y0, x1, y1), color=None, fill=(0, 0, 0), width=0)
        doc.save(str(path))
        doc.close()
        return str(path)

    return _make
