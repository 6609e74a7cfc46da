"""
Rendering engines used to rasterize documents and edit staged page images.

Each engine is a plain strategy exposing the same three operations. The
engine is picked by name from ``settings.image_engine`` at call time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Protocol

from PdfCompare.ComparisonModels import Coordinates
from PdfCompare.config import DEFAULT_IMAGE_ENGINE

if TYPE_CHECKING:  # pragma: no cover
    from PdfCompare.ComparisonConfig import ComparisonConfig

LOG = logging.getLogger(__name__)


class ImageEngine(Protocol):
    name: str

    def pdf_to_png(self, source: str, output_png: str, config: Optional["ComparisonConfig"] = None) -> List[str]:
        """Render every page of ``source`` next to ``output_png`` and return the written paths."""

    def apply_mask(self, image_path: str, coordinates: Coordinates, color: str) -> None:
        """Fill ``coordinates`` of the image with ``color`` in place."""

    def apply_crop(self, image_path: str, coordinates: Coordinates) -> None:
        """Reduce the image to ``coordinates`` in place."""


def _native() -> ImageEngine:
    from PdfCompare.engines.native import NativeEngine

    return NativeEngine()


def _image_magick() -> ImageEngine:
    from PdfCompare.engines.imagemagick import ImageMagickEngine

    return ImageMagickEngine()


ENGINES: Dict[str, Callable[[], ImageEngine]] = {
    "native": _native,
    "imageMagick": _image_magick,
}


def get_image_engine(name: Optional[str] = None) -> ImageEngine:
    """Return the engine registered as ``name``, falling back to ``native``."""
    name = name or DEFAULT_IMAGE_ENGINE
    factory = ENGINES.get(name)
    if factory is None:
        LOG.warning("Unknown image engine %r, using %r", name, DEFAULT_IMAGE_ENGINE)
        factory = ENGINES[DEFAULT_IMAGE_ENGINE]
    return factory()


__all__ = ["ImageEngine", "ENGINES", "get_image_engine"]
