import logging
import os
import time
from typing import List, Optional, Tuple

import cv2
import fitz
import numpy as np
from PIL import ImageColor

from PdfCompare.ComparisonConfig import ComparisonConfig
from PdfCompare.ComparisonModels import Coordinates
from PdfCompare.Staging import base_name, page_png_path
from PdfCompare.exceptions import RenderingEngineError

LOG = logging.getLogger(__name__)


def color_to_bgr(color: str, channels: int = 3) -> Tuple[int, ...]:
    """Translate a CSS color name or ``#rrggbb`` into an OpenCV color tuple."""
    try:
        rgb = ImageColor.getrgb(color)
    except ValueError as err:
        raise ValueError(f"Unknown mask color: {color}") from err
    red, green, blue = rgb[:3]
    alpha = rgb[3] if len(rgb) == 4 else 255
    if channels == 4:
        return (blue, green, red, alpha)
    return (blue, green, red)


class NativeEngine:
    """Renders with PyMuPDF and edits page images with OpenCV."""

    name = "native"

    def pdf_to_png(self, source: str, output_png: str, config: Optional[ComparisonConfig] = None) -> List[str]:
        settings = (config or ComparisonConfig()).settings
        if os.path.isfile(source) is False:
            raise FileNotFoundError(f"The file does not exist: {source}")

        tic = time.perf_counter()
        fitz.TOOLS.set_aa_level(0)
        try:
            doc = fitz.open(source)
        except Exception as err:
            raise RenderingEngineError(f"File could not be opened by PyMuPDF: {source}") from err

        output_dir = os.path.dirname(output_png)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        name = base_name(output_png)
        written = []
        with doc:
            page_count = len(doc)
            try:
                for page_index in range(page_count):
                    page = doc.load_page(page_index)
                    pix = page.get_pixmap(dpi=settings.density)
                    path = page_png_path(output_dir, name, page_index, page_count)
                    pix.save(path)
                    written.append(path)
            except Exception as err:
                raise RenderingEngineError(
                    f"Page {len(written)} of {source} could not be rendered by PyMuPDF"
                ) from err
        toc = time.perf_counter()
        LOG.info(f"Rendering {source} ({len(written)} page(s)) with PyMuPDF performed in {toc - tic:0.4f} seconds")
        return written

    def apply_mask(self, image_path: str, coordinates: Coordinates, color: str) -> None:
        image = self._read(image_path)
        height, width = image.shape[:2]
        rect = coordinates.clip(width, height)
        if rect.width == 0 or rect.height == 0:
            LOG.debug("Mask %s lies outside of %s, nothing to draw", coordinates, image_path)
            return
        fill = color_to_bgr(color, image.shape[2])
        cv2.rectangle(image, (rect.x0, rect.y0), (rect.x1 - 1, rect.y1 - 1), fill, -1)
        self._write(image_path, image)

    def apply_crop(self, image_path: str, coordinates: Coordinates) -> None:
        image = self._read(image_path)
        height, width = image.shape[:2]
        rect = coordinates.clip(width, height)
        if rect.width == 0 or rect.height == 0:
            raise RenderingEngineError(
                f"Crop {coordinates.as_dict()} does not overlap the {width}x{height} image {image_path}"
            )
        self._write(image_path, np.ascontiguousarray(image[rect.y0:rect.y1, rect.x0:rect.x1]))

    @staticmethod
    def _read(image_path: str) -> np.ndarray:
        image = cv2.imread(image_path, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise RenderingEngineError(
                f"No OpenCV Image could be created for file {image_path} . Maybe the file is corrupt?"
            )
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        return image

    @staticmethod
    def _write(image_path: str, image: np.ndarray) -> None:
        if not cv2.imwrite(image_path, image):
            raise RenderingEngineError(f"Image could not be written to {image_path}")
