import logging
import time
from typing import Tuple, Union
from pathlib import Path

from PIL import Image
from pixelmatch.contrib.PIL import pixelmatch

from PdfCompare.config import DEFAULT_THRESHOLD

LOG = logging.getLogger(__name__)


def load_raster(path: Union[str, Path]) -> Image.Image:
    """Load an image from disk as RGBA."""
    with Image.open(path) as img:
        return img.convert("RGBA")


class PixelDiffer:
    """Counts the pixels that differ between two equally sized images.

    | =Arguments= | =Description= |
    | ``threshold`` | Per pixel sensitivity between 0.0 and 1.0. Lower values are stricter. |
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def diff(self, image_a: Image.Image, image_b: Image.Image) -> Tuple[Image.Image, int]:
        """Return a diff image highlighting changed pixels and the number of changed pixels.

        Raises ``ValueError`` if the images have different dimensions.
        """
        if image_a.size != image_b.size:
            raise ValueError(
                f"Image dimensions are different: {image_a.size} vs {image_b.size}"
            )
        image_a = image_a if image_a.mode == "RGBA" else image_a.convert("RGBA")
        image_b = image_b if image_b.mode == "RGBA" else image_b.convert("RGBA")
        diff_image = Image.new("RGBA", image_a.size)

        tic = time.perf_counter()
        num_diff_pixels = pixelmatch(image_a, image_b, diff_image, threshold=self.threshold)
        toc = time.perf_counter()
        LOG.debug(
            "Pixel comparison of %dx%d image performed in %0.4f seconds, %d pixel(s) differ",
            image_a.size[0], image_a.size[1], toc - tic, num_diff_pixels,
        )
        return diff_image, num_diff_pixels


def diff_images(image_a: Image.Image, image_b: Image.Image, threshold: float = DEFAULT_THRESHOLD) -> Tuple[Image.Image, int]:
    return PixelDiffer(threshold).diff(image_a, image_b)
