import logging
import os
import time
from typing import List, Optional

from PdfCompare.ComparisonConfig import ComparisonConfig
from PdfCompare.ComparisonModels import Coordinates
from PdfCompare.Staging import base_name, page_png_path
from PdfCompare.exceptions import EngineDependencyError, RenderingEngineError

LOG = logging.getLogger(__name__)


def _load_wand():
    try:
        from wand.color import Color
        from wand.drawing import Drawing
        from wand.exceptions import WandException
        from wand.image import Image
    except ImportError as err:
        raise EngineDependencyError() from err
    return Image, Color, Drawing, WandException


class ImageMagickEngine:
    """Renders and edits page images through ImageMagick using Wand.

    Rendering PDF files additionally needs ghostscript on the ``PATH``.
    """

    name = "imageMagick"

    def pdf_to_png(self, source: str, output_png: str, config: Optional[ComparisonConfig] = None) -> List[str]:
        Image, Color, _, WandException = _load_wand()
        settings = (config or ComparisonConfig()).settings
        if os.path.isfile(source) is False:
            raise FileNotFoundError(f"The file does not exist: {source}")

        output_dir = os.path.dirname(output_png)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        name = base_name(output_png)
        written = []
        tic = time.perf_counter()
        try:
            with Image(filename=source, resolution=settings.density) as document:
                pages = document.sequence
                page_count = len(pages)
                for page_index in range(page_count):
                    with Image(image=pages[page_index]) as page:
                        page.background_color = Color('white')  # Set white background.
                        page.alpha_channel = 'remove'  # Remove transparency and replace with bg.
                        page.format = 'png'
                        path = page_png_path(output_dir, name, page_index, page_count)
                        page.save(filename=path)
                        written.append(path)
        except WandException as err:
            raise RenderingEngineError(f"File could not be converted by ImageMagick: {source}") from err
        toc = time.perf_counter()
        LOG.info(f"Rendering {source} ({len(written)} page(s)) with ImageMagick performed in {toc - tic:0.4f} seconds")
        return written

    def apply_mask(self, image_path: str, coordinates: Coordinates, color: str) -> None:
        Image, Color, Drawing, WandException = _load_wand()
        try:
            with Image(filename=image_path) as img:
                rect = coordinates.clip(img.width, img.height)
                if rect.width == 0 or rect.height == 0:
                    LOG.debug("Mask %s lies outside of %s, nothing to draw", coordinates, image_path)
                    return
                with Drawing() as draw:
                    draw.fill_color = Color(color)
                    draw.stroke_width = 0
                    draw.rectangle(left=rect.x0, top=rect.y0, right=rect.x1 - 1, bottom=rect.y1 - 1)
                    draw(img)
                img.save(filename=image_path)
        except WandException as err:
            raise RenderingEngineError(f"Mask could not be applied to {image_path}") from err

    def apply_crop(self, image_path: str, coordinates: Coordinates) -> None:
        Image, _, _, WandException = _load_wand()
        try:
            with Image(filename=image_path) as img:
                rect = coordinates.clip(img.width, img.height)
                if rect.width == 0 or rect.height == 0:
                    raise RenderingEngineError(
                        f"Crop {coordinates.as_dict()} does not overlap the {img.width}x{img.height} image {image_path}"
                    )
                img.crop(left=rect.x0, top=rect.y0, width=rect.width, height=rect.height)
                img.reset_coords()
                img.save(filename=image_path)
        except WandException as err:
            raise RenderingEngineError(f"Crop could not be applied to {image_path}") from err
