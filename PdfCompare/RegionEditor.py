import logging
from typing import Any, Mapping, Sequence, Union

from PdfCompare.ComparisonConfig import ComparisonConfig
from PdfCompare.ComparisonModels import Coordinates
from PdfCompare.config import DEFAULT_MASK_COLOR
from PdfCompare.engines import ImageEngine

LOG = logging.getLogger(__name__)


class RegionEditor:
    """Applies masks and crops to staged page images through a rendering engine."""

    def __init__(self, engine: ImageEngine):
        self.engine = engine

    def apply_mask(
        self,
        image_path: str,
        coordinates: Union[Coordinates, Mapping[str, Any]],
        color: str = DEFAULT_MASK_COLOR,
    ):
        coordinates = Coordinates.from_value(coordinates)
        LOG.debug("Masking %s of %s with %s", coordinates.as_dict(), image_path, color)
        self.engine.apply_mask(image_path, coordinates, color or DEFAULT_MASK_COLOR)

    def apply_crop(self, image_path: str, coordinates: Union[Coordinates, Mapping[str, Any]]):
        coordinates = Coordinates.from_value(coordinates)
        LOG.debug("Cropping %s to %s", image_path, coordinates.as_dict())
        self.engine.apply_crop(image_path, coordinates)

    def apply_page_edits(self, page_index: int, image_paths: Sequence[str], config: ComparisonConfig):
        """Apply all masks, then all crops ``config`` holds for ``page_index`` to every image.

        Edits run in the order they are listed, so several edits of one page add up.
        """
        for mask in config.masks_for_page(page_index):
            for image_path in image_paths:
                self.apply_mask(image_path, mask.coordinates, mask.color)
        for crop in config.crops_for_page(page_index):
            for image_path in image_paths:
                self.apply_crop(image_path, crop.coordinates)
