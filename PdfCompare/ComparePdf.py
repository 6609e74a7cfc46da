import logging
import os
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from PdfCompare.ComparePng import compare_pngs
from PdfCompare.ComparisonConfig import ComparisonConfig, load_comparison_config
from PdfCompare.ComparisonModels import ComparisonResult, Coordinates, PageCrop, PageMask
from PdfCompare.Downloader import download_file_from_url, is_url
from PdfCompare.RegionEditor import RegionEditor
from PdfCompare.Staging import (
    base_name,
    diff_png_path,
    ensure_and_cleanup_path,
    list_staged_pages,
    page_png_path,
)
from PdfCompare.config import COMPARE_TYPE_DEFAULT, DEFAULT_MASK_COLOR
from PdfCompare.engines import get_image_engine

LOG = logging.getLogger(__name__)


def compare_pdf_by_image(
    actual_pdf: Union[str, Path],
    baseline_pdf: Union[str, Path],
    config: Union[ComparisonConfig, Mapping[str, Any], None] = None,
) -> ComparisonResult:
    """Compare the documents ``actual_pdf`` and ``baseline_pdf`` page by page.

    Both documents are rendered into the PNG staging folders of ``config``, masks
    and crops are applied to the selected pages and every page pair is diffed.
    The result is failed if the page counts differ (with ``match_page_count``)
    or if any compared page differs. Failures of the rendering engine are raised.
    """
    config = load_comparison_config(config)
    settings, paths = config.settings, config.paths
    engine = get_image_engine(settings.image_engine)
    editor = RegionEditor(engine)

    actual_name = base_name(actual_pdf)
    baseline_name = base_name(baseline_pdf)

    actual_dir = ensure_and_cleanup_path(Path(paths.actual_png_root_folder) / actual_name)
    baseline_dir = ensure_and_cleanup_path(Path(paths.baseline_png_root_folder) / baseline_name)
    diff_dir = ensure_and_cleanup_path(Path(paths.diff_png_root_folder) / actual_name)

    engine.pdf_to_png(str(actual_pdf), str(actual_dir / f"{actual_name}.png"), config)
    engine.pdf_to_png(str(baseline_pdf), str(baseline_dir / f"{baseline_name}.png"), config)

    actual_pngs = list_staged_pages(actual_dir, actual_name)
    baseline_pngs = list_staged_pages(baseline_dir, baseline_name)

    if settings.match_page_count and len(actual_pngs) != len(baseline_pngs):
        message = (
            f"Actual pdf page count ({len(actual_pngs)}) is not the same as "
            f"Baseline pdf ({len(baseline_pngs)})."
        )
        LOG.info(message)
        result = ComparisonResult.failure(message=message)
    else:
        tic = time.perf_counter()
        page_results = _compare_pages(
            config, editor, len(baseline_pngs),
            actual_dir, actual_name, baseline_dir, baseline_name, diff_dir,
        )
        toc = time.perf_counter()
        LOG.info(f"Compared {len(page_results)} page(s) of {actual_name} in {toc - tic:0.4f} seconds")

        failed_results = [page_result for page_result in page_results if page_result.failed]
        if failed_results:
            result = ComparisonResult.failure(
                message=f"{actual_name}.pdf is not the same as {baseline_name}.pdf compared by their images.",
                details=failed_results,
            )
        else:
            result = ComparisonResult.success()

    if settings.clean_png_paths:
        ensure_and_cleanup_path(paths.actual_png_root_folder)
        ensure_and_cleanup_path(paths.baseline_png_root_folder)

    return result


def _compare_pages(
    config: ComparisonConfig,
    editor: RegionEditor,
    page_count: int,
    actual_dir: Path,
    actual_name: str,
    baseline_dir: Path,
    baseline_name: str,
    diff_dir: Path,
) -> List[ComparisonResult]:
    selected = []
    for index in range(page_count):
        if config.is_page_selected(index):
            selected.append(index)
        else:
            LOG.debug("Page %d of %s is skipped", index, actual_name)

    def compare_page(index: int) -> ComparisonResult:
        actual_png = page_png_path(actual_dir, actual_name, index, page_count)
        baseline_png = page_png_path(baseline_dir, baseline_name, index, page_count)
        diff_png = diff_png_path(diff_dir, actual_name, index, page_count)
        editor.apply_page_edits(index, [actual_png, baseline_png], config)
        return compare_pngs(actual_png, baseline_png, diff_png, config)

    if config.settings.max_workers > 1 and len(selected) > 1:
        # map keeps page order and re-raises engine errors while collecting
        with ThreadPoolExecutor(max_workers=config.settings.max_workers) as executor:
            return list(executor.map(compare_page, selected))
    return [compare_page(index) for index in selected]


class ComparePdf:
    """Collects documents, masks, crops and page filters for one comparison.

    Example:
    | result = (
    |     ComparePdf({"settings": {"tolerance": 10}})
    |     .actual_pdf_file("invoice.pdf")
    |     .baseline_pdf_file("invoice.pdf")
    |     .add_mask(0, {"x0": 35, "y0": 70, "x1": 145, "y1": 95})
    |     .compare()
    | )
    """

    def __init__(self, config: Union[ComparisonConfig, Mapping[str, Any], None] = None):
        self.config = load_comparison_config(config)
        self.actual_pdf: Optional[str] = None
        self.baseline_pdf: Optional[str] = None
        self.masks: List[PageMask] = list(self.config.masks)
        self.crops: List[PageCrop] = list(self.config.crops)
        self.only_indexes: List[int] = sorted(self.config.only_page_indexes)
        self.skip_indexes: List[int] = sorted(self.config.skip_page_indexes)

    def actual_pdf_file(self, actual_pdf: Union[str, Path]) -> "ComparePdf":
        self.actual_pdf = self._resolve_pdf(actual_pdf, self.config.paths.actual_pdf_root_folder)
        return self

    def baseline_pdf_file(self, baseline_pdf: Union[str, Path]) -> "ComparePdf":
        self.baseline_pdf = self._resolve_pdf(baseline_pdf, self.config.paths.baseline_pdf_root_folder)
        return self

    def actual_pdf_buffer(self, data: bytes, filename: Optional[str] = None) -> "ComparePdf":
        self.actual_pdf = self._write_buffer(
            data, filename or f"actual_{uuid.uuid4().hex}.pdf", self.config.paths.actual_pdf_root_folder
        )
        return self

    def baseline_pdf_buffer(self, data: bytes, filename: Optional[str] = None) -> "ComparePdf":
        self.baseline_pdf = self._write_buffer(
            data, filename or f"baseline_{uuid.uuid4().hex}.pdf", self.config.paths.baseline_pdf_root_folder
        )
        return self

    def add_mask(
        self,
        page_index: int,
        coordinates: Union[Coordinates, Mapping[str, Any], None] = None,
        color: str = DEFAULT_MASK_COLOR,
    ) -> "ComparePdf":
        if coordinates is None:
            coordinates = {"x0": 0, "y0": 0, "x1": 0, "y1": 0}
        self.masks.append(PageMask(int(page_index), Coordinates.from_value(coordinates), color))
        return self

    def add_masks(self, masks: Iterable[Union[PageMask, Mapping[str, Any]]]) -> "ComparePdf":
        self.masks.extend(PageMask.from_value(mask) for mask in masks)
        return self

    def only_page_indexes(self, page_indexes: Iterable[int]) -> "ComparePdf":
        self.only_indexes.extend(int(index) for index in page_indexes)
        return self

    def skip_page_indexes(self, page_indexes: Iterable[int]) -> "ComparePdf":
        self.skip_indexes.extend(int(index) for index in page_indexes)
        return self

    def crop_page(self, page_index: int, coordinates: Union[Coordinates, Mapping[str, Any]]) -> "ComparePdf":
        self.crops.append(PageCrop(int(page_index), Coordinates.from_value(coordinates)))
        return self

    def crop_pages(self, crops: Iterable[Union[PageCrop, Mapping[str, Any]]]) -> "ComparePdf":
        self.crops.extend(PageCrop.from_value(crop) for crop in crops)
        return self

    def build_config(self) -> ComparisonConfig:
        return replace(
            self.config,
            masks=tuple(self.masks),
            crops=tuple(self.crops),
            only_page_indexes=frozenset(self.only_indexes),
            skip_page_indexes=frozenset(self.skip_indexes),
        )

    def compare(self, compare_type: str = COMPARE_TYPE_DEFAULT) -> ComparisonResult:
        if self.actual_pdf is None or self.baseline_pdf is None:
            raise ValueError("Actual and baseline pdf have to be set before comparing.")
        if compare_type != COMPARE_TYPE_DEFAULT:
            raise ValueError(f"Unsupported compare type {compare_type!r}, only {COMPARE_TYPE_DEFAULT!r} is available.")
        return compare_pdf_by_image(self.actual_pdf, self.baseline_pdf, self.build_config())

    @staticmethod
    def _resolve_pdf(pdf: Union[str, Path], root_folder: str) -> str:
        if is_url(pdf):
            return download_file_from_url(str(pdf), directory=root_folder)
        path = Path(pdf)
        if path.is_file():
            return str(path)
        if not path.suffix:
            path = path.with_name(path.name + ".pdf")
            if path.is_file():
                return str(path)
        if not path.is_absolute():
            path = Path(root_folder) / path
        return str(path)

    @staticmethod
    def _write_buffer(data: bytes, filename: str, root_folder: str) -> str:
        os.makedirs(root_folder, exist_ok=True)
        path = os.path.join(root_folder, filename)
        with open(path, "wb") as f:
            f.write(data)
        return path
