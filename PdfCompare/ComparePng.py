import logging
import os
from typing import Any, Mapping, Union

from PdfCompare.ComparisonConfig import ComparisonConfig, load_comparison_config
from PdfCompare.ComparisonModels import ComparisonResult
from PdfCompare.PixelDiffer import PixelDiffer, load_raster

LOG = logging.getLogger(__name__)


def compare_pngs(
    actual: str,
    baseline: str,
    diff: str,
    config: Union[ComparisonConfig, Mapping[str, Any], None] = None,
) -> ComparisonResult:
    """Compare the staged page ``actual`` with ``baseline``.

    | =Arguments= | =Description= |
    | ``actual`` | Path of the candidate PNG. |
    | ``baseline`` | Path of the baseline PNG. |
    | ``diff`` | Path the diff PNG is written to, only if the pages differ. |
    | ``config`` | ``ComparisonConfig`` or config dict providing ``threshold`` and ``tolerance``. |

    Never raises: unreadable or mismatching images produce a failed result
    carrying the error.
    """
    try:
        settings = load_comparison_config(config).settings
        actual_png = load_raster(actual)
        baseline_png = load_raster(baseline)

        differ = PixelDiffer(settings.effective_threshold)
        diff_png, num_diff_pixels = differ.diff(actual_png, baseline_png)

        if num_diff_pixels > settings.effective_tolerance:
            directory = os.path.dirname(diff)
            if directory:
                os.makedirs(directory, exist_ok=True)
            diff_png.save(diff, format="PNG")
            LOG.info("%s differs from %s in %d pixel(s), diff saved to %s", actual, baseline, num_diff_pixels, diff)
            return ComparisonResult.failure(num_diff_pixels=num_diff_pixels, diff_png=diff)
        return ComparisonResult.success()
    except Exception as error:
        LOG.warning("Comparison of %s with %s failed: %s", actual, baseline, error)
        return ComparisonResult.failure(actual=actual, error=error)
