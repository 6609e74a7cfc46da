"""
# pdf-visual-compare
----
Visual regression testing for PDF documents.

Every page of a candidate document and of an approved baseline document is
rendered to a PNG and both images are compared pixel by pixel with
[pixelmatch](https://github.com/whtsky/pixelmatch-py). Differences are written
as diff images, so a failing page can be inspected right away.

```python
from PdfCompare import ComparePdf

result = (
    ComparePdf({"settings": {"tolerance": 20}})
    .actual_pdf_file("invoice.pdf")
    .baseline_pdf_file("invoice.pdf")
    .add_mask(0, {"x0": 35, "y0": 70, "x1": 145, "y1": 95})
    .compare()
)
assert result.passed, result.to_dict()
```

Or as a single function call:

```python
from PdfCompare import compare_pdf_by_image

result = compare_pdf_by_image(
    "data/actualPdfs/invoice.pdf",
    "data/baselinePdfs/invoice.pdf",
    {
        "settings": {"threshold": 0.05, "tolerance": 0, "imageEngine": "native"},
        "skipPageIndexes": [2],
        "crops": [{"pageIndex": 0, "coordinates": {"x": 0, "y": 0, "width": 800, "height": 600}}],
    },
)
```

# Installation

```
pip install pdf-visual-compare
```

The default `native` engine renders with PyMuPDF. The `imageMagick` engine
uses [Wand](https://docs.wand-py.org) and needs ImageMagick and ghostscript
on the system.

# Settings

| =Setting= | =Description= |
| ``threshold`` | Per pixel sensitivity between 0.0 and 1.0, lower is stricter. Default ``0.05``. |
| ``tolerance`` | Number of different pixels that still count as equal. Default ``0``. |
| ``imageEngine`` | ``native`` (PyMuPDF) or ``imageMagick`` (Wand). Default ``native``. |
| ``density`` | Render resolution in DPI. Default ``100``. |
| ``matchPageCount`` | Fail if the page counts differ. Default ``true``. |
| ``cleanPngPaths`` | Empty the actual and baseline PNG folders after comparing. Default ``true``. |
| ``maxWorkers`` | Compare pages in parallel threads. Default ``1``. |

Every setting can also be provided as environment variable or in a `.env`
file, e.g. `PDFCOMPARE_TOLERANCE=10` or `PDFCOMPARE_DATA_ROOT=/tmp/pdfcompare`.

Staging folders are shared. Only run one comparison at a time against the
same folders.
"""
from PdfCompare.ComparisonConfig import (
    ComparisonConfig,
    ComparisonPaths,
    ComparisonSettings,
    ensure_dotenv_loaded,
    load_comparison_config,
)
from PdfCompare.ComparisonModels import (
    ComparisonResult,
    ComparisonStatus,
    Coordinates,
    PageCrop,
    PageMask,
)
from PdfCompare.ComparePdf import ComparePdf, compare_pdf_by_image
from PdfCompare.ComparePng import compare_pngs
from PdfCompare.PixelDiffer import PixelDiffer, diff_images
from PdfCompare.RegionEditor import RegionEditor
from PdfCompare.engines import get_image_engine

from importlib import metadata

try:
    __version__ = metadata.version("pdf-visual-compare")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "ComparePdf",
    "ComparisonConfig",
    "ComparisonPaths",
    "ComparisonResult",
    "ComparisonSettings",
    "ComparisonStatus",
    "Coordinates",
    "PageCrop",
    "PageMask",
    "PixelDiffer",
    "RegionEditor",
    "compare_pdf_by_image",
    "compare_pngs",
    "diff_images",
    "ensure_dotenv_loaded",
    "get_image_engine",
    "load_comparison_config",
]
