# config.py
DEFAULT_THRESHOLD = 0.05  # Per-pixel sensitivity passed to pixelmatch
DEFAULT_TOLERANCE = 0  # Number of differing pixels still considered equal
DEFAULT_DENSITY = 100  # Resolution in DPI used to render documents
DEFAULT_IMAGE_ENGINE = 'native'
DEFAULT_MASK_COLOR = 'black'
DEFAULT_DATA_ROOT = 'data'
ACTUAL_PDF_FOLDER = 'actualPdfs'
BASELINE_PDF_FOLDER = 'baselinePdfs'
ACTUAL_PNG_FOLDER = 'actualPngs'
BASELINE_PNG_FOLDER = 'baselinePngs'
DIFF_PNG_FOLDER = 'diffPngs'
COMPARE_TYPE_DEFAULT = 'byImage'
