class RenderingEngineError(RuntimeError):
    """Raised when a rendering engine cannot rasterize or edit a file."""


class EngineDependencyError(RuntimeError):
    """Raised when the libraries behind a rendering engine are not available."""

    def __init__(self, message: str = ""):
        default = (
            "The imageMagick engine requires Wand and the ImageMagick (MagickWand) "
            "shared library. Install with 'pip install Wand' and make sure ImageMagick "
            "and ghostscript are installed on the system."
        )
        super().__init__(message or default)
