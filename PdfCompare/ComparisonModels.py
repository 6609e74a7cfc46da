from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from PdfCompare.config import DEFAULT_MASK_COLOR


__all__ = [
    "Coordinates",
    "PageMask",
    "PageCrop",
    "ComparisonStatus",
    "ComparisonResult",
]


@dataclass(frozen=True)
class Coordinates:
    """Rectangle in page pixel space, stored as two corners.

    ``x1``/``y1`` are exclusive, so ``width == x1 - x0``.
    """

    x0: int
    y0: int
    x1: int
    y1: int

    def __post_init__(self):
        if self.x1 < self.x0 or self.y1 < self.y0:
            raise ValueError(f"Invalid rectangle, corners are swapped: {self}")

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @classmethod
    def from_value(cls, value: Union["Coordinates", Mapping[str, Any]]) -> "Coordinates":
        """Accept ``{x0, y0, x1, y1}`` or ``{x, y, width, height}``."""
        if isinstance(value, Coordinates):
            return value
        if not isinstance(value, Mapping):
            raise ValueError(f"Coordinates must be a mapping, got {type(value).__name__}")
        if all(key in value for key in ("x0", "y0", "x1", "y1")):
            return cls(int(value["x0"]), int(value["y0"]), int(value["x1"]), int(value["y1"]))
        if all(key in value for key in ("width", "height")):
            x, y = int(value.get("x", 0)), int(value.get("y", 0))
            width, height = int(value["width"]), int(value["height"])
            if width < 0 or height < 0:
                raise ValueError(f"Width and height must not be negative: {dict(value)}")
            return cls(x, y, x + width, y + height)
        raise ValueError(
            f"Coordinates need either x0/y0/x1/y1 or x/y/width/height: {dict(value)}"
        )

    def clip(self, width: int, height: int) -> "Coordinates":
        """Return the part of the rectangle that lies inside a ``width`` x ``height`` image."""
        x0 = min(max(self.x0, 0), width)
        y0 = min(max(self.y0, 0), height)
        x1 = min(max(self.x1, x0), width)
        y1 = min(max(self.y1, y0), height)
        return Coordinates(x0, y0, x1, y1)

    def as_dict(self) -> Dict[str, int]:
        return {"x0": self.x0, "y0": self.y0, "x1": self.x1, "y1": self.y1}


@dataclass(frozen=True)
class PageMask:
    """Solid rectangle painted over a page before comparison."""

    page_index: int
    coordinates: Coordinates
    color: str = DEFAULT_MASK_COLOR

    @classmethod
    def from_value(cls, value: Union["PageMask", Mapping[str, Any]]) -> "PageMask":
        if isinstance(value, PageMask):
            return value
        return cls(
            page_index=int(_first(value, "pageIndex", "page_index")),
            coordinates=Coordinates.from_value(value["coordinates"]),
            color=str(value.get("color") or DEFAULT_MASK_COLOR),
        )


@dataclass(frozen=True)
class PageCrop:
    """Rectangle a page is reduced to before comparison."""

    page_index: int
    coordinates: Coordinates

    @classmethod
    def from_value(cls, value: Union["PageCrop", Mapping[str, Any]]) -> "PageCrop":
        if isinstance(value, PageCrop):
            return value
        return cls(
            page_index=int(_first(value, "pageIndex", "page_index")),
            coordinates=Coordinates.from_value(value["coordinates"]),
        )


def _first(value: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in value:
            return value[key]
    raise ValueError(f"Missing key {keys[0]!r} in {dict(value)}")


class ComparisonStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class ComparisonResult:
    """Outcome of a page or document comparison."""

    status: ComparisonStatus
    message: Optional[str] = None
    num_diff_pixels: Optional[int] = None
    diff_png: Optional[str] = None
    actual: Optional[str] = None
    error: Optional[BaseException] = None
    details: List["ComparisonResult"] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == ComparisonStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == ComparisonStatus.FAILED

    @classmethod
    def success(cls) -> "ComparisonResult":
        return cls(status=ComparisonStatus.PASSED)

    @classmethod
    def failure(cls, **kwargs) -> "ComparisonResult":
        return cls(status=ComparisonStatus.FAILED, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Render the result with the camelCase keys of the configuration format."""
        result: Dict[str, Any] = {"status": self.status.value}
        if self.message is not None:
            result["message"] = self.message
        if self.num_diff_pixels is not None:
            result["numDiffPixels"] = self.num_diff_pixels
        if self.diff_png is not None:
            result["diffPng"] = self.diff_png
        if self.actual is not None:
            result["actual"] = self.actual
        if self.error is not None:
            result["error"] = str(self.error)
        if self.details:
            result["details"] = [detail.to_dict() for detail in self.details]
        return result
