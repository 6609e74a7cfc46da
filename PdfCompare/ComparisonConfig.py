from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from dotenv import load_dotenv

from PdfCompare.ComparisonModels import PageCrop, PageMask
from PdfCompare.config import (
    ACTUAL_PDF_FOLDER,
    ACTUAL_PNG_FOLDER,
    BASELINE_PDF_FOLDER,
    BASELINE_PNG_FOLDER,
    DEFAULT_DATA_ROOT,
    DEFAULT_DENSITY,
    DEFAULT_IMAGE_ENGINE,
    DEFAULT_THRESHOLD,
    DEFAULT_TOLERANCE,
    DIFF_PNG_FOLDER,
)


__all__ = [
    "ComparisonSettings",
    "ComparisonPaths",
    "ComparisonConfig",
    "load_comparison_config",
    "ensure_dotenv_loaded",
]

_DOTENV_LOADED = False

ENV_PREFIX = "PDFCOMPARE_"


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED

    if _DOTENV_LOADED:
        return

    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)
    _DOTENV_LOADED = True


def ensure_dotenv_loaded() -> None:
    """Expose .env loading so callers can trigger it eagerly."""
    _load_dotenv_once()


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    value = str(value).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _as_float(value: Any, default: Optional[float]) -> Optional[float]:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any, default: Optional[int]) -> Optional[int]:
    if value is None or value == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _as_str(value: Any, default: Optional[str]) -> Optional[str]:
    if value is None:
        return default
    value = str(value).strip()
    return value or default


@dataclass(frozen=True)
class ComparisonSettings:
    threshold: Optional[float] = DEFAULT_THRESHOLD
    tolerance: Optional[int] = DEFAULT_TOLERANCE
    image_engine: str = DEFAULT_IMAGE_ENGINE
    density: int = DEFAULT_DENSITY
    match_page_count: bool = True
    clean_png_paths: bool = True
    max_workers: int = 1

    def __post_init__(self):
        if self.threshold is not None and not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be between 0.0 and 1.0, got {self.threshold}")
        if self.tolerance is not None and self.tolerance < 0:
            raise ValueError(f"tolerance must not be negative, got {self.tolerance}")
        if self.density <= 0:
            raise ValueError(f"density must be positive, got {self.density}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def effective_threshold(self) -> float:
        return DEFAULT_THRESHOLD if self.threshold is None else self.threshold

    @property
    def effective_tolerance(self) -> int:
        return DEFAULT_TOLERANCE if self.tolerance is None else self.tolerance


def _data_folder(name: str) -> str:
    root = os.environ.get(f"{ENV_PREFIX}DATA_ROOT") or DEFAULT_DATA_ROOT
    return str(Path(root) / name)


@dataclass(frozen=True)
class ComparisonPaths:
    """Root folders for input documents and staged images.

    Staging roots are shared by every comparison that uses them. Only one
    comparison may run against the same roots at a time.
    """

    actual_pdf_root_folder: str = field(default_factory=lambda: _data_folder(ACTUAL_PDF_FOLDER))
    baseline_pdf_root_folder: str = field(default_factory=lambda: _data_folder(BASELINE_PDF_FOLDER))
    actual_png_root_folder: str = field(default_factory=lambda: _data_folder(ACTUAL_PNG_FOLDER))
    baseline_png_root_folder: str = field(default_factory=lambda: _data_folder(BASELINE_PNG_FOLDER))
    diff_png_root_folder: str = field(default_factory=lambda: _data_folder(DIFF_PNG_FOLDER))


@dataclass(frozen=True)
class ComparisonConfig:
    settings: ComparisonSettings = field(default_factory=ComparisonSettings)
    paths: ComparisonPaths = field(default_factory=ComparisonPaths)
    skip_page_indexes: FrozenSet[int] = frozenset()
    only_page_indexes: FrozenSet[int] = frozenset()
    masks: Tuple[PageMask, ...] = ()
    crops: Tuple[PageCrop, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "skip_page_indexes", frozenset(int(i) for i in self.skip_page_indexes or ()))
        object.__setattr__(self, "only_page_indexes", frozenset(int(i) for i in self.only_page_indexes or ()))
        object.__setattr__(self, "masks", tuple(PageMask.from_value(m) for m in self.masks or ()))
        object.__setattr__(self, "crops", tuple(PageCrop.from_value(c) for c in self.crops or ()))

    def is_page_skipped(self, page_index: int) -> bool:
        return page_index in self.skip_page_indexes

    def is_page_selected(self, page_index: int) -> bool:
        if self.is_page_skipped(page_index):
            return False
        if self.only_page_indexes and page_index not in self.only_page_indexes:
            return False
        return True

    def masks_for_page(self, page_index: int) -> List[PageMask]:
        return [mask for mask in self.masks if mask.page_index == page_index]

    def crops_for_page(self, page_index: int) -> List[PageCrop]:
        return [crop for crop in self.crops if crop.page_index == page_index]


# attribute: (camelCase key, parser)
_SETTING_KEYS: Dict[str, Tuple[str, Callable[[Any, Any], Any]]] = {
    "threshold": ("threshold", _as_float),
    "tolerance": ("tolerance", _as_int),
    "image_engine": ("imageEngine", _as_str),
    "density": ("density", _as_int),
    "match_page_count": ("matchPageCount", _as_bool),
    "clean_png_paths": ("cleanPngPaths", _as_bool),
    "max_workers": ("maxWorkers", _as_int),
}

_PATH_KEYS: Dict[str, str] = {
    "actual_pdf_root_folder": "actualPdfRootFolder",
    "baseline_pdf_root_folder": "baselinePdfRootFolder",
    "actual_png_root_folder": "actualPngRootFolder",
    "baseline_png_root_folder": "baselinePngRootFolder",
    "diff_png_root_folder": "diffPngRootFolder",
}


def _lookup(mapping: Mapping[str, Any], snake: str, camel: str) -> Any:
    if snake in mapping:
        return mapping[snake]
    return mapping.get(camel)


def _build_settings(raw: Mapping[str, Any], overrides: Mapping[str, Any]) -> ComparisonSettings:
    defaults = ComparisonSettings()
    values = {}
    for attribute, (camel, parser) in _SETTING_KEYS.items():
        default = getattr(defaults, attribute)
        value = _lookup(overrides, attribute, camel)
        if value is None:
            value = _lookup(raw, attribute, camel)
        if value is None:
            value = os.environ.get(ENV_PREFIX + attribute.upper())
        values[attribute] = parser(value, default)
    return ComparisonSettings(**values)


def _build_paths(raw: Mapping[str, Any]) -> ComparisonPaths:
    values = {}
    for attribute, camel in _PATH_KEYS.items():
        value = _lookup(raw, attribute, camel)
        if value:
            values[attribute] = str(value)
    return ComparisonPaths(**values)


def _index_list(value: Optional[Iterable[Any]]) -> FrozenSet[int]:
    if not value:
        return frozenset()
    return frozenset(int(index) for index in value)


def load_comparison_config(
    config: Union[ComparisonConfig, Mapping[str, Any], None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ComparisonConfig:
    """Return a comparison config merged from ``config``, overrides, environment and defaults.

    ``config`` may be an existing ``ComparisonConfig`` or a mapping shaped like
    ``{"settings": {...}, "paths": {...}, "masks": [...], ...}`` with either
    camelCase or snake_case keys. ``overrides`` only applies to settings.
    """

    _load_dotenv_once()

    overrides = overrides or {}

    if isinstance(config, ComparisonConfig):
        if not overrides:
            return config
        current = {name: getattr(config.settings, name) for name in _SETTING_KEYS}
        return replace(config, settings=_build_settings(current, overrides))

    raw = config or {}
    return ComparisonConfig(
        settings=_build_settings(raw.get("settings") or {}, overrides),
        paths=_build_paths(raw.get("paths") or {}),
        skip_page_indexes=_index_list(_lookup(raw, "skip_page_indexes", "skipPageIndexes")),
        only_page_indexes=_index_list(_lookup(raw, "only_page_indexes", "onlyPageIndexes")),
        masks=tuple(PageMask.from_value(mask) for mask in raw.get("masks") or ()),
        crops=tuple(PageCrop.from_value(crop) for crop in raw.get("crops") or ()),
    )
