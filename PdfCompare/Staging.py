import logging
import os
import shutil
from pathlib import Path
from typing import List, Union

LOG = logging.getLogger(__name__)


def ensure_and_cleanup_path(path: Union[str, Path]) -> Path:
    """Make sure ``path`` exists as an empty directory."""
    path = Path(path)
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def base_name(file_path: Union[str, Path]) -> str:
    """Return the file name without directory and extension."""
    return Path(file_path).stem


def page_suffix(page_index: int, page_count: int) -> str:
    """Single page output carries no suffix, multi page output is named ``-{index}``."""
    if page_count > 1:
        return f"-{page_index}"
    return ""


def page_png_path(directory: Union[str, Path], name: str, page_index: int, page_count: int) -> str:
    return os.path.join(str(directory), f"{name}{page_suffix(page_index, page_count)}.png")


def diff_png_path(directory: Union[str, Path], name: str, page_index: int, page_count: int) -> str:
    return os.path.join(str(directory), f"{name}_diff{page_suffix(page_index, page_count)}.png")


def list_staged_pages(directory: Union[str, Path], name: str) -> List[str]:
    """List the staged files in ``directory`` that belong to the document ``name``."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    pages = sorted(
        entry.name for entry in directory.iterdir()
        if entry.is_file() and entry.stem.startswith(name)
    )
    LOG.debug("Found %d staged page(s) for %s in %s", len(pages), name, directory)
    return pages
