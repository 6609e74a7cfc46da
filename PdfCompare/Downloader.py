import logging
import os
import tempfile
import urllib.parse
import urllib.request
import uuid
from typing import Optional

LOG = logging.getLogger(__name__)


def is_url(value) -> bool:
    """
    Check if the provided value is an http(s) or ftp URL.
    """
    if not isinstance(value, str):
        return False
    try:
        result = urllib.parse.urlparse(value)
    except ValueError:
        return False
    return result.scheme in ("http", "https", "ftp") and bool(result.netloc)


def get_filename_from_url(url: Optional[str]) -> Optional[str]:
    """
    Return the last path segment of the URL if it looks like a file name, else None.
    """
    if not url:
        return None
    filename = os.path.basename(urllib.parse.urlparse(url).path)
    if "." not in filename:
        return None
    return filename


def download_file_from_url(url: str, directory: Optional[str] = None, filename: Optional[str] = None) -> str:
    """
    Download the document behind ``url`` into ``directory`` and return its path.

    The temp directory is used if ``directory`` is None. Without ``filename`` the
    name is taken from the URL, or a uuid with a ``.pdf`` suffix if the URL has none.
    """
    if directory is None:
        directory = tempfile.gettempdir()
    os.makedirs(directory, exist_ok=True)
    if filename is None:
        filename = get_filename_from_url(url) or str(uuid.uuid4()) + ".pdf"
    file_path = os.path.join(directory, filename)
    LOG.info("Downloading %s to %s", url, file_path)
    urllib.request.urlretrieve(url, file_path)
    return file_path
