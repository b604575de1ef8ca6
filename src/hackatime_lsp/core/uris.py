"""Document URI helpers."""

from __future__ import annotations

import os
import re
import sys
from urllib.parse import unquote, urlparse

_DRIVE_PATH = re.compile(r"^/[A-Za-z]:")


def clean_file_uri(uri: str, windows: bool | None = None) -> str:
    """Turn a document URI into a normalized filesystem path.

    ``file://`` URIs are percent-decoded. On Windows the leading slash in
    ``/C:/...`` is dropped. Anything that is not a URI is treated as a path.
    """
    if windows is None:
        windows = sys.platform == "win32"

    parsed = urlparse(uri)
    if parsed.scheme == "file":
        path = unquote(parsed.path)
        if parsed.netloc:
            path = f"//{parsed.netloc}{path}"
    elif parsed.scheme and len(parsed.scheme) > 1:
        path = unquote(parsed.path)
    else:
        path = uri

    if windows and _DRIVE_PATH.match(path):
        path = path[1:]

    if not path:
        return path
    return os.path.normpath(path)


def is_virtual_uri(uri: str) -> bool:
    """True for documents with no file on disk, e.g. ``untitled:Untitled-1``."""
    scheme = urlparse(uri).scheme
    return bool(scheme) and len(scheme) > 1 and scheme != "file"
