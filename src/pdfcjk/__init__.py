# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""pdfcjk - Glyph metrics for Adobe CJK composite fonts in PDF."""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    FontLoadError,
    MalformedWidthTableError,
    PdfCjkError,
    ResourceUnavailableError,
    UnknownFontProfileError,
)
from .fonts import (
    CIDFontBuilder,
    CJKFont,
    CMapCache,
    CMapLocator,
    FontProfile,
    GlyphMetricsResolver,
    get_profile,
)

try:
    __version__ = version("pdfcjk")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "CJKFont",
    "CIDFontBuilder",
    "CMapCache",
    "CMapLocator",
    "FontProfile",
    "GlyphMetricsResolver",
    "get_profile",
    "PdfCjkError",
    "FontLoadError",
    "ResourceUnavailableError",
    "MalformedWidthTableError",
    "UnknownFontProfileError",
]
