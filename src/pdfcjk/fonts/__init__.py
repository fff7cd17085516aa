# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""CJK composite font metrics and PDF font structures."""

from .catalog import (
    DescriptorMetrics,
    FontProfile,
    available_profiles,
    get_profile,
    load_catalog,
)
from .cidfont import CIDFontBuilder
from .cjkfont import CJKFont, FontMetrics
from .cmap import CMapCache, CMapLocator, load_cid_cmap, parse_cid_cmap
from .resolver import GlyphMetricsResolver, LoadState
from .widths import (
    decode_compact_widths,
    decode_widths,
    encode_widths,
    format_widths,
    parse_widths,
)

__all__ = [
    # Catalog
    "DescriptorMetrics",
    "FontProfile",
    "available_profiles",
    "get_profile",
    "load_catalog",
    # CMap
    "CMapCache",
    "CMapLocator",
    "load_cid_cmap",
    "parse_cid_cmap",
    # Widths
    "decode_compact_widths",
    "decode_widths",
    "encode_widths",
    "format_widths",
    "parse_widths",
    # Resolution
    "GlyphMetricsResolver",
    "LoadState",
    # Fonts
    "CJKFont",
    "FontMetrics",
    "CIDFontBuilder",
]
