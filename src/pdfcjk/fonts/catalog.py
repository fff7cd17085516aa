# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pre-baked metric tables for the Adobe CJK reader fonts.

Each profile describes one reader-supplied composite font (Adobe-Japan1,
Adobe-GB1, Adobe-CNS1 or Adobe-Korea1 collection) by its base font name,
CID system info, descriptor metrics, default width, compact /W width source
and the UTF-16 CMap used to encode text for it. The data lives in
``resources/catalog.json`` and is keyed by ``"<language>/<style>"``.
"""

import functools
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from importlib.resources import files
from types import MappingProxyType

from ..exceptions import UnknownFontProfileError

logger = logging.getLogger(__name__)

LANGUAGES = ("cn", "tw", "ja", "ko")
STYLES = ("sans", "serif")

# Profile used when a lookup misses and strict matching is off
DEFAULT_PROFILE_KEY = ("ja", "sans")

CIDFONT_REGISTRY = "Adobe"


@dataclass(frozen=True)
class DescriptorMetrics:
    """FontDescriptor values, passed through to the document unchanged."""

    flags: int
    italic_angle: int
    ascent: int
    descent: int
    cap_height: int
    stem_v: int
    font_bbox: tuple[int, int, int, int]


@dataclass(frozen=True)
class FontProfile:
    """Metric configuration of one composite font.

    Attributes:
        base_font_name: PostScript name of the font (e.g. "KozGoPr6N-Medium").
        ordering_name: CIDSystemInfo ordering (e.g. "Japan1").
        supplement_number: CIDSystemInfo supplement.
        default_width: Width of CIDs absent from the width table (/DW).
        encoding_resource_id: Name of the CMap resource (e.g. "UniJIS-UTF16-H").
        compact_widths: Run-encoded /W source string.
        descriptor: FontDescriptor metrics.
    """

    base_font_name: str
    ordering_name: str
    supplement_number: int
    default_width: int
    encoding_resource_id: str
    compact_widths: str
    descriptor: DescriptorMetrics

    @property
    def registry(self) -> str:
        return CIDFONT_REGISTRY

    @property
    def collection_name(self) -> str:
        """Character collection name, e.g. "Adobe-Japan1"."""
        return f"{CIDFONT_REGISTRY}-{self.ordering_name}"


def _profile_from_entry(entry: dict) -> FontProfile:
    """Converts one raw catalog entry into a FontProfile."""
    bbox = tuple(int(v) for v in entry["FontBBox"])
    if len(bbox) != 4:
        msg = f"FontBBox of {entry['BaseFont']} must have 4 values, got {len(bbox)}"
        raise ValueError(msg)

    return FontProfile(
        base_font_name=entry["BaseFont"],
        ordering_name=entry["Ordering"],
        supplement_number=int(entry["Supplement"]),
        default_width=int(entry["DW"]),
        encoding_resource_id=entry["Encoding"],
        compact_widths=entry["W"],
        descriptor=DescriptorMetrics(
            flags=int(entry["Flags"]),
            italic_angle=int(entry["ItalicAngle"]),
            ascent=int(entry["Ascent"]),
            descent=int(entry["Descent"]),
            cap_height=int(entry["CapHeight"]),
            stem_v=int(entry["StemV"]),
            font_bbox=bbox,
        ),
    )


@functools.cache
def load_catalog() -> Mapping[tuple[str, str], FontProfile]:
    """Loads the bundled metric catalog.

    Returns:
        Read-only mapping from (language, style) to FontProfile.
    """
    resource = files("pdfcjk") / "resources" / "catalog.json"
    raw = json.loads(resource.read_text(encoding="utf-8"))

    catalog: dict[tuple[str, str], FontProfile] = {}
    for key, entry in raw.items():
        lang, _, style = key.partition("/")
        catalog[(lang, style)] = _profile_from_entry(entry)

    logger.debug("Loaded %d font profiles", len(catalog))
    return MappingProxyType(catalog)


def available_profiles() -> list[tuple[str, str]]:
    """Returns the (language, style) keys of the catalog, sorted."""
    return sorted(load_catalog())


def get_profile(lang: str, style: str, *, strict: bool = False) -> FontProfile:
    """Selects the metric profile for a language and style.

    Args:
        lang: Language code: "cn", "tw", "ja" or "ko".
        style: Font style: "sans" or "serif".
        strict: If True, an unknown key raises instead of falling back
            to the Japanese sans-serif profile.

    Returns:
        The selected FontProfile.

    Raises:
        UnknownFontProfileError: If strict is set and no profile matches.
    """
    catalog = load_catalog()
    profile = catalog.get((lang, style))
    if profile is not None:
        return profile

    if strict:
        raise UnknownFontProfileError(
            f"No font profile for language '{lang}' and style '{style}'"
        )

    logger.warning(
        "No font profile for %s/%s, falling back to %s/%s",
        lang,
        style,
        *DEFAULT_PROFILE_KEY,
    )
    return catalog[DEFAULT_PROFILE_KEY]
