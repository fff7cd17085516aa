# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Composite fonts for Chinese, Japanese and Korean text.

CJKFont uses the Adobe CID-keyed reader fonts (Adobe-Japan1, -GB1, -CNS1,
-Korea1). Nothing is embedded: the PDF names the font and its UTF-16
encoding CMap and the viewer supplies the glyphs, so only metrics are kept
here.
"""

from typing import Protocol

from .catalog import DescriptorMetrics, FontProfile, get_profile
from .cmap import CMapCache, CMapLocator
from .resolver import CMapLoader, GlyphMetricsResolver

TEXT_ENCODING = "utf-16-be"


class FontMetrics(Protocol):
    """Width and descriptor queries shared by all font kinds."""

    def width_of(self, text: str) -> int: ...

    def width_of_char(self, char: str) -> int: ...

    def descriptor_metrics(self) -> DescriptorMetrics: ...


class CJKFont:
    """A composite (Type0) CJK font.

    Widths are in font units (1/1000 em). Use :meth:`get` to select a font
    from the bundled metric catalog.
    """

    def __init__(
        self,
        profile: FontProfile,
        *,
        cmap_loader: CMapLoader | None = None,
        locator: CMapLocator | None = None,
        cmap_cache: CMapCache | None = None,
    ) -> None:
        """Initializes the CJKFont.

        Args:
            profile: Metric profile of the font.
            cmap_loader: Custom Unicode-to-CID loader, see GlyphMetricsResolver.
            locator: CMapLocator for CMap resources.
            cmap_cache: Shared CMap cache.
        """
        self.profile = profile
        self._resolver = GlyphMetricsResolver(
            profile,
            cmap_loader=cmap_loader,
            locator=locator,
            cmap_cache=cmap_cache,
        )

    @classmethod
    def get(
        cls,
        lang: str,
        style: str = "sans",
        *,
        strict: bool = False,
        locator: CMapLocator | None = None,
        cmap_cache: CMapCache | None = None,
    ) -> "CJKFont":
        """Returns a font for a language and style.

        Args:
            lang: "cn" (Simplified Chinese), "tw" (Traditional Chinese),
                "ja" (Japanese) or "ko" (Korean).
            style: "sans" or "serif".
            strict: Raise UnknownFontProfileError for unknown keys instead
                of using the Japanese sans-serif font.
            locator: CMapLocator for CMap resources.
            cmap_cache: Shared CMap cache.
        """
        profile = get_profile(lang, style, strict=strict)
        return cls(profile, locator=locator, cmap_cache=cmap_cache)

    @property
    def name(self) -> str:
        return self.profile.base_font_name

    @property
    def resolver(self) -> GlyphMetricsResolver:
        return self._resolver

    def load(self) -> None:
        """Loads the font's CMap and width table; see GlyphMetricsResolver.load."""
        self._resolver.load()

    def width_of(self, text: str) -> int:
        return self._resolver.width_of(text)

    def width_of_char(self, char: str) -> int:
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {len(char)}")
        return self._resolver.width_of_codepoint(ord(char))

    def width_of_codepoint(self, codepoint: int) -> int:
        return self._resolver.width_of_codepoint(codepoint)

    def width_of_cid(self, cid: int) -> int:
        return self._resolver.width_of_cid(cid)

    def scaled_width(self, text: str, size: float) -> float:
        """Returns the width of text in points at the given font size."""
        return self.width_of(text) * size / 1000.0

    def descriptor_metrics(self) -> DescriptorMetrics:
        return self.profile.descriptor

    def encode(self, text: str) -> bytes:
        """Encodes text as character codes for the font's UTF-16 CMap."""
        return text.encode(TEXT_ENCODING)

    def decode(self, code: bytes) -> str:
        return code.decode(TEXT_ENCODING)

    def __repr__(self) -> str:
        return (
            f"CJKFont({self.profile.base_font_name!r}, "
            f"{self.profile.encoding_resource_id!r})"
        )
