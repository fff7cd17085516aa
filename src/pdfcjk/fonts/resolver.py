# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Advance-width lookup for composite CJK fonts.

GlyphMetricsResolver combines a font's Unicode-to-CID CMap with its decoded
width table. Both maps are built once, on the first query, and are never
modified afterwards, so lookups after loading need no locking.
"""

import enum
import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType

from ..exceptions import FontLoadError, ResourceUnavailableError
from .catalog import FontProfile
from .cmap import CMapCache, CMapLocator
from .widths import decode_compact_widths

logger = logging.getLogger(__name__)

CMapLoader = Callable[[FontProfile], Mapping[int, int]]


def iter_codepoints(text: str) -> Iterator[int]:
    """Yields the code points of text, joining UTF-16 surrogate pairs.

    Strings decoded with "surrogatepass" can hold a supplementary character
    as two surrogates; such a pair is yielded as one code point.
    """
    pending_high = None
    for char in text:
        value = ord(char)
        if pending_high is not None:
            if 0xDC00 <= value <= 0xDFFF:
                yield 0x10000 + ((pending_high - 0xD800) << 10) + (value - 0xDC00)
                pending_high = None
                continue
            yield pending_high
            pending_high = None
        if 0xD800 <= value <= 0xDBFF:
            pending_high = value
        else:
            yield value
    if pending_high is not None:
        yield pending_high


class LoadState(enum.Enum):
    """Lifecycle of a resolver's lookup tables."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class GlyphMetricsResolver:
    """Resolves advance widths of code points and strings for one font.

    A code point without a CID in the CMap contributes zero width; a CID
    without an entry in the width table has the profile's default width.
    """

    def __init__(
        self,
        profile: FontProfile,
        *,
        cmap_loader: CMapLoader | None = None,
        locator: CMapLocator | None = None,
        cmap_cache: CMapCache | None = None,
    ) -> None:
        """Initializes the GlyphMetricsResolver.

        Args:
            profile: Metric profile of the font.
            cmap_loader: Callable returning the Unicode-to-CID map for a
                profile. Takes precedence over locator and cmap_cache.
            locator: CMapLocator used for a private (uncached) CMap load.
            cmap_cache: Shared cache used instead of a private load.
        """
        self._profile = profile
        if cmap_loader is None:
            if cmap_cache is not None:
                cmap_loader = _cached_loader(cmap_cache)
            else:
                cmap_loader = _locator_loader(locator or CMapLocator())
        self._cmap_loader = cmap_loader

        self._lock = threading.Lock()
        self._state = LoadState.UNLOADED
        self._error: FontLoadError | None = None
        self._uni_to_cid: Mapping[int, int] = MappingProxyType({})
        self._cid_to_width: Mapping[int, int] = MappingProxyType({})

    @property
    def profile(self) -> FontProfile:
        return self._profile

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def default_width(self) -> int:
        return self._profile.default_width

    @property
    def unicode_to_cid(self) -> Mapping[int, int]:
        """Read-only Unicode-to-CID map; loads the font if needed."""
        self.load()
        return self._uni_to_cid

    @property
    def cid_to_width(self) -> Mapping[int, int]:
        """Read-only CID-to-width map; loads the font if needed."""
        self.load()
        return self._cid_to_width

    def load(self) -> None:
        """Builds the lookup tables if they are not built yet.

        Repeated calls are no-ops. A failed load is final: this and every
        later call re-raises the original error.

        Raises:
            MalformedWidthTableError: If the width table cannot be decoded.
            ResourceUnavailableError: If the CMap cannot be loaded.
        """
        if self._state is LoadState.LOADED:
            return

        with self._lock:
            if self._state is LoadState.LOADED:
                return
            if self._state is LoadState.FAILED:
                raise self._error

            self._state = LoadState.LOADING
            logger.debug("Loading metrics for %s", self._profile.base_font_name)
            try:
                cid_to_width, uni_to_cid = self._build()
            except FontLoadError as e:
                self._error = e
                self._state = LoadState.FAILED
                logger.debug(
                    "Loading metrics for %s failed: %s",
                    self._profile.base_font_name,
                    e,
                )
                raise
            except BaseException:
                self._state = LoadState.UNLOADED
                raise

            self._cid_to_width = MappingProxyType(cid_to_width)
            if not isinstance(uni_to_cid, MappingProxyType):
                uni_to_cid = MappingProxyType(dict(uni_to_cid))
            self._uni_to_cid = uni_to_cid
            self._state = LoadState.LOADED

    def _build(self) -> tuple[dict[int, int], Mapping[int, int]]:
        cid_to_width = decode_compact_widths(self._profile.compact_widths)
        try:
            uni_to_cid = self._cmap_loader(self._profile)
        except OSError as e:
            raise ResourceUnavailableError(
                f"Could not load CMap '{self._profile.encoding_resource_id}': {e}"
            ) from e
        return cid_to_width, uni_to_cid

    def width_of_cid(self, cid: int) -> int:
        """Returns the width of a CID, or the default width if it has none."""
        self.load()
        return self._cid_to_width.get(cid, self._profile.default_width)

    def width_of_codepoint(self, codepoint: int) -> int:
        """Returns the width of a Unicode code point.

        Code points the CMap does not cover have zero width.
        """
        self.load()
        cid = self._uni_to_cid.get(codepoint)
        if cid is None:
            return 0
        return self._cid_to_width.get(cid, self._profile.default_width)

    def width_of(self, text: str) -> int:
        """Returns the summed width of every code point in text."""
        self.load()
        uni_to_cid = self._uni_to_cid
        cid_to_width = self._cid_to_width
        default_width = self._profile.default_width

        width = 0
        for codepoint in iter_codepoints(text):
            cid = uni_to_cid.get(codepoint)
            if cid is not None:
                width += cid_to_width.get(cid, default_width)
        return width


def _locator_loader(locator: CMapLocator) -> CMapLoader:
    def load(profile: FontProfile) -> Mapping[int, int]:
        return locator.load(profile.encoding_resource_id, profile.ordering_name)

    return load


def _cached_loader(cache: CMapCache) -> CMapLoader:
    def load(profile: FontProfile) -> Mapping[int, int]:
        return cache.get(profile.encoding_resource_id, profile.ordering_name)

    return load
