# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/catalog.py: bundled CJK metric profiles."""

import dataclasses
import logging

import pytest

from pdfcjk.exceptions import UnknownFontProfileError
from pdfcjk.fonts.catalog import (
    DEFAULT_PROFILE_KEY,
    LANGUAGES,
    STYLES,
    available_profiles,
    get_profile,
    load_catalog,
)
from pdfcjk.fonts.widths import decode_compact_widths


class TestLoadCatalog:
    """Tests for the bundled catalog data."""

    def test_has_every_language_and_style(self):
        """There is one profile per language and style."""
        expected = sorted((lang, style) for lang in LANGUAGES for style in STYLES)

        assert available_profiles() == expected

    def test_catalog_is_cached(self):
        """The catalog is read once."""
        assert load_catalog() is load_catalog()

    def test_catalog_is_read_only(self):
        """The catalog mapping cannot be modified."""
        with pytest.raises(TypeError):
            load_catalog()[("xx", "sans")] = None  # type: ignore[index]

    def test_japanese_sans_profile(self):
        """ja/sans is Kozuka Gothic with UniJIS-UTF16-H."""
        profile = get_profile("ja", "sans")

        assert profile.base_font_name == "KozGoPr6N-Medium"
        assert profile.ordering_name == "Japan1"
        assert profile.supplement_number == 6
        assert profile.default_width == 1000
        assert profile.encoding_resource_id == "UniJIS-UTF16-H"
        assert profile.collection_name == "Adobe-Japan1"
        assert profile.registry == "Adobe"
        assert profile.descriptor.font_bbox == (-538, -378, 1254, 1418)
        assert profile.descriptor.stem_v == 116

    def test_korean_serif_profile(self):
        """ko/serif is Adobe Myungjo with UniKS-UTF16-H."""
        profile = get_profile("ko", "serif")

        assert profile.base_font_name == "AdobeMyungjoStd-Medium"
        assert profile.ordering_name == "Korea1"
        assert profile.supplement_number == 2
        assert profile.encoding_resource_id == "UniKS-UTF16-H"
        assert profile.descriptor.cap_height == 719

    @pytest.mark.parametrize("key", sorted(load_catalog()))
    def test_width_tables_decode(self, key):
        """Every bundled width table is well formed."""
        profile = load_catalog()[key]

        widths = decode_compact_widths(profile.compact_widths)

        assert widths
        assert widths[1] > 0

    def test_profiles_are_immutable(self):
        """FontProfile is frozen."""
        profile = get_profile("cn", "serif")

        with pytest.raises(dataclasses.FrozenInstanceError):
            profile.default_width = 500  # type: ignore[misc]


class TestGetProfile:
    """Tests for get_profile() selection."""

    def test_selects_by_key(self):
        """Language and style select the matching profile."""
        assert get_profile("tw", "serif").base_font_name == "AdobeMingStd-Light"
        assert get_profile("cn", "sans").ordering_name == "GB1"

    def test_unknown_key_falls_back(self, caplog):
        """Unknown keys select the Japanese sans-serif profile."""
        with caplog.at_level(logging.WARNING, logger="pdfcjk.fonts.catalog"):
            profile = get_profile("fr", "sans")

        assert profile == load_catalog()[DEFAULT_PROFILE_KEY]
        assert "falling back" in caplog.text

    def test_unknown_style_falls_back(self):
        """An unknown style also falls back."""
        assert get_profile("ko", "mono").base_font_name == "KozGoPr6N-Medium"

    def test_strict_unknown_key_raises(self):
        """strict=True raises UnknownFontProfileError."""
        with pytest.raises(UnknownFontProfileError, match="fr"):
            get_profile("fr", "sans", strict=True)
