# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for sample.py: the CJK font sample page."""

from pathlib import Path

import pikepdf
import pytest
from conftest import open_pdf, track_pdf

from pdfcjk.exceptions import ResourceUnavailableError
from pdfcjk.fonts.cjkfont import CJKFont
from pdfcjk.fonts.cmap import CMapLocator
from pdfcjk.sample import (
    MARGIN,
    PAGE_WIDTH,
    SAMPLE_FONTS,
    build_sample_pdf,
    wrap_text,
    write_sample,
)

UTF16_CMAPS = ("UniGB-UTF16-H", "UniCNS-UTF16-H", "UniJIS-UTF16-H", "UniKS-UTF16-H")

# Stand-in for the Adobe CMaps: ASCII, CJK punctuation, kana, ideographs,
# Hangul syllables and full-width forms
GENERIC_CMAP = """\
/CMapName /Generic-UTF16-H def
6 begincidrange
<0020> <007e> 1
<3000> <30ff> 633
<4e00> <9fff> 1200
<ac00> <d7a3> 22000
<ff01> <ff5e> 8000
<fffd> <fffd> 9000
endcidrange
endcmap
"""


@pytest.fixture
def cjk_locator(tmp_path: Path) -> CMapLocator:
    """Locator with stand-in CMaps for all four UTF-16 encodings."""
    directory = tmp_path / "cmaps"
    directory.mkdir()
    for name in UTF16_CMAPS:
        (directory / name).write_text(GENERIC_CMAP, encoding="ascii")
    return CMapLocator([directory], use_environment=False, use_system_paths=False)


class TestWrapText:
    """Tests for wrap_text()."""

    def test_breaks_at_width(self, test_profile, locator: CMapLocator):
        """Lines are filled up to the maximum width."""
        font = CJKFont(test_profile, locator=locator)

        # "A" is 600 units: 6pt at size 10
        assert wrap_text(font, "AAAAA", 10, 13) == ["AA", "AA", "A"]

    def test_wide_character_gets_own_line(self, test_profile, locator: CMapLocator):
        """A character wider than the line is not dropped."""
        font = CJKFont(test_profile, locator=locator)

        assert wrap_text(font, "AA", 10, 5) == ["A", "A"]

    def test_unmapped_characters_take_no_space(
        self, test_profile, locator: CMapLocator
    ):
        """Zero-width characters never force a break."""
        font = CJKFont(test_profile, locator=locator)

        assert wrap_text(font, "AZZZA", 10, 12) == ["AZZZA"]

    def test_empty_text(self, test_profile, locator: CMapLocator):
        """Empty text has no lines."""
        font = CJKFont(test_profile, locator=locator)

        assert wrap_text(font, "", 10, 100) == []


class TestBuildSamplePdf:
    """Tests for build_sample_pdf()."""

    def test_one_page_with_all_fonts(self, cjk_locator: CMapLocator):
        """The page references one Type0 font per sample font."""
        pdf = track_pdf(build_sample_pdf(locator=cjk_locator))

        assert len(pdf.pages) == 1
        fonts = pdf.pages[0].Resources.Font
        assert len(fonts.keys()) == len(SAMPLE_FONTS)
        assert str(fonts.F1.BaseFont) == "/AdobeHeitiStd-Regular"
        assert str(fonts.F8.BaseFont) == "/AdobeMyungjoStd-Medium"
        assert str(fonts.F5.Encoding) == "/UniJIS-UTF16-H"

    def test_text_is_utf16(self, cjk_locator: CMapLocator):
        """Tj operands are UTF-16BE encoded sample text."""
        pdf = track_pdf(build_sample_pdf(locator=cjk_locator))

        shown = [
            bytes(instruction.operands[0]).decode("utf-16-be")
            for instruction in pikepdf.parse_content_stream(pdf.pages[0])
            if str(instruction.operator) == "Tj"
        ]

        assert shown[0] == "中文（粗黑字体）"
        assert "".join(shown[1:]).startswith("初次见面")

    def test_lines_start_inside_margins(self, cjk_locator: CMapLocator):
        """Every line starts within the printable area."""
        pdf = track_pdf(build_sample_pdf(locator=cjk_locator))

        positions = [
            [float(v) for v in instruction.operands]
            for instruction in pikepdf.parse_content_stream(pdf.pages[0])
            if str(instruction.operator) == "Td"
        ]

        assert positions
        assert all(MARGIN <= x <= PAGE_WIDTH - MARGIN for x, _ in positions)

    def test_missing_cmaps_raise(self, tmp_path: Path):
        """Without CMap resources the sample cannot be laid out."""
        locator = CMapLocator([tmp_path], use_environment=False, use_system_paths=False)

        with pytest.raises(ResourceUnavailableError):
            build_sample_pdf(locator=locator)


class TestWriteSample:
    """Tests for write_sample()."""

    def test_writes_pdf(self, cjk_locator: CMapLocator, tmp_path: Path):
        """write_sample saves a readable PDF."""
        output = write_sample(tmp_path / "sample.pdf", locator=cjk_locator)

        assert output.exists()
        pdf = open_pdf(output)
        assert len(pdf.pages) == 1
