# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the pdfcjk test suite."""

import logging
from pathlib import Path

import pytest
from pikepdf import Pdf

from pdfcjk.fonts.catalog import DescriptorMetrics, FontProfile
from pdfcjk.fonts.cmap import CMapLocator

# -- Global PDF tracker --

_tracked_pdfs: list[Pdf] = []


@pytest.fixture(autouse=True)
def _auto_close_pdfs():
    """Close all tracked PDF objects after each test."""
    yield
    for pdf in reversed(_tracked_pdfs):
        try:
            pdf.close()
        except Exception:
            pass
    _tracked_pdfs.clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Restore the pdfcjk logger after tests that configure it."""
    pdfcjk_logger = logging.getLogger("pdfcjk")
    yield
    pdfcjk_logger.handlers.clear()
    pdfcjk_logger.setLevel(logging.NOTSET)


def new_pdf(**kwargs) -> Pdf:
    """Create a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.new(**kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


def open_pdf(source, **kwargs) -> Pdf:
    """Open a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.open(source, **kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


def track_pdf(pdf: Pdf) -> Pdf:
    """Track a Pdf created elsewhere (auto-closed after test)."""
    _tracked_pdfs.append(pdf)
    return pdf


# -- CMap and profile data --

TEST_CMAP_NAME = "Test-UTF16-H"

# U+0020 -> 1, A -> 100, B -> 101, a..c -> 200..202, U+4E00..U+4E02 ->
# 1000..1002, U+2000B (surrogate pair) -> 300
TEST_CMAP = """\
%!PS-Adobe-3.0 Resource-CMap
%%DocumentNeededResources: ProcSet (CIDInit)
%%IncludeResource: ProcSet (CIDInit)
%%BeginResource: CMap (Test-UTF16-H)
%%Title: (Test-UTF16-H Adobe Test1 0)
%%EndComments

/CIDInit /ProcSet findresource begin

12 dict begin

begincmap

/CIDSystemInfo 3 dict dup begin
  /Registry (Adobe) def
  /Ordering (Test1) def
  /Supplement 0 def
end def

/CMapName /Test-UTF16-H def
/CMapVersion 1.000 def
/CMapType 1 def

/WMode 0 def

2 begincodespacerange
<0000> <D7FF>
<D800DC00> <DBFFDFFF>
endcodespacerange

4 begincidchar
<0020> 1
<0041> 100
<0042> 101
<d840dc0b> 300
endcidchar

2 begincidrange
<0061> <0063> 200
<4e00> <4e02> 1000
endcidrange
endcmap
CMapName currentdict /CMap defineresource pop
end
end

%%EndResource
%%EOF
"""

# CID 1 -> 250, 100..102 -> 600, 200..202 -> 500/510/520, 300 -> 900
TEST_WIDTHS = "1 [250] 100 102 600 200 [500 510 520] 300 [900]"

TEST_DEFAULT_WIDTH = 1000


def make_profile(
    *,
    compact_widths: str = TEST_WIDTHS,
    encoding: str = TEST_CMAP_NAME,
    default_width: int = TEST_DEFAULT_WIDTH,
) -> FontProfile:
    """Build a FontProfile for tests."""
    return FontProfile(
        base_font_name="TestMincho-Regular",
        ordering_name="Test1",
        supplement_number=0,
        default_width=default_width,
        encoding_resource_id=encoding,
        compact_widths=compact_widths,
        descriptor=DescriptorMetrics(
            flags=4,
            italic_angle=0,
            ascent=880,
            descent=-120,
            cap_height=700,
            stem_v=80,
            font_bbox=(-100, -200, 1100, 900),
        ),
    )


# -- Fixtures --


@pytest.fixture
def cmap_dir(tmp_path: Path) -> Path:
    """Directory holding the test CMap resource.

    Returns:
        Path to the directory.
    """
    directory = tmp_path / "cmaps"
    directory.mkdir()
    (directory / TEST_CMAP_NAME).write_text(TEST_CMAP, encoding="ascii")
    return directory


@pytest.fixture
def locator(cmap_dir: Path) -> CMapLocator:
    """CMapLocator that only searches the test CMap directory."""
    return CMapLocator([cmap_dir], use_environment=False, use_system_paths=False)


@pytest.fixture
def test_profile() -> FontProfile:
    """FontProfile matching TEST_CMAP and TEST_WIDTHS."""
    return make_profile()
