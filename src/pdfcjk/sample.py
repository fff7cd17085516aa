# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Sample page showing every bundled CJK font.

Each font gets a title line (right aligned) and a body paragraph that is
wrapped to the page margins using the font's advance widths.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

import pikepdf
from pikepdf import Array, Dictionary, Name, Operator

from .fonts.cidfont import CIDFontBuilder
from .fonts.cjkfont import CJKFont
from .fonts.cmap import CMapCache, CMapLocator

logger = logging.getLogger(__name__)

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
MARGIN = 36
FONT_SIZE = 12
LEADING = 1.25
PARAGRAPH_BREAK = 10

SAMPLE_FONTS: tuple[tuple[str, str], ...] = (
    ("cn", "sans"),
    ("cn", "serif"),
    ("tw", "sans"),
    ("tw", "serif"),
    ("ja", "sans"),
    ("ja", "serif"),
    ("ko", "sans"),
    ("ko", "serif"),
)

SAMPLE_TITLES = (
    "中文（粗黑字体）",
    "中文(明朝体)",
    "中文（粗黑字體）",
    "中文(明朝體)",
    "日本語（ゴシック体）",
    "日本語（明朝体）",
    "한국어(고딕체)",
    "한국어(명조체)",
)

_CN_BODY = "初次见面。我是来自北京的留学生。"
_TW_BODY = "初次見面。我是來自台北的留學生。"
_JA_BODY = "はじめまして。私は東京からきた留学生です。"
_KO_BODY = "처음 뵙겠습니다. 저는 서울에서 온 유학생입니다."

SAMPLE_BODIES = (
    _CN_BODY,
    _CN_BODY,
    _TW_BODY,
    _TW_BODY,
    _JA_BODY,
    _JA_BODY,
    _KO_BODY,
    _KO_BODY,
)


def wrap_text(font: CJKFont, text: str, size: float, max_width: float) -> list[str]:
    """Breaks text into lines no wider than max_width points.

    Lines break between any two characters, which suits CJK text. A single
    character wider than max_width still gets a line of its own.
    """
    lines: list[str] = []
    current: list[str] = []
    current_width = 0.0

    for char in text:
        char_width = font.scaled_width(char, size)
        if current and current_width + char_width > max_width:
            lines.append("".join(current))
            current = []
            current_width = 0.0
        current.append(char)
        current_width += char_width

    if current:
        lines.append("".join(current))
    return lines


def _show_line(
    resource_name: str,
    font: CJKFont,
    text: str,
    x: float,
    y: float,
) -> list[pikepdf.ContentStreamInstruction]:
    return [
        pikepdf.ContentStreamInstruction([], Operator("BT")),
        pikepdf.ContentStreamInstruction(
            [Name(resource_name), FONT_SIZE], Operator("Tf")
        ),
        pikepdf.ContentStreamInstruction([round(x, 3), round(y, 3)], Operator("Td")),
        pikepdf.ContentStreamInstruction(
            [pikepdf.String(font.encode(text))], Operator("Tj")
        ),
        pikepdf.ContentStreamInstruction([], Operator("ET")),
    ]


def build_sample_pdf(
    fonts: Sequence[tuple[str, str]] = SAMPLE_FONTS,
    *,
    locator: CMapLocator | None = None,
) -> pikepdf.Pdf:
    """Creates a one-page PDF with a title and paragraph per font.

    Args:
        fonts: (language, style) keys, paired in order with the sample texts.
        locator: CMapLocator for the fonts' CMap resources.

    Returns:
        New pikepdf Pdf; the caller must save and close it.

    Raises:
        ResourceUnavailableError: If a CMap resource cannot be found.
    """
    pdf = pikepdf.Pdf.new()
    try:
        font_resources, instructions = _layout(
            CIDFontBuilder(pdf), fonts, CMapCache(locator)
        )
    except BaseException:
        pdf.close()
        raise

    contents = pdf.make_stream(pikepdf.unparse_content_stream(instructions))
    page = pikepdf.Page(
        Dictionary(
            Type=Name.Page,
            MediaBox=Array([0, 0, PAGE_WIDTH, PAGE_HEIGHT]),
            Resources=Dictionary(Font=font_resources),
            Contents=contents,
        )
    )
    pdf.pages.append(page)
    return pdf


def _layout(
    builder: CIDFontBuilder,
    fonts: Sequence[tuple[str, str]],
    cmap_cache: CMapCache,
) -> tuple[Dictionary, list[pikepdf.ContentStreamInstruction]]:
    """Registers the fonts and lays out their title and body lines."""
    text_width = PAGE_WIDTH - 2 * MARGIN
    line_height = FONT_SIZE * LEADING
    y = PAGE_HEIGHT - MARGIN - FONT_SIZE

    font_resources = Dictionary()
    instructions: list[pikepdf.ContentStreamInstruction] = []

    for index, ((lang, style), title, body) in enumerate(
        zip(fonts, SAMPLE_TITLES, SAMPLE_BODIES)
    ):
        font = CJKFont.get(lang, style, cmap_cache=cmap_cache)
        resource_name = f"/F{index + 1}"
        font_resources[resource_name] = builder.register(font.profile)

        title_x = MARGIN + text_width - font.scaled_width(title, FONT_SIZE)
        instructions.extend(_show_line(resource_name, font, title, title_x, y))
        y -= line_height

        for line in wrap_text(font, body, FONT_SIZE, text_width):
            instructions.extend(_show_line(resource_name, font, line, MARGIN, y))
            y -= line_height
        y -= PARAGRAPH_BREAK

        if y < MARGIN:
            logger.warning("Sample text overflows the page after font %s", font.name)

    return font_resources, instructions


def write_sample(
    output_path: str | Path, *, locator: CMapLocator | None = None
) -> Path:
    """Builds the sample PDF and saves it to output_path.

    Returns:
        Path of the written file.
    """
    output_path = Path(output_path)
    pdf = build_sample_pdf(locator=locator)
    try:
        pdf.save(output_path)
    finally:
        pdf.close()
    logger.info("Wrote sample PDF to %s", output_path)
    return output_path
