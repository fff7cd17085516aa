# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""CIDFont building for non-embedded CJK fonts."""

import pikepdf
from pikepdf import Array, Dictionary, Name

from .catalog import FontProfile
from .widths import WidthEntry, decode_widths, parse_widths


class CIDFontBuilder:
    """Builds Type0/CIDFontType0 PDF structures.

    This helper class creates the font hierarchy for a reader-supplied
    CJK font: Type0 font, CIDFont descendant with CIDSystemInfo, /DW and
    /W, and the FontDescriptor. No font program is embedded.
    """

    def __init__(self, pdf: pikepdf.Pdf) -> None:
        """Initializes the CIDFontBuilder.

        Args:
            pdf: Opened pikepdf PDF object.
        """
        self._pdf = pdf

    def build_structure(self, profile: FontProfile) -> Dictionary:
        """Creates the complete Type0/CIDFont structure.

        Builds:
        - Type0 Dictionary (main font) with the UTF-16 CMap as /Encoding
        - CIDFontType0 Dictionary (descendant, indirect)
        - CIDSystemInfo
        - FontDescriptor (indirect)

        Args:
            profile: Metric profile of the font.

        Returns:
            pikepdf Dictionary for the Type0 font.

        Raises:
            MalformedWidthTableError: If the profile's width table is malformed.
        """
        base_font = Name(f"/{profile.base_font_name}")
        w_array = parse_widths(profile.compact_widths)
        # Rejects incomplete or reversed /W groups
        decode_widths(w_array)

        metrics = profile.descriptor
        font_descriptor = Dictionary(
            Type=Name.FontDescriptor,
            FontName=base_font,
            Flags=metrics.flags,
            ItalicAngle=metrics.italic_angle,
            Ascent=metrics.ascent,
            Descent=metrics.descent,
            CapHeight=metrics.cap_height,
            StemV=metrics.stem_v,
            FontBBox=Array(list(metrics.font_bbox)),
        )

        cid_system_info = Dictionary(
            Registry=pikepdf.String(profile.registry),
            Ordering=pikepdf.String(profile.ordering_name),
            Supplement=profile.supplement_number,
        )

        cid_font = Dictionary(
            Type=Name.Font,
            Subtype=Name.CIDFontType0,
            BaseFont=base_font,
            CIDSystemInfo=cid_system_info,
            FontDescriptor=self._pdf.make_indirect(font_descriptor),
            DW=profile.default_width,
            W=Array(self._convert_w_array_to_pikepdf(w_array)),
        )

        return Dictionary(
            Type=Name.Font,
            Subtype=Name.Type0,
            BaseFont=base_font,
            Encoding=Name(f"/{profile.encoding_resource_id}"),
            DescendantFonts=Array([self._pdf.make_indirect(cid_font)]),
        )

    def register(self, profile: FontProfile) -> pikepdf.Object:
        """Builds the font structure and adds it as an indirect object."""
        return self._pdf.make_indirect(self.build_structure(profile))

    def _convert_w_array_to_pikepdf(self, w_array: list[WidthEntry]) -> list:
        """Converts the W array to pikepdf-compatible format.

        Args:
            w_array: W array in Python format [cid, [widths], ...].

        Returns:
            List with pikepdf-compatible objects.
        """
        result = []
        for item in w_array:
            if isinstance(item, list):
                result.append(Array(item))
            else:
                result.append(item)
        return result
