# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Compact CIDFont width tables (/W syntax).

A width source is a whitespace-separated sequence of entries in either of
the two /W forms:

- ``c [w1 w2 ... wn]``: individual widths for CIDs c, c+1, ..., c+n-1
- ``c_first c_last w``: the same width for every CID in [c_first, c_last]

The decoder is strict: width tables are first-party data, so any token that
does not fit the grammar raises MalformedWidthTableError instead of being
skipped.
"""

import logging
import re
from collections.abc import Iterable, Mapping

from ..exceptions import MalformedWidthTableError

logger = logging.getLogger(__name__)

# CIDs are 16-bit in every Adobe character collection
MAX_CID = 0xFFFF

# Widths are stored as 32-bit signed PDF integers
_MIN_INT = -(2**31)
_MAX_INT = 2**31 - 1

# Shortest run of equal widths written as a range triple by encode_widths()
MIN_RANGE_RUN = 4

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

WidthEntry = int | list[int]


def _parse_int(token: str, index: int) -> int:
    """Parses one integer token of a width source."""
    if not _INTEGER_PATTERN.fullmatch(token):
        raise MalformedWidthTableError(
            f"Expected an integer at token {index}, got '{token}'"
        )
    value = int(token)
    if not _MIN_INT <= value <= _MAX_INT:
        raise MalformedWidthTableError(
            f"Integer '{token}' at token {index} is out of range"
        )
    return value


def parse_widths(source: str) -> list[WidthEntry]:
    """Tokenizes a compact width source into /W array entries.

    The source is split on whitespace. A word may start with "[" and may end
    with "]", so a bracketed run can be split over several words
    ("[100 200]") and the brackets may also stand alone. Brackets anywhere
    else in a word ("1[100", "200]300") make it a non-integer token.

    Args:
        source: Width source string, e.g. "1 [224 266] 9 10 322".

    Returns:
        Flat list of integers and integer lists, in source order.

    Raises:
        MalformedWidthTableError: On a non-integer token, an integer out of
            32-bit range, a nested or unbalanced bracket.
    """
    entries: list[WidthEntry] = []
    run: list[int] | None = None

    for index, word in enumerate(source.split()):
        opens = word.startswith("[")
        if opens:
            word = word[1:]
        closes = word.endswith("]")
        if closes:
            word = word[:-1]

        if opens:
            if run is not None:
                raise MalformedWidthTableError(f"Nested '[' at token {index}")
            run = []
        if word:
            value = _parse_int(word, index)
            if run is not None:
                run.append(value)
            else:
                entries.append(value)
        if closes:
            if run is None:
                raise MalformedWidthTableError(f"Unbalanced ']' at token {index}")
            entries.append(run)
            run = None

    if run is not None:
        raise MalformedWidthTableError("Width array is missing its closing ']'")

    return entries


def _check_cid(value: WidthEntry, position: int) -> int:
    if isinstance(value, list):
        raise MalformedWidthTableError(
            f"Expected a CID at entry {position}, got a width array"
        )
    if not 0 <= value <= MAX_CID:
        raise MalformedWidthTableError(
            f"CID {value} at entry {position} is outside 0..{MAX_CID}"
        )
    return value


def decode_widths(entries: Iterable[WidthEntry]) -> dict[int, int]:
    """Expands /W entries into a CID-to-width mapping.

    After a first CID, a width array selects the consecutive form; any other
    value is taken as the last CID of a range whose uniform width follows.
    Later entries overwrite earlier ones for the same CID.

    Args:
        entries: Output of parse_widths() or an equivalent list.

    Returns:
        Dictionary mapping CID to width.

    Raises:
        MalformedWidthTableError: If the entries do not form complete
            /W groups or a CID is out of range.
    """
    items = list(entries)
    result: dict[int, int] = {}
    i = 0

    while i < len(items):
        start_cid = _check_cid(items[i], i)
        if i + 1 >= len(items):
            raise MalformedWidthTableError(
                f"CID {start_cid} at entry {i} has no widths"
            )

        next_item = items[i + 1]
        if isinstance(next_item, list):
            if start_cid + len(next_item) - 1 > MAX_CID:
                raise MalformedWidthTableError(
                    f"Width array at entry {i + 1} runs past CID {MAX_CID}"
                )
            for offset, width in enumerate(next_item):
                result[start_cid + offset] = width
            i += 2
            continue

        end_cid = _check_cid(next_item, i + 1)
        if i + 2 >= len(items):
            raise MalformedWidthTableError(
                f"CID range {start_cid}-{end_cid} at entry {i} has no width"
            )
        width = items[i + 2]
        if isinstance(width, list):
            raise MalformedWidthTableError(
                f"Expected a width at entry {i + 2}, got a width array"
            )
        if end_cid < start_cid:
            raise MalformedWidthTableError(
                f"CID range {start_cid}-{end_cid} at entry {i} is reversed"
            )
        for cid in range(start_cid, end_cid + 1):
            result[cid] = width
        i += 3

    return result


def decode_compact_widths(source: str) -> dict[int, int]:
    """Decodes a compact width source string into a CID-to-width mapping.

    Raises:
        MalformedWidthTableError: If the source is malformed.
    """
    result = decode_widths(parse_widths(source))
    logger.debug("Decoded %d CID widths", len(result))
    return result


def encode_widths(
    cid_to_width: Mapping[int, int], *, min_range_run: int = MIN_RANGE_RUN
) -> list[WidthEntry]:
    """Creates compact /W entries from a CID-to-width mapping.

    Consecutive CIDs are grouped; inside a group, runs of at least
    ``min_range_run`` equal widths become ``c_first c_last w`` triples and
    everything else becomes ``c [w1 w2 ...]`` arrays.

    Args:
        cid_to_width: Mapping from CID to width.
        min_range_run: Shortest equal-width run written as a range.

    Returns:
        List in the same form parse_widths() produces.
    """
    cids = sorted(cid_to_width)
    entries: list[WidthEntry] = []

    i = 0
    while i < len(cids):
        # Find the full run of consecutive CIDs
        j = i + 1
        while j < len(cids) and cids[j] == cids[i] + (j - i):
            j += 1
        widths = [cid_to_width[cid] for cid in cids[i:j]]

        k = 0
        while k < len(widths):
            m = k + 1
            while m < len(widths) and widths[m] == widths[k]:
                m += 1

            if m - k >= min_range_run:
                entries.extend([cids[i + k], cids[i + m - 1], widths[k]])
                k = m
                continue

            # Collect individual widths until the next long equal-width run
            end = m
            while end < len(widths):
                lookahead = end + 1
                while lookahead < len(widths) and widths[lookahead] == widths[end]:
                    lookahead += 1
                if lookahead - end >= min_range_run:
                    break
                end = lookahead
            entries.extend([cids[i + k], widths[k:end]])
            k = end

        i = j

    return entries


def format_widths(entries: Iterable[WidthEntry]) -> str:
    """Renders /W entries back into compact source syntax."""
    parts = []
    for entry in entries:
        if isinstance(entry, list):
            parts.append("[" + " ".join(str(w) for w in entry) + "]")
        else:
            parts.append(str(entry))
    return " ".join(parts)
