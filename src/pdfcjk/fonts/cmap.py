# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Unicode-to-CID CMap resources.

Reads the ``begincidchar``/``begincidrange`` blocks of a UTF-16 CMap
resource (e.g. UniJIS-UTF16-H) into a mapping from Unicode code point to
CID. Parsing is line oriented and tolerant: lines inside a block that do not
match the entry syntax are skipped, everything outside a block is ignored.
"""

import logging
import os
import re
import threading
from collections.abc import Iterable, Mapping, Sequence
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType

from ..exceptions import ResourceUnavailableError

logger = logging.getLogger(__name__)

BEGIN_CID_CHAR = "begincidchar"
END_CID_CHAR = "endcidchar"
BEGIN_CID_RANGE = "begincidrange"
END_CID_RANGE = "endcidrange"

CID_CHAR_PATTERN = re.compile(r"<([0-9a-fA-F]+)> ([0-9]+)")
CID_RANGE_PATTERN = re.compile(r"<([0-9a-fA-F]+)> <([0-9a-fA-F]+)> ([0-9]+)")

# Largest cidrange that is expanded; one UTF-16 code unit space
MAX_CIDRANGE_SPAN = 0x10000

CMAP_PATH_ENV = "PDFCJK_CMAP_PATH"

# poppler-data and Ghostscript install locations
SYSTEM_CMAP_DIRS = (
    "/usr/share/poppler/cMap",
    "/usr/local/share/poppler/cMap",
    "/usr/share/ghostscript/Resource/CMap",
)


def decode_utf16_hex(hex_str: str) -> int | None:
    """Decodes a CMap source code as UTF-16BE to a Unicode code point.

    A two-digit code is a single byte and is widened to one code unit. A
    surrogate pair ("D840DC0B") decodes to one supplementary code point.

    Args:
        hex_str: Hex digits between the angle brackets of a CMap entry.

    Returns:
        The first code point of the decoded text, or None if the code is
        not valid UTF-16BE.
    """
    if len(hex_str) == 2:
        hex_str = "00" + hex_str
    if len(hex_str) % 4 != 0:
        return None
    try:
        text = bytes.fromhex(hex_str).decode("utf-16-be")
    except (ValueError, UnicodeDecodeError):
        return None
    return ord(text[0])


def parse_cid_cmap(lines: Iterable[str]) -> dict[int, int]:
    """Parses CMap resource lines into a Unicode-to-CID mapping.

    A block starts on a line that ends with its begin keyword (so
    "100 begincidrange" opens a range block) and ends only on a line that
    is exactly the end keyword. Entries are applied in file order, so a
    later entry for the same code point wins.

    Args:
        lines: Lines of the CMap resource, with or without line endings.

    Returns:
        Dictionary mapping Unicode code point to CID.
    """
    uni_to_cid: dict[int, int] = {}
    in_cid_char = False
    in_cid_range = False
    skipped = 0

    for raw_line in lines:
        line = raw_line.rstrip("\r\n")

        if line.endswith(BEGIN_CID_CHAR):
            in_cid_char = True
        elif line == END_CID_CHAR:
            in_cid_char = False
        elif line.endswith(BEGIN_CID_RANGE):
            in_cid_range = True
        elif line == END_CID_RANGE:
            in_cid_range = False
        elif in_cid_char:
            match = CID_CHAR_PATTERN.fullmatch(line)
            code = decode_utf16_hex(match.group(1)) if match else None
            if code is None:
                skipped += 1
                continue
            uni_to_cid[code] = int(match.group(2))
        elif in_cid_range:
            match = CID_RANGE_PATTERN.fullmatch(line)
            if match is None:
                skipped += 1
                continue
            start = decode_utf16_hex(match.group(1))
            end = decode_utf16_hex(match.group(2))
            if start is None or end is None or end < start:
                skipped += 1
                continue
            if end - start + 1 > MAX_CIDRANGE_SPAN:
                logger.warning(
                    "Skipping cidrange <%s> <%s>: spans %d code points",
                    match.group(1),
                    match.group(2),
                    end - start + 1,
                )
                skipped += 1
                continue
            cid = int(match.group(3))
            for offset in range(end - start + 1):
                uni_to_cid[start + offset] = cid + offset

    if skipped:
        logger.debug("Skipped %d malformed CMap entries", skipped)
    return uni_to_cid


class CMapLocator:
    """Finds CMap resource files on disk.

    Directories are searched in order: explicit ``search_paths``, the
    directories listed in the PDFCJK_CMAP_PATH environment variable, the
    package's ``resources/cmaps`` directory and the poppler-data and
    Ghostscript system locations. Within a directory both ``<dir>/<name>``
    and the poppler layout ``<dir>/Adobe-<Ordering>/<name>`` are tried.
    """

    def __init__(
        self,
        search_paths: Sequence[str | os.PathLike] | None = None,
        *,
        use_environment: bool = True,
        use_system_paths: bool = True,
    ) -> None:
        """Initializes the CMapLocator.

        Args:
            search_paths: Directories searched before any default location.
            use_environment: Whether PDFCJK_CMAP_PATH is consulted.
            use_system_paths: Whether bundled and system directories are
                consulted.
        """
        dirs = [Path(p) for p in search_paths or ()]
        if use_environment:
            env_value = os.environ.get(CMAP_PATH_ENV, "")
            dirs.extend(Path(p) for p in env_value.split(os.pathsep) if p)
        if use_system_paths:
            dirs.append(Path(str(files("pdfcjk") / "resources" / "cmaps")))
            dirs.extend(Path(p) for p in SYSTEM_CMAP_DIRS)
        self.search_paths: tuple[Path, ...] = tuple(dirs)

    def find(self, resource_id: str, ordering: str | None = None) -> Path:
        """Returns the path of a CMap resource.

        Args:
            resource_id: CMap name, e.g. "UniJIS-UTF16-H".
            ordering: CIDSystemInfo ordering, used for the poppler layout.

        Raises:
            ResourceUnavailableError: If no search directory has the resource.
        """
        if not resource_id or Path(resource_id).name != resource_id:
            raise ResourceUnavailableError(f"Invalid CMap name '{resource_id}'")

        for directory in self.search_paths:
            candidates = [directory / resource_id]
            if ordering:
                candidates.append(directory / f"Adobe-{ordering}" / resource_id)
            for candidate in candidates:
                if candidate.is_file():
                    logger.debug("Found CMap %s at %s", resource_id, candidate)
                    return candidate

        raise ResourceUnavailableError(
            f"CMap resource '{resource_id}' not found "
            f"(searched {len(self.search_paths)} directories)"
        )

    def load(self, resource_id: str, ordering: str | None = None) -> dict[int, int]:
        """Locates and parses a CMap resource.

        Raises:
            ResourceUnavailableError: If the resource is missing or unreadable.
        """
        return load_cid_cmap(self.find(resource_id, ordering))


def load_cid_cmap(path: str | os.PathLike) -> dict[int, int]:
    """Reads a CMap resource file into a Unicode-to-CID mapping.

    Raises:
        ResourceUnavailableError: If the file cannot be read.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            uni_to_cid = parse_cid_cmap(f)
    except OSError as e:
        raise ResourceUnavailableError(f"Could not read CMap '{path}': {e}") from e

    logger.debug("Loaded %d Unicode->CID entries from %s", len(uni_to_cid), path)
    return uni_to_cid


class CMapCache:
    """Shares decoded CMaps between font instances.

    Entries are keyed by resource name and ordering and are returned as
    read-only views, so every font using the same encoding sees one map.
    """

    def __init__(self, locator: CMapLocator | None = None) -> None:
        self._locator = locator or CMapLocator()
        self._maps: dict[tuple[str, str | None], Mapping[int, int]] = {}
        self._lock = threading.Lock()

    def get(self, resource_id: str, ordering: str | None = None) -> Mapping[int, int]:
        """Returns the decoded CMap, loading it on first use.

        Raises:
            ResourceUnavailableError: If the resource is missing or unreadable.
        """
        key = (resource_id, ordering)
        cached = self._maps.get(key)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._maps.get(key)
            if cached is None:
                cached = MappingProxyType(self._locator.load(resource_id, ordering))
                self._maps[key] = cached
            return cached

    def clear(self) -> None:
        with self._lock:
            self._maps.clear()

    def __len__(self) -> int:
        return len(self._maps)
