"""
core/audio/cutlist.py — Cut-list XML documents for the video editing step.

Document format (bit-exact, no trailing newline):

    <?xml version="1.0" encoding="UTF-8"?>
    <cuts>
      <cut id="1" time="0.00" color="blue" />
      <cut id="2" time="1.50" color="red" />
    </cuts>

Rules:
    - element order equals timestamp order
    - id is 1-based and sequential
    - time has exactly two fraction digits, ties rounded away from zero
    - color alternates strictly, starting with "blue" for id 1

The document is written by string formatting rather than ElementTree so the
declaration quotes and the " />" spacing stay byte-identical. Parsing uses
ElementTree.
"""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Sequence

from core.audio.types import Cut, format_seconds

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CUT_COLORS: tuple[str, str] = ("blue", "red")
"""Alternating tag values. Index 0 is used for id 1."""

XML_DECLARATION: str = '<?xml version="1.0" encoding="UTF-8"?>'


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def build_cut_list(timestamps: Iterable[float]) -> tuple[Cut, ...]:
    """Turn ascending cut times into numbered, colored Cut records.

    Args:
        timestamps: Cut times in seconds, in the order they should appear.

    Returns:
        One Cut per timestamp, ids from 1, colors alternating blue/red.

    Raises:
        ValueError: If a timestamp is negative or not finite.
    """
    cuts: list[Cut] = []
    color_index = 0
    for position, seconds in enumerate(timestamps):
        seconds = float(seconds)
        if not math.isfinite(seconds) or seconds < 0:
            raise ValueError(
                f"Cut time must be >= 0 and finite, got {seconds} at position {position}"
            )
        cuts.append(
            Cut(
                id=position + 1,
                time_sec=float(format_seconds(seconds)),
                color=CUT_COLORS[color_index],
            )
        )
        color_index = 1 - color_index
    return tuple(cuts)


def cuts_to_xml(cuts: Sequence[Cut]) -> str:
    """Render Cut records as a cut-list document."""
    lines = [XML_DECLARATION, "<cuts>"]
    for cut in cuts:
        lines.append(f'  <cut id="{cut.id}" time="{cut.time_label}" color="{cut.color}" />')
    lines.append("</cuts>")
    return "\n".join(lines)


def encode_cut_list(timestamps: Iterable[float]) -> str:
    """Timestamps → cut-list document in one step.

    Example:
        >>> print(encode_cut_list([0.0, 1.5]))
        <?xml version="1.0" encoding="UTF-8"?>
        <cuts>
          <cut id="1" time="0.00" color="blue" />
          <cut id="2" time="1.50" color="red" />
        </cuts>
    """
    return cuts_to_xml(build_cut_list(timestamps))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def parse_cut_list(document: str) -> tuple[Cut, ...]:
    """Read a cut-list document back into Cut records.

    Raises:
        ValueError: If the document is not well-formed XML, the root is not
            <cuts>, or a <cut> element is missing or has an invalid attribute.
    """
    try:
        root = ET.fromstring(document.encode("utf-8"))
    except ET.ParseError as exc:
        raise ValueError(f"Malformed cut-list document: {exc}") from exc

    if root.tag != "cuts":
        raise ValueError(f"Expected <cuts> root element, got <{root.tag}>")

    cuts: list[Cut] = []
    for element in root.findall("cut"):
        try:
            cut_id = int(element.attrib["id"])
            time_sec = float(element.attrib["time"])
            color = element.attrib["color"]
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Invalid <cut> element {element.attrib!r}: {exc}") from exc
        if color not in CUT_COLORS:
            raise ValueError(f"Unknown cut color {color!r}, expected one of {CUT_COLORS}")
        cuts.append(Cut(id=cut_id, time_sec=time_sec, color=color))
    return tuple(cuts)
