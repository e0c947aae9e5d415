"""ID plate reading.

Turns the glyph boxes found by the character detector into a plate ID by
rebuilding the two printed rows of the plate.

Core Components:
    - types: Character class table and plate ID constants
    - decoder: Two-line decoding

Example:
    >>> from plate_inspector.ocr import decode_two_line
    >>> plate_id = decode_two_line(character_result)
"""

from .decoder import TwoLineDecoder, decode_two_line, is_complete_plate_id, split_lines
from .types import CHARACTER_MAP, NO_READ, PLATE_ID_LENGTH, lookup_character

__all__ = [
    "CHARACTER_MAP",
    "NO_READ",
    "PLATE_ID_LENGTH",
    "lookup_character",
    "TwoLineDecoder",
    "decode_two_line",
    "is_complete_plate_id",
    "split_lines",
]
