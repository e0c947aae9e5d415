"""Two-line plate ID decoding from character glyph detections.

ID plates carry their code on two printed rows. The character detector only
returns an unordered bag of glyph boxes, so the rows are rebuilt here:

1. The mean top edge (``y``) of all glyphs splits them into two rows.
   Glyphs above the mean form row one, glyphs below it form row two.
2. Each row is read left to right (ascending ``x``).
3. Row one is followed by row two, with no separator.

The single split line is only correct when the rows are well separated
relative to the glyph height, which camera framing has to guarantee.
Glyphs whose ``y`` equals the mean exactly belong to neither row and are
dropped from the ID.

Example:
    >>> from plate_inspector.ocr import TwoLineDecoder
    >>> decoder = TwoLineDecoder()
    >>> plate_id = decoder.decode(character_result)
    >>> print(plate_id)
    'A1B2C3D4'
"""

import logging
from typing import List, Mapping, Sequence, Tuple, Union

from plate_inspector.common.types import DetectionBox, DetectionResult

from .types import CHARACTER_MAP, NO_READ, PLATE_ID_LENGTH, lookup_character

logger = logging.getLogger(__name__)

GlyphInput = Union[DetectionResult, Sequence[DetectionBox]]


def _glyphs(glyphs: GlyphInput) -> List[DetectionBox]:
    if isinstance(glyphs, DetectionResult):
        return glyphs.glyphs()
    return [box for box in glyphs if box.h > 0 or box.w > 0]


def split_lines(
    glyphs: Sequence[DetectionBox],
) -> Tuple[List[DetectionBox], List[DetectionBox], List[DetectionBox]]:
    """Split glyphs into the two printed rows.

    Args:
        glyphs: Glyph boxes with a non-zero extent.

    Returns:
        Tuple of (line_one, line_two, dropped). Both lines are sorted by
        ascending ``x``; ties keep detection order. ``dropped`` holds the
        glyphs lying exactly on the mean.
    """
    if not glyphs:
        return [], [], []

    # Integer mean, truncated
    y_avg = sum(box.y for box in glyphs) // len(glyphs)

    line_one = sorted((box for box in glyphs if box.y < y_avg), key=lambda b: b.x)
    line_two = sorted((box for box in glyphs if box.y > y_avg), key=lambda b: b.x)
    dropped = [box for box in glyphs if box.y == y_avg]

    if dropped:
        logger.debug(
            f"{len(dropped)} glyph(s) at y={y_avg} lie on the row split and are dropped"
        )

    return line_one, line_two, dropped


def decode_two_line(
    glyphs: GlyphInput,
    character_map: Mapping[int, str] = CHARACTER_MAP,
) -> str:
    """Decode a plate ID from character glyph detections.

    Args:
        glyphs: Character detector result, or its boxes.
        character_map: Class id to character table.

    Returns:
        The decoded ID, or ``"NoRead"`` when there are no glyphs.
        The length is not checked here.

    Raises:
        ConfigurationError: If a glyph class is not in the character map.

    Example:
        >>> decode_two_line([])
        'NoRead'
    """
    boxes = _glyphs(glyphs)
    if not boxes:
        return NO_READ

    line_one, line_two, _ = split_lines(boxes)
    return "".join(
        lookup_character(box.class_id, character_map) for box in line_one + line_two
    )


def is_complete_plate_id(plate_id: str, length: int = PLATE_ID_LENGTH) -> bool:
    """Check whether a decoded ID has the full plate ID length."""
    return len(plate_id) == length


class TwoLineDecoder:
    """Decodes ID plates printed on two rows.

    Args:
        character_map: Class id to character table of the character detector.

    Attributes:
        character_map: Class table in use.

    Example:
        >>> decoder = TwoLineDecoder()
        >>> decoder.decode(result)
        'A1B2C3D4'
    """

    def __init__(self, character_map: Mapping[int, str] = CHARACTER_MAP):
        self.character_map = character_map

    def decode(self, glyphs: GlyphInput) -> str:
        """Decode a plate ID; see ``decode_two_line``."""
        boxes = _glyphs(glyphs)
        logger.debug(f"Decoding {len(boxes)} glyph(s): y={[box.y for box in boxes]}")

        plate_id = decode_two_line(boxes, self.character_map)
        logger.info(f"Image ID is: {plate_id}")
        return plate_id
