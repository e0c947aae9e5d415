"""Type definitions for the ID plate reading module.

Holds the character class table of the character detector and the
constants describing a decoded plate ID.
"""

from types import MappingProxyType
from typing import Mapping

from plate_inspector.exceptions import ConfigurationError

# Plate ID returned when the character detector found no glyphs
NO_READ = "NoRead"

# Number of characters on a fully read ID plate
PLATE_ID_LENGTH = 8

# Class table of the character detector: digits first (1-9, then 0),
# followed by the letters stamped on the plates.
CHARACTER_MAP: Mapping[int, str] = MappingProxyType(
    {
        0: "1",
        1: "2",
        2: "3",
        3: "4",
        4: "5",
        5: "6",
        6: "7",
        7: "8",
        8: "9",
        9: "0",
        10: "A",
        11: "E",
        12: "F",
        13: "H",
        14: "J",
        15: "K",
        16: "P",
        17: "X",
        18: "Y",
        19: "L",
        20: "B",
        21: "T",
        22: "R",
    }
)


def lookup_character(class_id: int, character_map: Mapping[int, str] = CHARACTER_MAP) -> str:
    """Map a character detector class id to its character.

    Args:
        class_id: Class index reported by the character detector.
        character_map: Class table to use.

    Returns:
        The single character for the class.

    Raises:
        ConfigurationError: If the class is missing from the table. The model
            and the table disagree, so every later image would fail too.
    """
    try:
        return character_map[class_id]
    except KeyError:
        raise ConfigurationError(
            f"Character class {class_id} is not in the character map "
            f"(known classes: 0-{len(character_map) - 1}). "
            "Check that the character model matches the configured class table."
        ) from None
