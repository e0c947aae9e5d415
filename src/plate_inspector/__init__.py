"""
Plate Inspector

Inspects images of stamped metal plates: detects plate regions, flags blurry
plate bodies and decodes two-line ID plates from detected character glyphs.
"""

__version__ = "0.1.0"
