"""
Exception hierarchy for the plate inspection pipeline.

Three failure scopes exist:
    - Configuration errors abort the whole run (bad config, unloadable
      models, character classes missing from the character map).
    - Per-image errors abort one image and the batch moves on
      (unreadable image, malformed file name, detector call failure).
    - Decode ambiguities are not errors at all and never raise.
"""


class PlateInspectorError(Exception):
    """Base class for all plate inspector errors."""


class ConfigurationError(PlateInspectorError, ValueError):
    """Fatal configuration problem. The batch must stop."""


class ImageReadError(PlateInspectorError, OSError):
    """Image file could not be read or decoded."""


class FilenameParseError(PlateInspectorError, ValueError):
    """Image file name does not carry a parsable capture timestamp."""


class DetectorInvocationError(PlateInspectorError, RuntimeError):
    """A model call failed. Carries the name of the failing collaborator."""

    def __init__(self, detector: str, message: str):
        self.detector = detector
        super().__init__(f"{detector}: {message}")


class DetectorTimeoutError(DetectorInvocationError):
    """Waited too long for another in-flight call on the same model."""
