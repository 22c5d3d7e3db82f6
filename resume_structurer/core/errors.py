"""
Exception taxonomy for the resume structuring pipeline.

Only UnsupportedFormatError, EmptyDocumentError and CorruptDocumentError reach a
caller (they belong to the file extraction layer). Everything else is recovered
inside the stage that raised it.
"""


class ResumeParsingError(Exception):
    """Base class for all parsing errors."""


class EncodingError(ResumeParsingError):
    """Text could not be decoded with any known encoding."""


class AIUnavailableError(ResumeParsingError):
    """The structuring service could not be reached or returned a non-2xx status."""


class AIMalformedResponseError(ResumeParsingError):
    """The structuring service answered, but not with a usable JSON object."""


class UnsupportedFormatError(ResumeParsingError):
    """Uploaded file type has no text extractor."""


class EmptyDocumentError(ResumeParsingError):
    """The file decoded fine but contains no extractable text."""


class CorruptDocumentError(ResumeParsingError):
    """The file claims a supported format but its reader could not open it."""
