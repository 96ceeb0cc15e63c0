"""errors.py — Exception types raised while converting a Runeberg archive."""


class RunepubError(Exception):
    """Base class for every error runepub reports to the user."""


class ConversionError(RunepubError):
    """The archive is malformed or uses something we do not handle."""


class MissingResource(ConversionError):
    """A required archive member or metadata field is absent."""


class MalformedRecord(ConversionError):
    """An index, metadata or reference-table line has the wrong shape."""


class UnknownReference(ConversionError):
    """A key does not resolve in the bundled lookup tables."""


class UnsupportedSequence(ConversionError):
    """A page sequence in Articles.lst is not a 4-digit id or ascending range."""


class StructuralViolation(ConversionError):
    """The markup cannot be turned into a well-formed chapter."""


class EmptyContent(ConversionError):
    """A page file is empty or the index yields no chapters."""


class PackagingError(RunepubError):
    """Writing the EPUB container failed."""
