"""
Exceptions raised by the UniProt parser.

Configuration errors and loader failures abort a run. A
MalformedEntryError only ever causes the offending entry to be skipped.
"""


class XrefParserError(Exception):
    """Base class for UniProt parser errors."""


class ConfigurationError(XrefParserError):
    """The run is misconfigured: missing sources, incomplete mapper tables."""


class UnknownTaxonQualifierError(ConfigurationError):
    """An OX line uses a taxonomy database with no registered code mapper."""

    def __init__(self, qualifier: str):
        super().__init__(f"No taxon code mapper registered for '{qualifier}'")
        self.qualifier = qualifier


class SourceIdNotFoundError(ConfigurationError):
    """The source-ID map has no entry for a source name and priority."""

    def __init__(self, source_name: str, priority: str):
        super().__init__(
            f"No source ID for source '{source_name}' with priority '{priority}'"
        )
        self.source_name = source_name
        self.priority = priority


class MalformedEntryError(XrefParserError):
    """A flat-file entry lacks a required field or cannot be parsed."""


class LoaderError(XrefParserError):
    """Uploading a batch of xref graphs failed; the batch was rolled back."""
