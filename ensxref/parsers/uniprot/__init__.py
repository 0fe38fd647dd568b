"""
UniProt (SwissProt and SPTrEMBL) xref parser.

Modules:
- extractor: Read flat-file entries into ExtractedRecords
- transformer: Turn ExtractedRecords into XrefGraphNodes
- loader: Upload batches of XrefGraphNodes
- parser: Wire the three together for one file and species
"""
from .errors import (
    ConfigurationError,
    LoaderError,
    MalformedEntryError,
    SourceIdNotFoundError,
    UnknownTaxonQualifierError,
    XrefParserError,
)
from .extractor import UniProtExtractor, parse_entry
from .loader import batched, upload_xref_object_graphs
from .parser import UniProtParser, parse_release_file
from .transformer import SourceSelection, TransformerConfig, UniProtTransformer
from .types import (
    DependentXref,
    DirectXref,
    EntryQuality,
    ExtractedRecord,
    ReviewStatus,
    TaxonCode,
    TaxonQualifier,
    XrefGraphNode,
)

__all__ = [
    "ConfigurationError",
    "DependentXref",
    "DirectXref",
    "EntryQuality",
    "ExtractedRecord",
    "LoaderError",
    "MalformedEntryError",
    "ReviewStatus",
    "SourceIdNotFoundError",
    "SourceSelection",
    "TaxonCode",
    "TaxonQualifier",
    "TransformerConfig",
    "UniProtExtractor",
    "UniProtParser",
    "UniProtTransformer",
    "UnknownTaxonQualifierError",
    "XrefGraphNode",
    "XrefParserError",
    "batched",
    "parse_entry",
    "parse_release_file",
    "upload_xref_object_graphs",
]
