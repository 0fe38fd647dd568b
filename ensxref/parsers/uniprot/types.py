"""
Data types shared by the UniProt extractor, transformer and loader.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ReviewStatus(str, Enum):
    """Review tier of a UniProt entry, taken from its ID line."""
    REVIEWED = "Reviewed"        # SwissProt
    UNREVIEWED = "Unreviewed"    # SPTrEMBL


class TaxonQualifier(str, Enum):
    """Taxonomy databases that may appear on OX lines."""
    NCBI_TAXID = "NCBI_TaxID"


@dataclass(frozen=True)
class TaxonCode:
    """One taxon code from an OX line, qualifier kept as found in the file."""
    qualifier: str
    code: str


@dataclass(frozen=True)
class EntryQuality:
    status: ReviewStatus
    evidence_level: int          # PE line, 1 = evidence at protein level


@dataclass(frozen=True)
class ExtractedRecord:
    """Fields of one UniProt entry, as read from the flat file."""
    accession_numbers: tuple[str, ...]
    entry_name: str
    description: str
    sequence: str
    quality: EntryQuality
    taxon_codes: tuple[TaxonCode, ...] = ()
    crossreference_lines: tuple[str, ...] = ()
    gene_name_lines: tuple[str, ...] = ()
    comment_lines: tuple[str, ...] = ()


@dataclass
class DependentXref:
    source_name: str
    source_id: Optional[int]
    linkage_source_id: int
    accession: str
    label: Optional[str] = None
    synonyms: list[str] = field(default_factory=list)


@dataclass
class DirectXref:
    stable_id: str
    source_id: Optional[int]
    ensembl_type: str = "Translation"
    linkage_type: str = "DIRECT"


@dataclass
class XrefGraphNode:
    """An xref and everything hanging off it, ready for upload."""
    accession: str
    label: str
    description: str
    sequence: str
    source_id: int
    species_id: int
    synonyms: list[str] = field(default_factory=list)
    sequence_type: str = "peptide"
    status: str = "experimental"
    info_type: str = "SEQUENCE_MATCH"
    multiplicity: int = 1        # taxon codes matching the species; diagnostics only
    dependent_xrefs: list[DependentXref] = field(default_factory=list)
    direct_xrefs: list[DirectXref] = field(default_factory=list)
