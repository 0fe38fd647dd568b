"""
UniProt transformer - turn extracted records into xref graph nodes.

A record becomes a node only if at least one of its taxon codes maps to
the species being loaded. The node's source is chosen from the entry's
review status and protein evidence level:

    Reviewed                      -> Uniprot/SWISSPROT  sequence_mapped
    Unreviewed, evidence 1-2      -> Uniprot/SPTREMBL   sequence_mapped
    Unreviewed, evidence 3 and up -> Uniprot/SPTREMBL   protein_evidence_gt_2
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from ensxref.parsers.uniprot.errors import (
    ConfigurationError,
    MalformedEntryError,
    SourceIdNotFoundError,
    UnknownTaxonQualifierError,
)
from ensxref.parsers.uniprot.types import (
    DependentXref,
    DirectXref,
    ExtractedRecord,
    ReviewStatus,
    TaxonQualifier,
    XrefGraphNode,
)

logger = logging.getLogger(__name__)

SWISSPROT_SOURCE = "Uniprot/SWISSPROT"
SPTREMBL_SOURCE = "Uniprot/SPTREMBL"

SEQUENCE_MAPPED = "sequence_mapped"
DIRECT = "direct"

MAX_TREMBL_EVIDENCE_LEVEL_FOR_STANDARD = 2
PROTEIN_EVIDENCE_GT_2 = f"protein_evidence_gt_{MAX_TREMBL_EVIDENCE_LEVEL_FOR_STANDARD}"

# Primary accession used by some old files to tag unreviewed entries
UNREVIEWED_SENTINEL = "unreviewed"


def swissprot_priority(evidence_level: int) -> str:
    return SEQUENCE_MAPPED


def sptrembl_priority(evidence_level: int) -> str:
    """Only TrEMBL entries with evidence at protein or transcript level are displayed."""
    if evidence_level <= MAX_TREMBL_EVIDENCE_LEVEL_FOR_STANDARD:
        return SEQUENCE_MAPPED
    return PROTEIN_EVIDENCE_GT_2


def ncbi_taxonomy_id(taxon_code: str) -> int:
    # NCBI taxon codes and Ensembl taxonomy IDs are identical
    return int(taxon_code)


@dataclass(frozen=True)
class SourceSelection:
    """Source name and the function choosing its priority from an evidence level."""
    source_name: str
    priority_mapper: Callable[[int], str]


def _default_taxon_code_mappers() -> dict[TaxonQualifier, Callable[[str], int]]:
    return {
        TaxonQualifier.NCBI_TAXID: ncbi_taxonomy_id,
    }


def _default_source_selection() -> dict[ReviewStatus, SourceSelection]:
    return {
        ReviewStatus.REVIEWED: SourceSelection(SWISSPROT_SOURCE, swissprot_priority),
        ReviewStatus.UNREVIEWED: SourceSelection(SPTREMBL_SOURCE, sptrembl_priority),
    }


@dataclass
class TransformerConfig:
    """Lookup tables driving the transformer."""
    taxon_code_mappers: dict[TaxonQualifier, Callable[[str], int]] = field(
        default_factory=_default_taxon_code_mappers
    )
    source_selection: dict[ReviewStatus, SourceSelection] = field(
        default_factory=_default_source_selection
    )

    def validate(self) -> None:
        """
        Check that every taxon qualifier and review status is covered.

        Raises:
            ConfigurationError: if any enum member has no entry
        """
        missing_qualifiers = [q.value for q in TaxonQualifier if q not in self.taxon_code_mappers]
        if missing_qualifiers:
            raise ConfigurationError(
                f"No taxon code mapper for: {', '.join(missing_qualifiers)}"
            )
        missing_statuses = [s.value for s in ReviewStatus if s not in self.source_selection]
        if missing_statuses:
            raise ConfigurationError(
                f"No source selection for: {', '.join(missing_statuses)}"
            )


class UniProtTransformer:
    """
    Transform extracted UniProt records into xref graph nodes.

    Args:
        species_id: Ensembl species ID being loaded
        taxonomy_map: Dict mapping taxonomy ID to species ID
        source_id_map: Dict mapping source name to a dict of
            priority_description -> source_id
        config: Lookup tables; defaults cover NCBI taxon codes and both
            review statuses

    Both maps must be fully built before the first call to transform();
    they are never modified afterwards.
    """

    def __init__(
        self,
        species_id: int,
        taxonomy_map: dict[int, int],
        source_id_map: dict[str, dict[str, int]],
        config: Optional[TransformerConfig] = None,
    ):
        self.species_id = species_id
        self.taxonomy_map = taxonomy_map
        self.source_id_map = source_id_map
        self.config = config or TransformerConfig()
        self.config.validate()

        self.stats = {
            'transformed': 0,
            'species_mismatch': 0,
            'rejected_unreviewed': 0,
        }
        self.source_counts: dict[tuple[str, str], int] = {}

    def transform(self, record: ExtractedRecord) -> Optional[XrefGraphNode]:
        """
        Transform one record.

        Returns:
            XrefGraphNode, or None if the entry is not for this species
            or is tagged as unreviewed

        Raises:
            UnknownTaxonQualifierError: if an OX qualifier has no mapper
            MalformedEntryError: if the record has no accession or a taxon
                code cannot be mapped
            SourceIdNotFoundError: if the source-ID map lacks the source
                and priority chosen for the entry
        """
        if not record.accession_numbers:
            raise MalformedEntryError(f"Entry {record.entry_name} has no accession")

        multiplicity = self.recognised_taxon_ids(record)
        if not multiplicity:
            self.stats['species_mismatch'] += 1
            return None

        # NOTE: Unreviewed status on its own does not reject an entry,
        # only the sentinel accession does.
        if self.entry_is_unreviewed(record):
            self.stats['rejected_unreviewed'] += 1
            logger.warning(
                f"Entries with accession '{record.accession_numbers[0]}' "
                f"are not allowed and will be skipped"
            )
            return None

        accession, *synonyms = record.accession_numbers
        source_id = self.get_source_id(record)

        node = XrefGraphNode(
            accession=accession,
            label=accession,
            description=record.description,
            sequence=record.sequence,
            source_id=source_id,
            species_id=self.species_id,
            synonyms=list(synonyms),
            multiplicity=multiplicity,
        )
        node.dependent_xrefs, node.direct_xrefs = self.extract_linked_xrefs(record, source_id)

        self.stats['transformed'] += 1
        return node

    def recognised_taxon_ids(self, record: ExtractedRecord) -> int:
        """
        Count the taxon codes of a record that map to the species being loaded.

        Raises:
            UnknownTaxonQualifierError: if a qualifier has no mapper
            MalformedEntryError: if a taxon code is invalid for its qualifier
        """
        recognised = 0
        for taxon in record.taxon_codes:
            try:
                code_mapper = self.config.taxon_code_mappers[TaxonQualifier(taxon.qualifier)]
            except (ValueError, KeyError):
                raise UnknownTaxonQualifierError(taxon.qualifier)
            try:
                taxonomy_id = code_mapper(taxon.code)
            except ValueError:
                raise MalformedEntryError(
                    f"Invalid {taxon.qualifier} taxon code '{taxon.code}'"
                )
            if self.taxonomy_map.get(taxonomy_id) == self.species_id:
                recognised += 1
        return recognised

    @staticmethod
    def entry_is_unreviewed(record: ExtractedRecord) -> bool:
        """Check for the 'unreviewed' primary accession some old files carry."""
        return record.accession_numbers[0].lower() == UNREVIEWED_SENTINEL

    def get_source_id(self, record: ExtractedRecord) -> int:
        """
        Translate the review status and evidence level of a record into a source_id.

        Raises:
            SourceIdNotFoundError: if the source-ID map has no such entry
        """
        quality = record.quality
        selection = self.config.source_selection[quality.status]
        priority = selection.priority_mapper(quality.evidence_level)

        source_id = self.source_id_map.get(selection.source_name, {}).get(priority)
        if source_id is None:
            raise SourceIdNotFoundError(selection.source_name, priority)

        key = (selection.source_name, priority)
        self.source_counts[key] = self.source_counts.get(key, 0) + 1
        return source_id

    def extract_linked_xrefs(
        self,
        record: ExtractedRecord,
        source_id: int,
    ) -> tuple[list[DependentXref], list[DirectXref]]:
        """
        Build dependent and direct xrefs from the DR lines of a record.

        Not implemented yet: always returns empty lists. Once it is, gene
        name dependent xrefs must not be added for proteins derived from
        Ensembl.
        """
        return [], []
