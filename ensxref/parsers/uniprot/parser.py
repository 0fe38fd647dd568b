"""
UniProt parser - load SwissProt and SPTrEMBL xrefs.

UniProt files contain both kinds of entry, distinguished by the ID line:

    ID   CYC_PIG                 Reviewed;         104 AA.   SwissProt
    ID   Q3ASY8_CHLCH            Unreviewed;     36805 AA.   SPTrEMBL

Entries are streamed from the file, transformed one at a time and
uploaded in batches; a batch is the unit of commit, so an interrupted
run leaves only whole batches behind.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from sqlalchemy.orm import Session

from ensxref.parsers.uniprot.errors import ConfigurationError, MalformedEntryError
from ensxref.parsers.uniprot.extractor import UniProtExtractor
from ensxref.parsers.uniprot.loader import batched, upload_xref_object_graphs
from ensxref.parsers.uniprot.transformer import (
    DIRECT,
    PROTEIN_EVIDENCE_GT_2,
    SEQUENCE_MAPPED,
    SPTREMBL_SOURCE,
    SWISSPROT_SOURCE,
    UniProtTransformer,
)
from ensxref.parsers.uniprot.types import ExtractedRecord, XrefGraphNode
from ensxref.utils.database import (
    build_taxonomy_map,
    get_source_id_for_source_name,
    get_source_id_map,
    set_release,
)
from ensxref.utils.file_io import open_file

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000

# Sources populated from UniProt files, keyed by short name
UNIPROT_SOURCES = {
    'sp': (SWISSPROT_SOURCE, SEQUENCE_MAPPED),
    'sptr': (SPTREMBL_SOURCE, SEQUENCE_MAPPED),
    'sptr_non_display': (SPTREMBL_SOURCE, PROTEIN_EVIDENCE_GT_2),
    'sp_direct': (SWISSPROT_SOURCE, DIRECT),
    'sptr_direct': (SPTREMBL_SOURCE, DIRECT),
}
SWISSPROT_KEYS = ('sp', 'sp_direct')
SPTREMBL_KEYS = ('sptr', 'sptr_non_display', 'sptr_direct')

SWISSPROT_RELEASE_PATTERN = re.compile(r"(UniProtKB/Swiss-Prot Release .*)")
TREMBL_RELEASE_PATTERN = re.compile(r"(UniProtKB/TrEMBL Release .*)")

Loader = Callable[..., int]


def parse_release_file(release_file: Union[str, Path]) -> tuple[Optional[str], Optional[str]]:
    """
    Read the Swiss-Prot and TrEMBL release strings from a reldate.txt file.

    Example file:
        UniProt Knowledgebase Release 2018_10 consists of:
        UniProtKB/Swiss-Prot Release 2018_10 of 07-Nov-2018
        UniProtKB/TrEMBL Release 2018_10 of 07-Nov-2018

    Returns:
        Tuple of (swissprot_release, trembl_release); either may be None
    """
    sp_release = None
    sptr_release = None

    with open_file(release_file) as fh:
        for line in fh:
            line = line.rstrip("\r\n")
            sp_match = SWISSPROT_RELEASE_PATTERN.search(line)
            if sp_match:
                sp_release = sp_match.group(1)
                continue
            sptr_match = TREMBL_RELEASE_PATTERN.search(line)
            if sptr_match:
                sptr_release = sptr_match.group(1)

    return sp_release, sptr_release


class UniProtParser:
    """
    Parse a UniProt flat file into the xref database.

    Args:
        session: Database session
        loader: Callable taking (session, nodes, commit=...) that stores
            one batch of xref graphs
        batch_size: Number of xref graphs per upload
        dry_run: Upload without committing; the caller rolls back
    """

    def __init__(
        self,
        session: Session,
        loader: Optional[Loader] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        dry_run: bool = False,
    ):
        if batch_size < 1:
            raise ValueError("Batch size must be at least 1")
        self.session = session
        self.loader = loader or upload_xref_object_graphs
        self.batch_size = batch_size
        self.dry_run = dry_run

    def run(
        self,
        source_id: Optional[int],
        species_id: Optional[int],
        files: Optional[list[Union[str, Path]]],
        rel_file: Optional[Union[str, Path]] = None,
    ) -> dict:
        """
        Load xrefs from the first of files for one species.

        Args:
            source_id: Source the parser was scheduled for
            species_id: Ensembl species ID to load xrefs for
            files: UniProt .dat files; only the first is read
            rel_file: Optional reldate.txt with release strings

        Returns:
            Statistics dict

        Raises:
            ValueError: if source_id, species_id or files is missing
            ConfigurationError: if the xref database lacks a UniProt source
            LoaderError: if a batch fails to upload
        """
        if source_id is None or species_id is None or not files:
            raise ValueError("Need to pass source_id, species_id and files")

        filename = Path(files[0])
        source_ids = self.get_source_ids()

        logger.debug(f"Source IDs for file '{filename}' (scheduled as source {source_id}):")
        logger.debug(f"  SwissProt: {source_ids['sp']}")
        logger.debug(f"  SpTREMBL: {source_ids['sptr']}")
        logger.debug(f"  SpTREMBL protein_evidence > 2: {source_ids['sptr_non_display']}")
        logger.debug(f"  SwissProt direct: {source_ids['sp_direct']}")
        logger.debug(f"  SpTREMBL direct: {source_ids['sptr_direct']}")

        if rel_file is not None:
            self.set_releases(source_ids, rel_file)

        source_id_map = get_source_id_map(self.session, [SWISSPROT_SOURCE, SPTREMBL_SOURCE])
        taxonomy_map = build_taxonomy_map(self.session, species_id)
        logger.info(f"Taxonomy IDs recognised for species {species_id}: {sorted(taxonomy_map)}")

        transformer = UniProtTransformer(species_id, taxonomy_map, source_id_map)
        return self.create_xrefs(filename, transformer)

    def get_source_ids(self) -> dict[str, int]:
        """
        Look up the source_id of every UniProt source.

        Raises:
            ConfigurationError: if any source is missing
        """
        source_ids = {}
        missing = []
        for key, (source_name, priority) in UNIPROT_SOURCES.items():
            source_id = get_source_id_for_source_name(self.session, source_name, priority)
            if source_id is None:
                missing.append(f"{source_name} ({priority})")
            source_ids[key] = source_id

        if missing:
            raise ConfigurationError(
                f"Failed to acquire all source IDs, missing: {', '.join(missing)}"
            )
        return source_ids

    def set_releases(self, source_ids: dict[str, int], rel_file: Union[str, Path]) -> None:
        """Record the Swiss-Prot and TrEMBL release strings on their sources."""
        sp_release, sptr_release = parse_release_file(rel_file)
        logger.info(f"Swiss-Prot release is {sp_release or 'not defined'}")
        logger.info(f"SpTrEMBL release is {sptr_release or 'not defined'}")

        for key in SWISSPROT_KEYS:
            set_release(self.session, source_ids[key], sp_release)
        for key in SPTREMBL_KEYS:
            set_release(self.session, source_ids[key], sptr_release)

    def transform_records(
        self,
        records: Iterable[ExtractedRecord],
        transformer: UniProtTransformer,
        stats: dict,
    ) -> Iterator[XrefGraphNode]:
        """Yield the nodes of records that are relevant to the species."""
        for record in records:
            try:
                node = transformer.transform(record)
            except MalformedEntryError as e:
                stats['malformed_skipped'] += 1
                logger.warning(f"Skipping {record.entry_name}: {e}")
                continue
            if node is not None:
                yield node

    def create_xrefs(self, filename: Path, transformer: UniProtTransformer) -> dict:
        """
        Stream a file through the transformer and upload the results in batches.

        Returns:
            Statistics dict
        """
        stats = {
            'entries_read': 0,
            'malformed_skipped': 0,
            'species_mismatch': 0,
            'rejected_unreviewed': 0,
            'swissprot': 0,
            'sptrembl': 0,
            'sptrembl_non_display': 0,
            'batches_uploaded': 0,
            'xrefs_uploaded': 0,
        }

        extractor = UniProtExtractor(filename)
        records = iter(extractor)
        try:
            nodes = self.transform_records(records, transformer, stats)
            for batch in batched(nodes, self.batch_size):
                self.loader(self.session, batch, commit=not self.dry_run)
                stats['batches_uploaded'] += 1
                stats['xrefs_uploaded'] += len(batch)
                logger.debug(
                    f"Uploaded batch {stats['batches_uploaded']} "
                    f"({stats['xrefs_uploaded']} xrefs so far)"
                )
        finally:
            records.close()

        stats['entries_read'] = extractor.entry_count
        stats['malformed_skipped'] += extractor.skipped_count
        stats['species_mismatch'] = transformer.stats['species_mismatch']
        stats['rejected_unreviewed'] = transformer.stats['rejected_unreviewed']
        stats['swissprot'] = transformer.source_counts.get((SWISSPROT_SOURCE, SEQUENCE_MAPPED), 0)
        stats['sptrembl'] = transformer.source_counts.get((SPTREMBL_SOURCE, SEQUENCE_MAPPED), 0)
        stats['sptrembl_non_display'] = transformer.source_counts.get(
            (SPTREMBL_SOURCE, PROTEIN_EVIDENCE_GT_2), 0
        )

        logger.info(
            f"Read {stats['swissprot']} SwissProt xrefs, {stats['sptrembl']} SPTrEMBL xrefs "
            f"with protein evidence codes 1-2, and {stats['sptrembl_non_display']} SPTrEMBL "
            f"xrefs with protein evidence codes > 2 from {filename}"
        )
        return stats
