"""
Common database query utilities.

This module provides the source and species lookups shared by the
xref parsers.
"""

from collections import defaultdict
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ensxref.models.models import Source, Species


def get_source_id_for_source_name(
    session: Session,
    source_name: str,
    priority_desc: Optional[str] = None,
) -> Optional[int]:
    """
    Get the source_id for a source name and priority description.

    Args:
        session: Database session
        source_name: Source name (e.g., "Uniprot/SWISSPROT")
        priority_desc: Priority description (e.g., "sequence_mapped");
            any priority matches when None

    Returns:
        source_id or None if not found
    """
    query = session.query(Source).filter(Source.name == source_name)
    if priority_desc is not None:
        query = query.filter(Source.priority_description == priority_desc)
    source = query.order_by(Source.source_id).first()
    return source.source_id if source else None


def get_source_id_map(
    session: Session,
    source_names: Iterable[str],
) -> dict[str, dict[str, int]]:
    """
    Get source IDs for every priority of the given source names.

    Returns:
        Dict mapping source name to a dict of priority_description -> source_id
    """
    source_id_map: dict[str, dict[str, int]] = defaultdict(dict)
    sources = session.query(Source).filter(
        Source.name.in_(list(source_names))
    ).all()
    for source in sources:
        if source.priority_description is None:
            continue
        source_id_map[source.name][source.priority_description] = source.source_id
    return dict(source_id_map)


def species_id2taxonomy(session: Session) -> dict[int, list[int]]:
    """
    Get the taxonomy IDs recognised for each species.

    Returns:
        Dict mapping species_id to a list of taxonomy IDs
    """
    species2tax: dict[int, list[int]] = defaultdict(list)
    rows = session.query(Species.species_id, Species.taxonomy_id).all()
    for species_id, taxonomy_id in rows:
        species2tax[species_id].append(taxonomy_id)
    return dict(species2tax)


def build_taxonomy_map(session: Session, species_id: int) -> dict[int, int]:
    """
    Build the taxonomy ID -> species ID map for one species.

    The species ID itself is always included, as Ensembl species IDs
    are NCBI taxonomy IDs.
    """
    tax_ids = list(species_id2taxonomy(session).get(species_id, []))
    tax_ids.append(species_id)
    return {tax_id: species_id for tax_id in tax_ids}


def set_release(
    session: Session,
    source_id: int,
    release: Optional[str],
) -> bool:
    """
    Record the release string of the data loaded for a source.

    Returns:
        True if the source was updated, False if it does not exist
    """
    source = session.query(Source).filter(Source.source_id == source_id).first()
    if not source:
        return False
    source.source_release = release
    session.flush()
    return True
