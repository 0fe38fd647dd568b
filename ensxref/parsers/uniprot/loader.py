"""
Upload xref graph nodes to the xref database.

Each call to upload_xref_object_graphs() writes one batch inside one
transaction: either every graph of the batch is stored or, on error,
none is and LoaderError is raised.
"""
from __future__ import annotations

import logging
from itertools import islice
from typing import Iterable, Iterator, Optional, TypeVar

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ensxref.models.models import (
    DependentXref,
    PrimaryXref,
    Synonym,
    TranslationDirectXref,
    Xref,
)
from ensxref.parsers.uniprot.errors import LoaderError
from ensxref.parsers.uniprot.types import XrefGraphNode

logger = logging.getLogger(__name__)

T = TypeVar("T")


def batched(iterable: Iterable[T], size: int) -> Iterator[list[T]]:
    """
    Split an iterable into lists of at most size items, keeping order.

    Example:
        >>> list(batched(range(5), 2))
        [[0, 1], [2, 3], [4]]
    """
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    iterator = iter(iterable)
    while True:
        batch = list(islice(iterator, size))
        if not batch:
            return
        yield batch


def get_xref_id(
    session: Session,
    accession: str,
    source_id: int,
    species_id: int,
) -> Optional[int]:
    """Get the xref_id of an existing xref, or None."""
    xref = session.query(Xref).filter(
        and_(
            Xref.accession == accession,
            Xref.source_id == source_id,
            Xref.species_id == species_id,
        )
    ).first()
    return xref.xref_id if xref else None


def add_xref(
    session: Session,
    accession: str,
    label: Optional[str],
    description: Optional[str],
    source_id: int,
    species_id: int,
    info_type: str,
) -> int:
    """
    Get or create an xref.

    Returns:
        xref_id
    """
    xref_id = get_xref_id(session, accession, source_id, species_id)
    if xref_id:
        return xref_id

    xref = Xref(
        accession=accession,
        label=label or accession,
        description=description,
        source_id=source_id,
        species_id=species_id,
        info_type=info_type,
    )
    session.add(xref)
    session.flush()
    return xref.xref_id


def add_synonym(session: Session, xref_id: int, synonym: str) -> bool:
    """Add a synonym to an xref. Returns False if it was already there."""
    if session.get(Synonym, (xref_id, synonym)):
        return False
    session.add(Synonym(xref_id=xref_id, synonym=synonym))
    session.flush()
    return True


def add_primary_xref(session: Session, xref_id: int, node: XrefGraphNode) -> None:
    """Store the sequence of a sequence-matched xref."""
    if session.get(PrimaryXref, xref_id):
        return
    session.add(
        PrimaryXref(
            xref_id=xref_id,
            sequence=node.sequence,
            sequence_type=node.sequence_type,
            status=node.status,
        )
    )
    session.flush()


def add_dependent_xrefs(session: Session, master_xref_id: int, node: XrefGraphNode) -> int:
    """
    Store the dependent xrefs of a node and link them to their master.

    Raises:
        LoaderError: if a dependent xref has no source_id
    """
    count = 0
    for dep in node.dependent_xrefs:
        if dep.source_id is None:
            raise LoaderError(
                f"Could not find source_id for source {dep.source_name} "
                f"of dependent xref {dep.accession} on {node.accession}"
            )
        dep_xref_id = add_xref(
            session,
            dep.accession,
            dep.label,
            None,
            dep.source_id,
            node.species_id,
            'DEPENDENT',
        )

        existing = session.query(DependentXref).filter(
            and_(
                DependentXref.master_xref_id == master_xref_id,
                DependentXref.dependent_xref_id == dep_xref_id,
                DependentXref.linkage_source_id == dep.linkage_source_id,
            )
        ).first()
        if not existing:
            session.add(
                DependentXref(
                    master_xref_id=master_xref_id,
                    dependent_xref_id=dep_xref_id,
                    linkage_source_id=dep.linkage_source_id,
                )
            )
            session.flush()
            count += 1

        for synonym in dep.synonyms:
            add_synonym(session, dep_xref_id, synonym)
    return count


def add_direct_xrefs(session: Session, node: XrefGraphNode) -> int:
    """
    Store the direct xrefs of a node against Ensembl translations.

    Raises:
        LoaderError: if a direct xref has no source_id or is not
            against a translation
    """
    count = 0
    for direct in node.direct_xrefs:
        if direct.source_id is None:
            raise LoaderError(
                f"Could not find direct source_id for {node.accession} "
                f"-> {direct.stable_id}"
            )
        if direct.ensembl_type != 'Translation':
            raise LoaderError(
                f"Unsupported Ensembl type '{direct.ensembl_type}' "
                f"for direct xref {node.accession}"
            )
        direct_xref_id = add_xref(
            session,
            node.accession,
            node.label,
            node.description,
            direct.source_id,
            node.species_id,
            'DIRECT',
        )
        if session.get(TranslationDirectXref, (direct_xref_id, direct.stable_id)):
            continue
        session.add(
            TranslationDirectXref(
                general_xref_id=direct_xref_id,
                ensembl_stable_id=direct.stable_id,
                linkage_xref=direct.linkage_type,
            )
        )
        session.flush()
        count += 1
    return count


def upload_xref_object_graph(session: Session, node: XrefGraphNode) -> int:
    """
    Store one xref with its sequence, synonyms, dependent and direct xrefs.

    Returns:
        xref_id of the primary xref

    Raises:
        LoaderError: if the node is incomplete
    """
    if not node.accession:
        raise LoaderError("Your xref does not have an accession-number")
    if node.source_id is None:
        raise LoaderError(f"Xref {node.accession} does not have a source_id")

    xref_id = add_xref(
        session,
        node.accession,
        node.label,
        node.description,
        node.source_id,
        node.species_id,
        node.info_type,
    )
    add_primary_xref(session, xref_id, node)
    for synonym in node.synonyms:
        add_synonym(session, xref_id, synonym)

    add_dependent_xrefs(session, xref_id, node)
    add_direct_xrefs(session, node)
    return xref_id


def upload_xref_object_graphs(
    session: Session,
    nodes: list[XrefGraphNode],
    commit: bool = True,
) -> int:
    """
    Upload a batch of xref graphs in one transaction.

    Args:
        session: Database session
        nodes: Xref graph nodes, stored in order
        commit: Commit the batch; when False the caller owns the
            transaction (e.g. for a dry run)

    Returns:
        Number of graphs uploaded

    Raises:
        LoaderError: if any graph cannot be stored; the batch is rolled back
    """
    try:
        for node in nodes:
            upload_xref_object_graph(session, node)
        session.flush()
        if commit:
            session.commit()
    except LoaderError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        raise LoaderError(f"Failed to upload batch of {len(nodes)} xrefs: {e}") from e

    logger.debug(f"Uploaded {len(nodes)} xref graphs")
    return len(nodes)
