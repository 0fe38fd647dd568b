"""
Pytest fixtures for the xref parser tests.

Provides temporary files, mock and in-memory SQLite database sessions,
and builders for UniProt flat-file entries and extracted records.
"""
import tempfile
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ensxref.models.models import Base, Source, Species
from ensxref.parsers.uniprot.types import (
    EntryQuality,
    ExtractedRecord,
    ReviewStatus,
    TaxonCode,
)

SWISSPROT_SEQUENCE_MAPPED = 139
SWISSPROT_DIRECT = 138
SPTREMBL_SEQUENCE_MAPPED = 135
SPTREMBL_PROTEIN_EVIDENCE_GT_2 = 136
SPTREMBL_DIRECT = 134
EMBL_SOURCE_ID = 200

SOURCE_ID_MAP = {
    'Uniprot/SWISSPROT': {
        'direct': SWISSPROT_DIRECT,
        'sequence_mapped': SWISSPROT_SEQUENCE_MAPPED,
    },
    'Uniprot/SPTREMBL': {
        'direct': SPTREMBL_DIRECT,
        'protein_evidence_gt_2': SPTREMBL_PROTEIN_EVIDENCE_GT_2,
        'sequence_mapped': SPTREMBL_SEQUENCE_MAPPED,
    },
}

CYC_HUMAN_ENTRY = """ID   CYC_HUMAN               Reviewed;         105 AA.
AC   P99999; B2R5J3;
AC   Q6NUR2;
DT   21-JUL-1986, integrated into UniProtKB/Swiss-Prot.
DE   RecName: Full=Cytochrome c;
GN   Name=CYCS; Synonyms=CYC;
OS   Homo sapiens (Human).
OX   NCBI_TaxID=9606;
CC   -!- FUNCTION: Electron carrier protein.
DR   EMBL; M22877; AAA35732.1; -; Genomic_DNA.
DR   Ensembl; ENST00000305786; ENSP00000307786; ENSG00000172115.
PE   1: Evidence at protein level;
KW   3D-structure; Apoptosis.
SQ   SEQUENCE   105 AA;  11749 MW;  C1E5E2B5C3F5A5A3 CRC64;
     MGDVEKGKKI FIMKCSQCHT VEKGGKHKTG PNLHGLFGRK TGQAPGYSYT AANKNKGIIW
     GEDTLMEYLE NPKKYIPGTK MIFVGIKKKE ERADLIAYLK KATNE
//
"""

CYC_HUMAN_SEQUENCE = (
    "MGDVEKGKKIFIMKCSQCHTVEKGGKHKTGPNLHGLFGRKTGQAPGYSYTAANKNKGIIW"
    "GEDTLMEYLENPKKYIPGTKMIFVGIKKKEERADLIAYLKKATNE"
)

TREMBL_HUMAN_ENTRY = """ID   A0A024R161_HUMAN        Unreviewed;        75 AA.
AC   A0A024R161;
DE   SubName: Full=Guanine nucleotide-binding protein subunit gamma {ECO:0000313|EMBL:EAW05405.1};
OS   Homo sapiens (Human).
OX   NCBI_TaxID=9606 {ECO:0000313|EMBL:EAW05405.1, ECO:0000313|Proteomes:UP000005640};
PE   4: Predicted;
SQ   SEQUENCE   75 AA;  8486 MW;  2C4C5B3E8A1D1D3C CRC64;
     MKGETPVNST MSIGQARKMV EQLKIEASLC RIKVSKAAAD LMTYCDAHAC EDPLITPVPT
     SENPFREKKF FCAIL
//
"""

MOUSE_ENTRY = """ID   CYC_MOUSE               Reviewed;         105 AA.
AC   P62897;
DE   RecName: Full=Cytochrome c, somatic;
OX   NCBI_TaxID=10090;
PE   1: Evidence at protein level;
SQ   SEQUENCE   105 AA;  11605 MW;  0D0F1F8F3B8A9C4E CRC64;
     MGDVEKGKKI FVQKCAQCHT VEKGGKHKTG PNLHGLFGRK TGQAAGFSYT DANKNKGITW
//
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_file(temp_dir):
    """Create a temporary file."""
    def _create_file(name: str, content: str = "") -> Path:
        file_path = temp_dir / name
        file_path.write_text(content)
        return file_path
    return _create_file


@pytest.fixture
def mock_db_session():
    """Create a mock database session for testing."""
    session = MagicMock()
    session.execute = MagicMock()
    session.commit = MagicMock()
    session.rollback = MagicMock()
    session.close = MagicMock()
    return session


@pytest.fixture
def xref_session():
    """In-memory SQLite session with the xref schema created."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    with session_factory() as session:
        yield session
    engine.dispose()


@pytest.fixture
def seeded_session(xref_session):
    """Xref session holding the UniProt sources and two species."""
    for name, priorities in SOURCE_ID_MAP.items():
        for priority, source_id in priorities.items():
            xref_session.add(
                Source(source_id=source_id, name=name, priority_description=priority)
            )
    xref_session.add(Source(source_id=EMBL_SOURCE_ID, name='EMBL', priority_description='uniprot'))

    xref_session.add(Species(species_id=9606, taxonomy_id=9606, name='homo_sapiens'))
    xref_session.add(Species(species_id=9606, taxonomy_id=63221, name='homo_sapiens'))
    xref_session.add(Species(species_id=10090, taxonomy_id=10090, name='mus_musculus'))
    xref_session.commit()
    return xref_session


@pytest.fixture
def uniprot_entry():
    """Build the text of a minimal UniProt entry."""
    def _build(
        accessions: str = "P12345;",
        status: str = "Reviewed",
        evidence_level: int = 1,
        ox: Optional[str] = "NCBI_TaxID=9606;",
        name: str = "Test protein",
    ) -> str:
        lines = [
            f"ID   TEST_HUMAN              {status};         10 AA.",
            f"AC   {accessions}",
            f"DE   RecName: Full={name};",
        ]
        if ox is not None:
            lines.append(f"OX   {ox}")
        lines.append(f"PE   {evidence_level}: Evidence at protein level;")
        lines.append("SQ   SEQUENCE   10 AA;  1000 MW;  0000000000000000 CRC64;")
        lines.append("     MKTAYIAKQR")
        lines.append("//")
        return "\n".join(lines) + "\n"
    return _build


@pytest.fixture
def make_record():
    """Build an ExtractedRecord without going through the extractor."""
    def _build(
        accessions=("P12345",),
        status: ReviewStatus = ReviewStatus.REVIEWED,
        evidence_level: int = 1,
        taxon_codes=(("NCBI_TaxID", "9606"),),
        description: str = "Test protein",
        sequence: str = "MKTAYIAKQR",
    ) -> ExtractedRecord:
        return ExtractedRecord(
            accession_numbers=tuple(accessions),
            entry_name="TEST_HUMAN",
            description=description,
            sequence=sequence,
            quality=EntryQuality(status=status, evidence_level=evidence_level),
            taxon_codes=tuple(TaxonCode(q, c) for q, c in taxon_codes),
        )
    return _build
