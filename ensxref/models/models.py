from typing import Optional

from sqlalchemy import ForeignKeyConstraint, Index, Integer, PrimaryKeyConstraint, Text, VARCHAR
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

class Base(DeclarativeBase):
    pass


class Species(Base):
    __tablename__ = 'species'
    __table_args__ = (
        PrimaryKeyConstraint('species_id', 'taxonomy_id', name='species_pk'),
        Index('species_taxonomy_idx', 'taxonomy_id'),
        {'comment': 'Ensembl species and every taxonomy ID recognised as belonging to each.'}
    )

    species_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Ensembl species identifier. A species may map to several taxonomy IDs.')
    taxonomy_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='NCBI taxonomy ID recognised for the species.')
    name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, comment='Production name of the species.')
    aliases: Mapped[Optional[str]] = mapped_column(Text, comment='Comma-separated alternative names.')


class Source(Base):
    __tablename__ = 'source'
    __table_args__ = (
        PrimaryKeyConstraint('source_id', name='source_pk'),
        Index('source_name_idx', 'name'),
        {'comment': 'External databases that xrefs are imported from, one row per name and priority.'}
    )

    source_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for a source.')
    name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, comment='Source name (eg. Uniprot/SWISSPROT).')
    priority_description: Mapped[Optional[str]] = mapped_column(VARCHAR(40), comment='Qualifier distinguishing rows for the same source name (eg. sequence_mapped, direct).')
    source_release: Mapped[Optional[str]] = mapped_column(VARCHAR(255), comment='Release string of the data most recently loaded for this source.')
    status: Mapped[str] = mapped_column(VARCHAR(20), nullable=False, default='NOIDEA', comment='Whether the source is known to map (Coded: KNOWN, XREF, PRED, ORTH, PSEUDO, LOWLEVEL, NOIDEA).')
    ordered: Mapped[int] = mapped_column(Integer, nullable=False, default=1, comment='Order in which the source is loaded.')
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1, comment='Priority of the source when resolving clashes; lower wins.')

    xrefs: Mapped[list['Xref']] = relationship('Xref', back_populates='source')


class Xref(Base):
    __tablename__ = 'xref'
    __table_args__ = (
        ForeignKeyConstraint(['source_id'], ['source.source_id'], name='xref_source_fk'),
        PrimaryKeyConstraint('xref_id', name='xref_pk'),
        Index('xref_acession_idx', 'accession', 'label', 'source_id', 'species_id', unique=True),
        Index('xref_species_source_idx', 'species_id', 'source_id'),
        {'comment': 'External identifiers loaded from all sources.'}
    )

    xref_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for an xref.')
    accession: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, comment='Identifier assigned by the external database.')
    label: Mapped[Optional[str]] = mapped_column(VARCHAR(255), comment='Display label, defaults to the accession.')
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0, comment='Version of the external identifier, 0 when unversioned.')
    description: Mapped[Optional[str]] = mapped_column(Text, comment='Description of the external entry.')
    source_id: Mapped[int] = mapped_column(Integer, nullable=False, comment='Source of the xref. Foreign key to the source table.')
    species_id: Mapped[int] = mapped_column(Integer, nullable=False, comment='Ensembl species the xref was loaded for.')
    info_type: Mapped[str] = mapped_column(VARCHAR(20), nullable=False, default='NONE', comment='How the xref is mapped (Coded: NONE, PROJECTION, MISC, DEPENDENT, DIRECT, SEQUENCE_MATCH, INFERRED_PAIR, PROBE, UNMAPPED, COORDINATE_OVERLAP, CHECKSUM).')
    info_text: Mapped[Optional[str]] = mapped_column(VARCHAR(255), comment='Free text qualifying info_type.')

    source: Mapped['Source'] = relationship('Source', back_populates='xrefs')
    primary_xref: Mapped[Optional['PrimaryXref']] = relationship('PrimaryXref', back_populates='xref', uselist=False)
    synonyms: Mapped[list['Synonym']] = relationship('Synonym', back_populates='xref')


class PrimaryXref(Base):
    __tablename__ = 'primary_xref'
    __table_args__ = (
        ForeignKeyConstraint(['xref_id'], ['xref.xref_id'], ondelete='CASCADE', name='primary_xref_xref_fk'),
        PrimaryKeyConstraint('xref_id', name='primary_xref_pk'),
        {'comment': 'Sequences of xrefs that are mapped to Ensembl by sequence alignment.'}
    )

    xref_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Foreign key to the xref table.')
    sequence: Mapped[Optional[str]] = mapped_column(Text, comment='Sequence of the external entry.')
    sequence_type: Mapped[Optional[str]] = mapped_column(VARCHAR(10), comment='Type of sequence (Coded: dna, peptide).')
    status: Mapped[Optional[str]] = mapped_column(VARCHAR(20), comment='Whether the entry is experimentally supported (Coded: experimental, predicted).')

    xref: Mapped['Xref'] = relationship('Xref', back_populates='primary_xref')


class Synonym(Base):
    __tablename__ = 'synonym'
    __table_args__ = (
        ForeignKeyConstraint(['xref_id'], ['xref.xref_id'], ondelete='CASCADE', name='synonym_xref_fk'),
        PrimaryKeyConstraint('xref_id', 'synonym', name='synonym_pk'),
        Index('synonym_idx', 'synonym'),
        {'comment': 'Alternative accessions and names for an xref.'}
    )

    xref_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Foreign key to the xref table.')
    synonym: Mapped[str] = mapped_column(VARCHAR(255), primary_key=True, comment='Alternative accession or name.')

    xref: Mapped['Xref'] = relationship('Xref', back_populates='synonyms')


class DependentXref(Base):
    __tablename__ = 'dependent_xref'
    __table_args__ = (
        ForeignKeyConstraint(['master_xref_id'], ['xref.xref_id'], ondelete='CASCADE', name='dependent_xref_master_fk'),
        ForeignKeyConstraint(['dependent_xref_id'], ['xref.xref_id'], ondelete='CASCADE', name='dependent_xref_dependent_fk'),
        PrimaryKeyConstraint('object_xref_id', name='dependent_xref_pk'),
        Index('dependent_xref_master_idx', 'master_xref_id'),
        Index('dependent_xref_dependent_idx', 'dependent_xref_id'),
        Index('dependent_xref_uk', 'master_xref_id', 'dependent_xref_id', 'linkage_source_id', unique=True),
        {'comment': 'Xrefs reachable only through the accession of another (master) xref.'}
    )

    object_xref_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Assigned unique identifier for a dependent link.')
    master_xref_id: Mapped[int] = mapped_column(Integer, nullable=False, comment='Xref the dependent xref was found on.')
    dependent_xref_id: Mapped[int] = mapped_column(Integer, nullable=False, comment='The dependent xref.')
    linkage_annotation: Mapped[Optional[str]] = mapped_column(VARCHAR(255), comment='Free text describing the linkage.')
    linkage_source_id: Mapped[int] = mapped_column(Integer, nullable=False, comment='Source of the master xref.')


class TranslationDirectXref(Base):
    __tablename__ = 'translation_direct_xref'
    __table_args__ = (
        ForeignKeyConstraint(['general_xref_id'], ['xref.xref_id'], ondelete='CASCADE', name='translation_direct_xref_fk'),
        PrimaryKeyConstraint('general_xref_id', 'ensembl_stable_id', name='translation_direct_xref_pk'),
        Index('translation_direct_stable_id_idx', 'ensembl_stable_id'),
        {'comment': 'Xrefs mapped directly onto an Ensembl translation stable ID.'}
    )

    general_xref_id: Mapped[int] = mapped_column(Integer, primary_key=True, comment='Foreign key to the xref table.')
    ensembl_stable_id: Mapped[str] = mapped_column(VARCHAR(255), primary_key=True, comment='Ensembl translation stable ID.')
    linkage_xref: Mapped[Optional[str]] = mapped_column(VARCHAR(100), comment='How the link was established.')
