"""
ensxref - Ensembl xref parsers

Flat-file parsers that populate the Ensembl xref database with external
cross-references, starting with UniProt (SwissProt and SPTrEMBL).

Packages:
- core: Configuration
- db: Database engine and session management
- models: SQLAlchemy ORM models for the xref schema
- parsers: Source-specific xref parsers
- utils: Logging, file I/O and common database lookups

Usage:
    python scripts/xref/load_uniprot_xrefs.py uniprot_sprot.dat.gz \\
        --source-id 139 --species-id 9606

Environment Variables:
    DATABASE_URL: Database connection URL
    XREF_BATCH_SIZE: Number of xrefs uploaded per batch (default: 1000)
"""

__version__ = "0.1.0"
