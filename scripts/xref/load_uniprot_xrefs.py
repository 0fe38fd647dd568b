#!/usr/bin/env python3
"""
Load UniProt xrefs into the xref database.

Parses a UniProt flat file (SwissProt or SPTrEMBL, optionally gzipped),
keeps the entries belonging to one species and uploads them as
sequence-matched xrefs in batches.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from ensxref.core.settings import settings
from ensxref.db.engine import SessionLocal
from ensxref.parsers.uniprot.errors import XrefParserError
from ensxref.parsers.uniprot.parser import UniProtParser
from ensxref.utils.logging_setup import setup_logging

load_dotenv()

logger = logging.getLogger(__name__)


def log_summary(stats: dict) -> None:
    """Log the statistics of a parser run."""
    logger.info("=" * 50)
    logger.info("Summary:")
    logger.info(f"  Entries read: {stats['entries_read']}")
    logger.info(f"  Malformed entries skipped: {stats['malformed_skipped']}")
    logger.info(f"  Entries for other species: {stats['species_mismatch']}")
    logger.info(f"  Unreviewed-tagged entries rejected: {stats['rejected_unreviewed']}")
    logger.info(f"  SwissProt xrefs: {stats['swissprot']}")
    logger.info(f"  SPTrEMBL xrefs (evidence 1-2): {stats['sptrembl']}")
    logger.info(f"  SPTrEMBL xrefs (evidence > 2): {stats['sptrembl_non_display']}")
    logger.info(f"  Batches uploaded: {stats['batches_uploaded']}")
    logger.info(f"  Xrefs uploaded: {stats['xrefs_uploaded']}")
    logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load SwissProt/SPTrEMBL xrefs from UniProt flat files"
    )
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="UniProt .dat file(s); only the first is parsed",
    )
    parser.add_argument(
        "--source-id",
        type=int,
        required=True,
        help="Source ID the parser is scheduled for",
    )
    parser.add_argument(
        "--species-id",
        type=int,
        required=True,
        help="Ensembl species ID to load xrefs for (e.g. 9606)",
    )
    parser.add_argument(
        "--release-file",
        type=Path,
        help="UniProt reldate.txt file",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.xref_batch_size,
        help=f"Xrefs uploaded per transaction (default: {settings.xref_batch_size})",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file path",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and upload without committing",
    )
    return parser


def main(argv: list[str] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file, log_dir=settings.log_dir)

    logger.info(f"Started at {datetime.now()}")

    if not args.files[0].exists():
        logger.error(f"Input file not found: {args.files[0]}")
        return 1
    if args.release_file and not args.release_file.exists():
        logger.error(f"Release file not found: {args.release_file}")
        return 1

    if args.dry_run:
        logger.info("DRY RUN - no database modifications")

    try:
        with SessionLocal() as session:
            parser = UniProtParser(
                session,
                batch_size=args.batch_size,
                dry_run=args.dry_run,
            )
            stats = parser.run(
                args.source_id,
                args.species_id,
                args.files,
                rel_file=args.release_file,
            )

            if not args.dry_run:
                session.commit()
                logger.info("Transaction committed")
            else:
                session.rollback()
                logger.info("Transaction rolled back (dry run)")

            log_summary(stats)

    except (XrefParserError, SQLAlchemyError) as e:
        logger.error(f"Error: {e}")
        logger.exception("Full traceback:")
        return 1

    logger.info(f"Completed at {datetime.now()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
