"""
UniProt flat-file extractor.

Reads SwissProt/SPTrEMBL .dat files and yields one ExtractedRecord per
entry. Entries are separated by a line reading exactly '//'; every
other line carries a two-letter tag in columns 1-2 and its data from
column 6:

    ID   CYC_PIG                 Reviewed;         104 AA.
    AC   P00001; Q12345;
    DE   RecName: Full=Cytochrome c;
    OX   NCBI_TaxID=9823;
    PE   1: Evidence at protein level;
    SQ   SEQUENCE   104 AA;  11655 MW;  ...
         MGDVEKGKKI FVQKCAQCHT VEKGGKHKTG ...
    //

Entries that cannot be parsed are logged and skipped; they never stop
the iteration.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, TextIO, Union

from ensxref.parsers.uniprot.errors import MalformedEntryError
from ensxref.parsers.uniprot.types import (
    EntryQuality,
    ExtractedRecord,
    ReviewStatus,
    TaxonCode,
)
from ensxref.utils.file_io import open_file

logger = logging.getLogger(__name__)

END_OF_ENTRY = "//"
DATA_COLUMN = 5

ID_PATTERN = re.compile(r"^(\S+)\s+(\w+);")
PE_PATTERN = re.compile(r"^(\d+)")
OX_PATTERN = re.compile(r"^(\w+)=([^;]*);")
FULL_NAME_PATTERN = re.compile(r"(?:RecName|SubName): Full=(.*);")
EVIDENCE_PATTERN = re.compile(r"\s*\{ECO:.*?\}")
TAXON_EVIDENCE_PATTERN = re.compile(r"\{.*?\}")


def split_entries(handle: Iterable[str]) -> Iterator[list[str]]:
    """
    Split a flat file into entries.

    Yields:
        The lines of each '//'-terminated entry, terminator excluded

    Raises:
        MalformedEntryError: if the file ends inside an entry
    """
    lines: list[str] = []
    for line in handle:
        line = line.rstrip("\r\n")
        if line == END_OF_ENTRY:
            yield lines
            lines = []
            continue
        lines.append(line)

    if any(line.strip() for line in lines):
        raise MalformedEntryError(
            f"File ends inside an entry; {len(lines)} trailing lines discarded"
        )


def _tag_and_data(line: str) -> tuple[str, str]:
    return line[:2], line[DATA_COLUMN:]


def parse_accessions(ac_data: list[str]) -> list[str]:
    """Split AC line data into accessions, primary accession first."""
    accessions = []
    for data in ac_data:
        accessions.extend(acc.strip() for acc in data.split(";") if acc.strip())
    return accessions


def parse_description(de_data: list[str]) -> str:
    """
    Build a description from DE line data.

    Top-level RecName and any SubName values form the name, separated by
    '; '. RecNames nested under Contains:/Includes: form a trailing
    description, separated by spaces. Evidence tags are removed.
    """
    name = ""
    description = ""

    for data in de_data:
        match = FULL_NAME_PATTERN.search(data)
        if not match:
            continue
        value = match.group(1)

        if data.startswith("RecName:") or "SubName:" in data:
            if name:
                name += "; "
            name += value
        else:
            if description:
                description += " "
            description += value

    desc = f"{name} {description.strip()}"
    desc = EVIDENCE_PATTERN.sub("", desc)
    return desc.strip()


def parse_taxon_codes(ox_data: list[str]) -> list[TaxonCode]:
    """
    Parse OX line data into taxon codes.

    Examples:
        NCBI_TaxID=9606;
        NCBI_TaxID=158878, 158879;
        NCBI_TaxID=8355 {ECO:0000313|EMBL:AAH80976.1};
    """
    taxon_codes = []
    for data in ox_data:
        match = OX_PATTERN.match(data)
        if not match:
            raise MalformedEntryError(f"Unparseable OX line: '{data}'")
        qualifier, codes = match.groups()
        codes = TAXON_EVIDENCE_PATTERN.sub("", codes)
        for code in codes.split(","):
            code = code.strip()
            if code:
                taxon_codes.append(TaxonCode(qualifier=qualifier, code=code))
    return taxon_codes


def parse_sequence(sequence_lines: list[str]) -> str:
    """Join sequence lines, dropping all whitespace."""
    return re.sub(r"\s", "", "".join(sequence_lines))


def parse_entry(lines: list[str]) -> ExtractedRecord:
    """
    Parse the lines of one entry.

    Args:
        lines: Entry lines, without the '//' terminator

    Returns:
        ExtractedRecord

    Raises:
        MalformedEntryError: if the ID, AC or PE line is missing or invalid
    """
    entry_name = None
    status = None
    evidence_level = None
    ac_data: list[str] = []
    de_data: list[str] = []
    ox_data: list[str] = []
    dr_lines: list[str] = []
    gn_lines: list[str] = []
    cc_lines: list[str] = []
    sequence_lines: list[str] = []
    in_sequence = False

    for line in lines:
        if not line.strip():
            continue
        tag, data = _tag_and_data(line)

        if in_sequence:
            if tag == "  ":
                sequence_lines.append(data)
                continue
            in_sequence = False

        if tag == "ID":
            match = ID_PATTERN.match(data)
            if not match:
                raise MalformedEntryError(f"Unparseable ID line: '{line}'")
            entry_name = match.group(1)
            try:
                status = ReviewStatus(match.group(2).capitalize())
            except ValueError:
                raise MalformedEntryError(
                    f"Unrecognised review status '{match.group(2)}' for {entry_name}"
                )
        elif tag == "AC":
            ac_data.append(data)
        elif tag == "DE":
            de_data.append(data)
        elif tag == "OX":
            ox_data.append(data)
        elif tag == "PE":
            match = PE_PATTERN.match(data)
            if not match:
                raise MalformedEntryError(f"Unparseable PE line: '{line}'")
            evidence_level = int(match.group(1))
        elif tag == "DR":
            dr_lines.append(data)
        elif tag == "GN":
            gn_lines.append(data)
        elif tag == "CC":
            cc_lines.append(data)
        elif tag == "SQ":
            in_sequence = True

    if entry_name is None:
        raise MalformedEntryError("Entry has no ID line")

    accessions = parse_accessions(ac_data)
    if not accessions:
        raise MalformedEntryError(f"Entry {entry_name} has no accession")
    if evidence_level is None:
        raise MalformedEntryError(f"Entry {entry_name} has no PE line")

    return ExtractedRecord(
        accession_numbers=tuple(accessions),
        entry_name=entry_name,
        description=parse_description(de_data),
        sequence=parse_sequence(sequence_lines),
        quality=EntryQuality(status=status, evidence_level=evidence_level),
        taxon_codes=tuple(parse_taxon_codes(ox_data)),
        crossreference_lines=tuple(dr_lines),
        gene_name_lines=tuple(gn_lines),
        comment_lines=tuple(cc_lines),
    )


class UniProtExtractor:
    """
    Iterate over the entries of a UniProt flat file.

    The file is opened when iteration starts and closed when it ends,
    whether the file was exhausted, iteration was abandoned or an error
    was raised. Entries that fail to parse are skipped and counted in
    skipped_count.

    Example:
        >>> extractor = UniProtExtractor(Path("uniprot_sprot.dat.gz"))
        >>> for record in extractor:
        ...     print(record.accession_numbers[0])
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)
        self.entry_count = 0
        self.skipped_count = 0

    def __iter__(self) -> Iterator[ExtractedRecord]:
        with open_file(self.filename) as fh:
            yield from self.extract(fh)

    def extract(self, handle: TextIO) -> Iterator[ExtractedRecord]:
        """Yield records from an already open handle."""
        try:
            for lines in split_entries(handle):
                self.entry_count += 1
                try:
                    record = parse_entry(lines)
                except MalformedEntryError as e:
                    self.skipped_count += 1
                    logger.warning(f"Skipping entry {self.entry_count} of {self.filename}: {e}")
                    continue
                yield record
        except MalformedEntryError as e:
            self.skipped_count += 1
            logger.warning(f"{self.filename}: {e}")
