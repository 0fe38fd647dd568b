"""
Tests for the UniProt flat-file extractor.
"""
import gzip
import io

import pytest

from ensxref.parsers.uniprot.errors import MalformedEntryError
from ensxref.parsers.uniprot.extractor import (
    UniProtExtractor,
    parse_accessions,
    parse_description,
    parse_entry,
    parse_sequence,
    parse_taxon_codes,
    split_entries,
)
from ensxref.parsers.uniprot.types import ReviewStatus, TaxonCode

from tests.conftest import (
    CYC_HUMAN_ENTRY,
    CYC_HUMAN_SEQUENCE,
    MOUSE_ENTRY,
    TREMBL_HUMAN_ENTRY,
)


def _entry_lines(text: str) -> list[str]:
    return next(split_entries(io.StringIO(text)))


class TestSplitEntries:
    """Tests for split_entries function."""

    def test_split_on_terminator(self):
        entries = list(split_entries(io.StringIO(CYC_HUMAN_ENTRY + MOUSE_ENTRY)))
        assert len(entries) == 2
        assert entries[0][0].startswith("ID   CYC_HUMAN")
        assert entries[1][0].startswith("ID   CYC_MOUSE")

    def test_terminator_not_included(self):
        lines = _entry_lines(CYC_HUMAN_ENTRY)
        assert "//" not in lines

    def test_empty_file(self):
        assert list(split_entries(io.StringIO(""))) == []

    def test_trailing_blank_lines_ignored(self):
        entries = list(split_entries(io.StringIO(CYC_HUMAN_ENTRY + "\n\n")))
        assert len(entries) == 1

    def test_truncated_entry_raises(self):
        truncated = CYC_HUMAN_ENTRY + "ID   CYC_PIG   Reviewed;   104 AA.\nAC   P00004;\n"
        entries = split_entries(io.StringIO(truncated))
        assert len(next(entries)) > 0
        with pytest.raises(MalformedEntryError):
            next(entries)


class TestParseAccessions:
    """Tests for parse_accessions function."""

    def test_order_preserved_across_lines(self):
        assert parse_accessions(["P99999; B2R5J3;", "Q6NUR2;"]) == ["P99999", "B2R5J3", "Q6NUR2"]

    def test_empty_tokens_dropped(self):
        assert parse_accessions(["P99999;  ;"]) == ["P99999"]


class TestParseDescription:
    """Tests for parse_description function."""

    def test_recname(self):
        assert parse_description(["RecName: Full=Cytochrome c;"]) == "Cytochrome c"

    def test_altname_ignored(self):
        data = ["RecName: Full=Cytochrome c;", "AltName: Full=Something else;"]
        assert parse_description(data) == "Cytochrome c"

    def test_evidence_codes_removed(self):
        data = ["SubName: Full=Guanine nucleotide-binding protein {ECO:0000313|EMBL:EAW05405.1};"]
        assert parse_description(data) == "Guanine nucleotide-binding protein"

    def test_multiple_subnames_joined(self):
        data = ["SubName: Full=Alpha;", "SubName: Full=Beta;"]
        assert parse_description(data) == "Alpha; Beta"

    def test_nested_recnames_appended(self):
        data = [
            "RecName: Full=Polyprotein;",
            "Contains:",
            "  RecName: Full=Chain A;",
            "Contains:",
            "  RecName: Full=Chain B;",
        ]
        assert parse_description(data) == "Polyprotein Chain A Chain B"

    def test_no_names(self):
        assert parse_description(["Flags: Fragment;"]) == ""


class TestParseTaxonCodes:
    """Tests for parse_taxon_codes function."""

    def test_single_code(self):
        assert parse_taxon_codes(["NCBI_TaxID=9606;"]) == [TaxonCode("NCBI_TaxID", "9606")]

    def test_multiple_codes(self):
        codes = parse_taxon_codes(["NCBI_TaxID=158878, 158879;"])
        assert [c.code for c in codes] == ["158878", "158879"]

    def test_evidence_removed(self):
        codes = parse_taxon_codes(["NCBI_TaxID=8355 {ECO:0000313|EMBL:AAH80976.1};"])
        assert codes == [TaxonCode("NCBI_TaxID", "8355")]

    def test_other_qualifier_kept(self):
        codes = parse_taxon_codes(["Other_DB=42;"])
        assert codes == [TaxonCode("Other_DB", "42")]

    def test_unparseable_line(self):
        with pytest.raises(MalformedEntryError):
            parse_taxon_codes(["garbage"])


class TestParseSequence:
    """Tests for parse_sequence function."""

    def test_whitespace_removed(self):
        assert parse_sequence(["MGDVE KGKKI ", " FIMKC"]) == "MGDVEKGKKIFIMKC"


class TestParseEntry:
    """Tests for parse_entry function."""

    def test_swissprot_entry(self):
        record = parse_entry(_entry_lines(CYC_HUMAN_ENTRY))

        assert record.accession_numbers == ("P99999", "B2R5J3", "Q6NUR2")
        assert record.entry_name == "CYC_HUMAN"
        assert record.description == "Cytochrome c"
        assert record.sequence == CYC_HUMAN_SEQUENCE
        assert record.quality.status is ReviewStatus.REVIEWED
        assert record.quality.evidence_level == 1
        assert record.taxon_codes == (TaxonCode("NCBI_TaxID", "9606"),)

    def test_raw_lines_kept(self):
        record = parse_entry(_entry_lines(CYC_HUMAN_ENTRY))

        assert record.crossreference_lines == (
            "EMBL; M22877; AAA35732.1; -; Genomic_DNA.",
            "Ensembl; ENST00000305786; ENSP00000307786; ENSG00000172115.",
        )
        assert record.gene_name_lines == ("Name=CYCS; Synonyms=CYC;",)
        assert record.comment_lines == ("-!- FUNCTION: Electron carrier protein.",)

    def test_trembl_entry(self):
        record = parse_entry(_entry_lines(TREMBL_HUMAN_ENTRY))

        assert record.quality.status is ReviewStatus.UNREVIEWED
        assert record.quality.evidence_level == 4
        assert record.description == "Guanine nucleotide-binding protein subunit gamma"
        assert record.taxon_codes == (TaxonCode("NCBI_TaxID", "9606"),)
        assert record.sequence.endswith("SENPFREKKFFCAIL")

    def test_missing_accession(self, uniprot_entry):
        lines = [line for line in _entry_lines(uniprot_entry()) if not line.startswith("AC")]
        with pytest.raises(MalformedEntryError, match="no accession"):
            parse_entry(lines)

    def test_missing_evidence_level(self, uniprot_entry):
        lines = [line for line in _entry_lines(uniprot_entry()) if not line.startswith("PE")]
        with pytest.raises(MalformedEntryError, match="no PE line"):
            parse_entry(lines)

    def test_missing_id_line(self, uniprot_entry):
        lines = [line for line in _entry_lines(uniprot_entry()) if not line.startswith("ID")]
        with pytest.raises(MalformedEntryError, match="no ID line"):
            parse_entry(lines)

    @pytest.mark.parametrize("status,expected", [
        ("reviewed", ReviewStatus.REVIEWED),
        ("UNREVIEWED", ReviewStatus.UNREVIEWED),
    ])
    def test_status_case_insensitive(self, uniprot_entry, status, expected):
        record = parse_entry(_entry_lines(uniprot_entry(status=status)))
        assert record.quality.status is expected

    def test_crlf_line_endings(self, uniprot_entry):
        text = uniprot_entry(status="reviewed").replace("\n", "\r\n")
        record = parse_entry(_entry_lines(text))
        assert record.accession_numbers == ("P12345",)
        assert record.sequence == "MKTAYIAKQR"

    def test_unknown_status(self, uniprot_entry):
        with pytest.raises(MalformedEntryError, match="review status"):
            parse_entry(_entry_lines(uniprot_entry(status="STANDARD")))

    def test_no_ox_line(self, uniprot_entry):
        record = parse_entry(_entry_lines(uniprot_entry(ox=None)))
        assert record.taxon_codes == ()

    def test_record_is_immutable(self):
        record = parse_entry(_entry_lines(CYC_HUMAN_ENTRY))
        with pytest.raises(AttributeError):
            record.sequence = ""


class TestUniProtExtractor:
    """Tests for UniProtExtractor class."""

    def test_reads_all_entries(self, temp_file):
        path = temp_file("uniprot.dat", CYC_HUMAN_ENTRY + TREMBL_HUMAN_ENTRY + MOUSE_ENTRY)
        extractor = UniProtExtractor(path)

        records = list(extractor)

        assert [r.accession_numbers[0] for r in records] == ["P99999", "A0A024R161", "P62897"]
        assert extractor.entry_count == 3
        assert extractor.skipped_count == 0

    def test_gzipped_file(self, temp_dir):
        path = temp_dir / "uniprot.dat.gz"
        with gzip.open(path, "wt") as fh:
            fh.write(CYC_HUMAN_ENTRY)

        records = list(UniProtExtractor(path))

        assert len(records) == 1
        assert records[0].sequence == CYC_HUMAN_SEQUENCE

    def test_malformed_entry_skipped(self, temp_file, uniprot_entry):
        content = uniprot_entry(accessions="P00001;") + uniprot_entry(status="BOGUS") + \
            uniprot_entry(accessions="P00003;")
        extractor = UniProtExtractor(temp_file("uniprot.dat", content))

        records = list(extractor)

        assert [r.accession_numbers[0] for r in records] == ["P00001", "P00003"]
        assert extractor.entry_count == 3
        assert extractor.skipped_count == 1

    def test_truncated_file_counted(self, temp_file):
        content = CYC_HUMAN_ENTRY + "ID   CYC_PIG   Reviewed;   104 AA.\n"
        extractor = UniProtExtractor(temp_file("uniprot.dat", content))

        records = list(extractor)

        assert len(records) == 1
        assert extractor.skipped_count == 1

    def test_empty_file(self, temp_file):
        extractor = UniProtExtractor(temp_file("uniprot.dat", ""))
        assert list(extractor) == []
        assert extractor.entry_count == 0

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            list(UniProtExtractor(temp_dir / "missing.dat"))

    def test_file_closed_when_abandoned(self, temp_file, monkeypatch):
        import ensxref.parsers.uniprot.extractor as extractor_module

        handles = []
        real_open = extractor_module.open_file

        def tracking_open(path):
            fh = real_open(path)
            handles.append(fh)
            return fh

        monkeypatch.setattr(extractor_module, "open_file", tracking_open)
        path = temp_file("uniprot.dat", CYC_HUMAN_ENTRY + MOUSE_ENTRY)

        records = iter(UniProtExtractor(path))
        next(records)
        records.close()

        assert handles[0].closed
