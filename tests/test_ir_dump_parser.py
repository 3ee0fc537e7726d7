"""Tests for the IR signals file parser."""

import pytest

from ir_dump_decoder.models import DumpFile, DumpFormatError, RawSignal, SignalKind
from ir_dump_decoder.parsers import IRDumpParser, ParserRegistry, parse_dump, parser_registry

from conftest import HEADER


@pytest.fixture
def parser():
    """Create a parser instance."""
    return IRDumpParser()


class TestParseValidDumps:
    """Test parsing of well-formed documents."""

    def test_empty_dump(self):
        assert parse_dump("Filetype: IR signals file\nVersion: 1\n") == DumpFile(version=1, signals=())

    def test_single_record(self, make_record):
        text = HEADER + make_record("test", [1, 2, 3, 4, 5], frequency=1000, duty_cycle="0.5")
        dump = parse_dump(text)

        assert dump.version == 1
        assert len(dump) == 1
        assert dump.signals[0] == RawSignal(
            name="test",
            kind=SignalKind.RAW,
            frequency=1000,
            duty_cycle=0.5,
            data=(1, 2, 3, 4, 5),
        )

    def test_records_keep_file_order(self, make_record):
        text = HEADER + "".join(
            make_record(name, [550]) for name in ("b", "a", "b", "c")
        )
        dump = parse_dump(text)
        assert dump.signal_names == ["b", "a", "b", "c"]

    def test_comment_text_is_ignored(self, make_record):
        text = HEADER + make_record("power", [550], comment=" Power button, captured twice")
        assert parse_dump(text).signal_names == ["power"]

    def test_name_may_contain_spaces_and_colons(self, make_record):
        text = HEADER + make_record("Temp: 22 C", [550])
        assert parse_dump(text).signals[0].name == "Temp: 22 C"

    def test_empty_data_line(self, make_record):
        text = HEADER + make_record("silent", [])
        assert parse_dump(text).signals[0].data == ()

    def test_odd_length_data_is_accepted(self, make_record):
        text = HEADER + make_record("odd", [550, 17700, 2972])
        assert parse_dump(text).signals[0].data == (550, 17700, 2972)

    def test_crlf_line_endings(self, make_record):
        text = (HEADER + make_record("test", [550, 550])).replace("\n", "\r\n")
        dump = parse_dump(text)
        assert dump.signals[0].name == "test"
        assert dump.signals[0].data == (550, 550)

    def test_trailing_whitespace_is_allowed(self, make_record):
        text = HEADER + make_record("test", [550]) + "\n\n  \n"
        assert len(parse_dump(text)) == 1

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("0.330000", 0.33),
            ("1", 1.0),
            ("-0.25", -0.25),
            (".5", 0.5),
            ("3.", 3.0),
            ("2.5e-1", 0.25),
        ],
    )
    def test_duty_cycle_forms(self, make_record, raw, expected):
        text = HEADER + make_record("test", [550], duty_cycle=raw)
        assert parse_dump(text).signals[0].duty_cycle == pytest.approx(expected, rel=1e-6)

    def test_u32_max_is_accepted(self, make_record):
        text = HEADER + make_record("test", [4294967295], frequency=4294967295)
        signal = parse_dump(text).signals[0]
        assert signal.frequency == 4294967295
        assert signal.data == (4294967295,)

    def test_version_is_read(self):
        assert parse_dump("Filetype: IR signals file\nVersion: 3\n").version == 3


class TestParseErrors:
    """Test that the first deviation rejects the whole document."""

    def test_missing_filetype_header(self):
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump("Version: 1\n")
        error = exc_info.value
        assert error.position == 0
        assert error.line == 1
        assert error.column == 1
        assert "Filetype" in error.expected

    def test_non_digit_version(self):
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump("Filetype: IR signals file\nVersion: x\n")
        error = exc_info.value
        assert error.position == 35
        assert error.line == 2
        assert error.column == 10
        assert error.expected == "decimal digits"

    def test_version_overflow(self):
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump("Filetype: IR signals file\nVersion: 4294967296\n")
        assert exc_info.value.expected == "unsigned 32-bit integer"

    def test_missing_newline_after_version(self):
        with pytest.raises(DumpFormatError):
            parse_dump("Filetype: IR signals file\nVersion: 1")

    def test_trailing_garbage(self):
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(HEADER + "garbage\n")
        error = exc_info.value
        assert error.position == len(HEADER)
        assert error.line == 3
        assert error.content == "garbage"

    def test_bad_record_discards_whole_dump(self, make_record):
        bad = make_record("bad", [550]).replace("frequency: 38000", "frequency: fast")
        text = HEADER + make_record("good", [550]) + bad
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(text)
        assert exc_info.value.line == 3 + 6 + 3

    def test_unknown_signal_type(self, make_record):
        text = HEADER + make_record("test", [550]).replace("type: raw", "type: parsed")
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(text)
        assert "signal type" in exc_info.value.expected
        assert exc_info.value.column == len("type: ") + 1

    def test_missing_name_field(self, make_record):
        text = HEADER + make_record("test", [550]).replace("name: ", "nam: ")
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(text)
        assert exc_info.value.expected == "'name: '"

    def test_trailing_space_in_data(self):
        text = HEADER + "#\nname: t\ntype: raw\nfrequency: 1\nduty_cycle: 0.5\ndata: 1 2 \n"
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(text)
        assert exc_info.value.expected == "line ending"

    def test_data_overflow(self, make_record):
        text = HEADER + make_record("test", [550, 4294967296])
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(text)
        assert exc_info.value.expected == "unsigned 32-bit integer"
        assert exc_info.value.column == len("data: 550 ") + 1

    @pytest.mark.parametrize("field", ["frequency", "data"])
    def test_huge_digit_run_overflows(self, make_record, field):
        huge = "9" * 5000
        if field == "frequency":
            text = HEADER + make_record("test", [550], frequency=huge)
        else:
            text = HEADER + make_record("test", [550, huge])
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(text)
        error = exc_info.value
        assert error.expected == "unsigned 32-bit integer"
        assert error.content.startswith(f"{field}: ")

    def test_leading_zeros_are_not_overflow(self, make_record):
        text = HEADER + make_record("test", ["0" * 5000 + "550"], frequency="00038000")
        signal = parse_dump(text).signals[0]
        assert signal.frequency == 38000
        assert signal.data == (550,)

    def test_non_numeric_duty_cycle(self, make_record):
        text = HEADER + make_record("test", [550], duty_cycle="half")
        with pytest.raises(DumpFormatError) as exc_info:
            parse_dump(text)
        assert exc_info.value.expected == "float"

    def test_blank_line_between_records(self, make_record):
        text = HEADER + make_record("a", [550]) + "\n" + make_record("b", [550])
        with pytest.raises(DumpFormatError):
            parse_dump(text)

    def test_empty_document(self):
        with pytest.raises(DumpFormatError):
            parse_dump("")


class TestParseFile:
    """Test file based parsing."""

    def test_parse_file(self, parser, sample_dump_file):
        dump = parser.parse(sample_dump_file)
        assert dump.signal_names == ["power", "temp_up"]

    def test_parse_missing_file(self, parser, tmp_path):
        with pytest.raises(FileNotFoundError):
            parser.parse(tmp_path / "missing.ir")


class TestCanParse:
    """Test format detection."""

    def test_detect_valid_format(self, parser, sample_dump_file):
        assert parser.can_parse(sample_dump_file) is True

    def test_reject_invalid_format(self, parser, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("This is not an IR dump\n", encoding="utf-8")
        assert parser.can_parse(path) is False

    def test_reject_missing_file(self, parser, tmp_path):
        assert parser.can_parse(tmp_path / "missing.ir") is False


class TestParserRegistry:
    """Test registration and lookup."""

    def test_ir_parser_is_registered_as_default(self):
        assert "ir_raw" in parser_registry.get_parser_names()
        assert isinstance(parser_registry.get_default_parser(), IRDumpParser)

    def test_parse_by_name(self, sample_dump_file):
        dump = parser_registry.parse(sample_dump_file, parser_name="ir_raw")
        assert len(dump) == 2

    def test_parse_with_detection(self, sample_dump_file):
        assert len(parser_registry.parse(sample_dump_file)) == 2

    def test_unknown_parser_name(self, sample_dump_file):
        with pytest.raises(ValueError, match="not found"):
            parser_registry.parse(sample_dump_file, parser_name="pronto")

    def test_empty_registry(self, sample_dump_file):
        with pytest.raises(ValueError, match="No suitable parser"):
            ParserRegistry().parse(sample_dump_file)

    def test_parse_text_with_detection(self, sample_dump_text):
        dump = parser_registry.parse_text(sample_dump_text)
        assert dump.signal_names == ["power", "temp_up"]

    def test_unmatched_text_goes_to_default_parser(self):
        with pytest.raises(DumpFormatError) as exc_info:
            parser_registry.parse_text("Filetype: Pronto codes\nVersion: 1\n")
        assert exc_info.value.position == 0

    def test_detects_parser_by_header(self, sample_dump_file, tmp_path):
        registry = ParserRegistry()
        registry.register(IRDumpParser(), is_default=True)
        registry.register(_LegacyParser())

        legacy = tmp_path / "old.ir"
        legacy.write_text("Filetype: Legacy IR\n", encoding="utf-8")

        assert registry.detect_parser(legacy).name == "legacy"
        assert registry.detect_parser(sample_dump_file).name == "ir_raw"
        assert registry.parse(legacy).version == 0
        assert registry.detect_text_parser("Filetype: Legacy IR\n").name == "legacy"

    def test_duplicate_name_rejected(self):
        registry = ParserRegistry()
        registry.register(_LegacyParser())

        class Impostor(_LegacyParser):
            pass

        with pytest.raises(ValueError, match="already registered"):
            registry.register(Impostor())

    def test_reregistering_same_parser_type(self):
        registry = ParserRegistry()
        registry.register(IRDumpParser())
        registry.register(IRDumpParser(), is_default=True)
        assert registry.get_parser_names() == ["ir_raw"]


class _LegacyParser(IRDumpParser):
    name = "legacy"
    HEADER = "Filetype: Legacy IR"

    def parse_text(self, text):
        return DumpFile(version=0)
