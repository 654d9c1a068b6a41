"""Tests for the log CSV codec."""
import pytest

from injurylog.errors import LogFormatError
from injurylog.schemas.log import StatusRecord
from injurylog.storage.codec import LOG_HEADER, decode_log, encode_log


class TestDecode:
    """Parsing log CSV."""

    @pytest.mark.parametrize("raw", ["", None, LOG_HEADER, LOG_HEADER + "\n", "\n\n"])
    def test_empty_or_header_only(self, raw):
        assert decode_log(raw) == {}

    def test_reads_all_fields(self):
        log = decode_log(LOG_HEADER + "\nAlice-2024-01-01,Injured,Knee,ACL,High,Surgery booked")
        assert log == {
            "Alice-2024-01-01": StatusRecord(
                status="Injured", injury_site="Knee", injury="ACL", severity="High", comment="Surgery booked"
            )
        }

    def test_missing_trailing_fields_default_to_empty(self):
        log = decode_log(LOG_HEADER + "\nBob-2024-01-01,Available")
        assert log["Bob-2024-01-01"] == StatusRecord(status="Available")

    def test_row_with_empty_key_is_dropped(self):
        log = decode_log(LOG_HEADER + "\n,Injured,Knee,,,\nBob-2024-01-01,Available,,,,")
        assert list(log) == ["Bob-2024-01-01"]

    def test_blank_lines_and_crlf(self):
        raw = LOG_HEADER + "\r\n\r\nBob-2024-01-01,Injured,,,,note\r\n"
        assert decode_log(raw)["Bob-2024-01-01"].comment == "note"

    def test_extra_fields_are_ignored(self):
        log = decode_log(LOG_HEADER + "\nBob-2024-01-01,Injured,,,,first,second")
        assert log["Bob-2024-01-01"].comment == "first"

    def test_bytes_input(self):
        raw = (LOG_HEADER + "\nBob-2024-01-01,Injured,,,,").encode("utf-8")
        assert decode_log(raw)["Bob-2024-01-01"].status == "Injured"

    def test_later_duplicate_key_wins(self):
        log = decode_log(LOG_HEADER + "\nBob-2024-01-01,Injured\nBob-2024-01-01,Available")
        assert log["Bob-2024-01-01"].status == "Available"


class TestEncode:
    """Serializing log CSV."""

    def test_empty_log_is_header_only(self):
        assert encode_log({}) == LOG_HEADER

    def test_keeps_mapping_order_and_blanks(self):
        log = {
            "Zed-2024-01-02": StatusRecord(status="Available"),
            "Amy-2024-01-01": StatusRecord(status="Injured", severity="High"),
        }
        assert encode_log(log) == (
            LOG_HEADER + "\nZed-2024-01-02,Available,,,,\nAmy-2024-01-01,Injured,,,High,"
        )

    def test_round_trip(self):
        log = {
            "Alice-2024-01-01": StatusRecord(status="Injured", injury_site="Knee", injury="ACL", severity="High", comment="x"),
            "Mary-Jane-2024-01-01": StatusRecord(status="Available"),
            "Bob-2024-01-01": StatusRecord(),
        }
        assert decode_log(encode_log(log)) == log

    @pytest.mark.parametrize("comment", ["a, b", "line\nbreak"])
    def test_refuses_unstorable_values(self, comment):
        with pytest.raises(LogFormatError):
            encode_log({"Bob-2024-01-01": StatusRecord(status="Injured", comment=comment)})
