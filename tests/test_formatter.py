"""Tests for human-readable byte formatting."""
import pytest

from driveinfo.core.formatter import format_bytes


class TestFormatBytes:
    """Test format_bytes() unit selection and rendering."""

    def test_absent_is_unknown(self):
        """None renders differently from a genuine zero."""
        assert format_bytes(None) == "Unknown"

    def test_zero_bytes(self):
        assert format_bytes(0) == "0 B (0 bytes)"

    def test_bytes_below_1kb(self):
        """Values below 1 KB stay whole bytes."""
        assert format_bytes(1) == "1 B (1 bytes)"
        assert format_bytes(1023) == "1023 B (1023 bytes)"

    def test_exactly_1kb(self):
        assert format_bytes(1024) == "1.00 KB (1024 bytes)"

    def test_fractional_kilobytes(self):
        assert format_bytes(1536) == "1.50 KB (1536 bytes)"

    def test_megabytes(self):
        assert format_bytes(1024 ** 2) == "1.00 MB (1048576 bytes)"

    def test_gigabytes(self):
        assert format_bytes(1024 ** 3) == "1.00 GB (1073741824 bytes)"

    def test_terabytes(self):
        assert format_bytes(1024 ** 4) == "1.00 TB (1099511627776 bytes)"

    def test_terabytes_two_decimals(self):
        assert format_bytes(1352605407232) == "1.23 TB (1352605407232 bytes)"

    def test_just_below_terabyte_stays_gigabytes(self):
        """1e12 bytes is less than 1 TiB and renders in GB."""
        assert format_bytes(1_024_000_000_000) == "953.67 GB (1024000000000 bytes)"

    def test_beyond_terabytes_stays_terabytes(self):
        """There is no PB unit; large values stay in TB."""
        assert format_bytes(1024 ** 5) == "1024.00 TB (1125899906842624 bytes)"

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            format_bytes(-1)

    def test_ties_round_half_to_even(self):
        """1.125 and 1.375 KB sit exactly between two hundredths."""
        assert format_bytes(1152) == "1.12 KB (1152 bytes)"
        assert format_bytes(1408) == "1.38 KB (1408 bytes)"

    def test_value_beyond_float_range(self):
        value = 10 ** 320
        rendered = format_bytes(value)

        assert rendered.endswith(f" TB ({value} bytes)")
        assert rendered.startswith(str(value // 1024 ** 4)[:20])
