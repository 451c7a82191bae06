"""Validation of values supplied for writable properties."""

import pytest

from upis import InvalidEnumToken, MalformedInteger, OutOfRange, Property, validate
from upis.validation import is_intstr, parse_integer


class TestIsIntstr:

    @pytest.mark.parametrize("value", ["0", "1", "15", "255", "1000"])
    def test_accepted(self, value):
        assert is_intstr(value)

    @pytest.mark.parametrize("value", ["", "01", "00", "-1", "+1", "1.5", "abc", " 1", "1 ", "١"])
    def test_rejected(self, value):
        assert not is_intstr(value)


class TestByteRange:

    def test_accepts_full_range(self):
        for number in range(256):
            assert validate(Property.WATCHDOG, str(number)) == number

    def test_out_of_range(self):
        with pytest.raises(OutOfRange, match="between 0 and 255"):
            validate(Property.WATCHDOG, "256")

    @pytest.mark.parametrize("value", ["-1", "01", "abc", ""])
    def test_malformed(self, value):
        with pytest.raises(MalformedInteger):
            validate(Property.WATCHDOG, value)

    def test_message_names_value_and_property(self):
        with pytest.raises(OutOfRange) as excinfo:
            validate(Property.WATCHDOG, "300")
        assert str(excinfo.value) == "Invalid argument '300' for watchdog timer - use an integer between 0 and 255"

    def test_leading_zero_wins_over_range(self):
        with pytest.raises(MalformedInteger):
            validate(Property.FSSD_TIMEOUT, "020")


class TestPropertyRanges:

    def test_fssd_timeout(self):
        with pytest.raises(OutOfRange, match="between 15 and 255"):
            validate(Property.FSSD_TIMEOUT, "14")
        assert validate(Property.FSSD_TIMEOUT, "15") == 15
        assert validate(Property.FSSD_TIMEOUT, "255") == 255

    def test_fssd_type(self):
        assert validate(Property.FSSD_TYPE, "2") == 2
        with pytest.raises(OutOfRange):
            validate(Property.FSSD_TYPE, "3")

    def test_io_pin_mode(self):
        assert validate(Property.IO_PIN_MODE, "3") == 3
        with pytest.raises(OutOfRange, match="io pin mode"):
            validate(Property.IO_PIN_MODE, "4")

    def test_read_only_property(self):
        with pytest.raises(ValueError):
            validate(Property.POWER_SOURCE, "1")

    def test_parse_integer_default_name(self):
        assert parse_integer("7", (0, 10)) == 7


class TestRelay:

    @pytest.mark.parametrize("token", ["ON", "on", "On", "1", "closed", "CLOSED"])
    def test_closed(self, token):
        assert validate(Property.RELAY, token) == 1

    @pytest.mark.parametrize("token", ["off", "OFF", "0", "open", "Open"])
    def test_open(self, token):
        assert validate(Property.RELAY, token) == 0

    @pytest.mark.parametrize("token", ["maybe", "", "2", "01", "true"])
    def test_rejected(self, token):
        with pytest.raises(InvalidEnumToken, match="use 0,1,open,closed,off or on"):
            validate(Property.RELAY, token)
