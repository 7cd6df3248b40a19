import pytest

from sockchat.protocol import format_address, is_quit_message, quit_message


def test_quit_message_is_single_eof_byte():
    assert quit_message() == b"\xff"


def test_quit_message_is_recognised():
    assert is_quit_message(quit_message()) is True


def test_quit_byte_followed_by_text_is_quit():
    assert is_quit_message(b"\xffq") is True


@pytest.mark.parametrize("data", [b"hello", b"", b"q\xff", ""])
def test_ordinary_data_is_not_quit(data):
    assert is_quit_message(data) is False


def test_quit_detected_in_text():
    assert is_quit_message("\xff") is True


def test_format_ipv4_address():
    assert format_address(("127.0.0.1", 8080)) == "127.0.0.1"


def test_format_ipv6_address():
    assert format_address(("::1", 8080, 0, 0)) == "::1"


def test_format_address_passes_text_through():
    assert format_address("127.0.0.1") == "127.0.0.1"


@pytest.mark.parametrize("value", [(), ""])
def test_format_empty_address_raises(value):
    with pytest.raises(ValueError):
        format_address(value)