from badgemagic.debug import get_logger, hexdump


def test_get_logger_is_child_of_package():
    assert get_logger("legacyctrl").name == "badgemagic.legacyctrl"
    assert get_logger().name == "badgemagic"


def test_child_logger_propagates_to_package_logger():
    child = get_logger("ngctrl")
    parent = get_logger()
    assert child.parent is parent


def test_hexdump_format():
    assert hexdump(bytes([0x01, 0xAB, 0x00])) == "01 AB 00"


def test_hexdump_bytearray():
    assert hexdump(bytearray(b"\xff\x10")) == "FF 10"


def test_hexdump_empty():
    assert hexdump(b"") == ""