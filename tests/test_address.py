import pytest

from yclass.address import parse_address


def test_with_prefix():
    assert parse_address("0xAABB") == 0xAABB


def test_without_prefix():
    assert parse_address("AABB") == 0xAABB


@pytest.mark.parametrize("number", [0, 1, 0xDEAD, 0x7FF6_1234_5678, (1 << 64) - 1])
def test_round_trip(number):
    assert parse_address(f"0x{number:X}") == number
    assert parse_address(f"{number:x}") == number


def test_plus_sign_is_accepted():
    assert parse_address("+ff") == parse_address("ff")


@pytest.mark.parametrize(
    "text", ["", "0x", "xyz", "0x-1", "-1", "0x12 34", " 12", "1_000", "0x0x12", "+", "0X12"]
)
def test_invalid(text):
    with pytest.raises(ValueError):
        parse_address(text)


def test_overflow():
    with pytest.raises(ValueError):
        parse_address(f"{1 << 64:x}")