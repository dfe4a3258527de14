import pytest

from yclass.address import parse_address
from yclass.binding import TextBind


def test_from_parser_holds_initial_value_and_text():
    bind = TextBind.from_parser(int, "4", 4)
    assert bind.value() == 4
    assert bind.text == "4"


def test_new_bind_has_no_value():
    bind = TextBind(int)
    assert bind.value() is None
    assert bind.text == ""


def test_insert_text_reparses():
    bind = TextBind(int)
    assert bind.insert_text("12", 0) == 2
    assert bind.value() == 12
    bind.insert_text("5", 1)
    assert bind.text == "152"
    assert bind.value() == 152


def test_invalid_text_raises_on_value():
    bind = TextBind.from_parser(int, "2", 2)
    bind.insert_text("x", 1)
    assert bind.text == "2x"
    with pytest.raises(ValueError):
        bind.value()
    assert isinstance(bind.error, ValueError)


def test_delete_char_range_reparses():
    bind = TextBind.from_parser(int, "256", 256)
    bind.delete_char_range(0, 1)
    assert bind.text == "56"
    assert bind.value() == 56


def test_set_replaces_value_and_clears_error():
    bind = TextBind(int)
    bind.insert_text("bad", 0)
    bind.set(5, "5")
    assert bind.value() == 5
    assert bind.text == "5"
    assert bind.error is None


def test_address_parser():
    bind = TextBind(parse_address)
    bind.insert_text("0x10", 0)
    assert bind.value() == 16


def test_insert_out_of_range_raises():
    bind = TextBind.from_parser(int, "1", 1)
    with pytest.raises(IndexError):
        bind.insert_text("2", 5)


def test_delete_out_of_range_raises():
    bind = TextBind.from_parser(int, "1", 1)
    with pytest.raises(IndexError):
        bind.delete_char_range(0, 3)