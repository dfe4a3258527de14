import pytest

from yclass.address import parse_address
from yclass.classes import ClassList
from yclass.context import InspectionContext
from yclass.pointers import PointerField, StringPointerField
from yclass.process import BufferMemory, Process
from yclass.values import FieldKind


class Recorder:
    def __init__(self):
        self.calls = []

    def add_field(self, name, kind, metadata):
        self.calls.append((name, kind, metadata))

    def add_offset(self, offset):
        self.calls.append(("offset", offset))


def make_process(regions):
    return Process(BufferMemory(regions))


def test_pointer_kind_and_size():
    ptr = PointerField("next")
    assert ptr.kind() is FieldKind.PTR
    assert ptr.size() == FieldKind.PTR.size()
    assert ptr.class_id is None


@pytest.mark.parametrize("address", [0, 0x10, 0xDEADBEEF, (1 << 64) - 1])
def test_pointer_format_round_trip(address):
    ptr = PointerField("p")
    editing = ptr.format_value(address, True)
    assert parse_address(editing) == address
    assert ptr.format_value(address, False) == "-> " + editing


def test_pointer_write_value_stores_address():
    proc = make_process({0x1000: bytes(16)})
    ptr = PointerField("p")
    ptr.write_value(proc, 0x1000, "0x2000")
    assert int.from_bytes(proc.read(0x1000, 8), "little") == 0x2000


def test_pointer_write_value_invalid_leaves_memory():
    proc = make_process({0x1000: bytes(16)})
    ptr = PointerField("p")
    with pytest.raises(ValueError):
        ptr.write_value(proc, 0x1000, "not an address")
    assert proc.read(0x1000, 8) == bytes(8)


def test_header_label_existing_class():
    classes = ClassList()
    cid = classes.add_class("Target")
    ptr = PointerField("p", cid)
    assert ptr.header_label(classes, 0x1234) == ("[Target]", True)


def test_header_label_missing_class():
    classes = ClassList()
    ptr = PointerField("p", 12345)
    text, exists = ptr.header_label(classes, 0xABCDEF)
    assert exists is False
    assert text.startswith("[C") and text.endswith("]")
    assert parse_address(text[2:-1]) == 0xABCDEF


def test_pointer_codegen_names_target():
    classes = ClassList()
    cid = classes.add_class("Target")
    ptr = PointerField("link", cid)
    gen = Recorder()
    ptr.codegen(gen, classes.classes)
    assert gen.calls == [("link", FieldKind.PTR, "Target")]


def test_pointer_codegen_unknown_class_raises():
    classes = ClassList()
    with pytest.raises(LookupError):
        PointerField("link", 999).codegen(Recorder(), classes.classes)
    with pytest.raises(LookupError):
        PointerField("link").codegen(Recorder(), classes.classes)


def test_pointer_inspect_reads_and_advances():
    classes = ClassList()
    cid = classes.add_class("Target")
    proc = make_process({0x1000: (0x2000).to_bytes(8, "little") + bytes(8)})
    ptr = PointerField("p", cid)
    ctx = InspectionContext(process=proc, class_list=classes, address=0x1000)
    row = ptr.inspect(ctx)
    assert row.value == ptr.format_value(0x2000, False)
    assert row.details[0][0] == "[Target]"
    assert ctx.offset == ptr.size()
    assert row.name == "p"


def test_pointer_inspect_assigns_class_id():
    proc = make_process({0x1000: bytes(8)})
    ptr = PointerField("p")
    ctx = InspectionContext(process=proc, class_list=ClassList(), address=0x1000)
    ptr.inspect(ctx)
    assert isinstance(ptr.class_id, int)
    assert ptr.header_label(ctx.class_list, 0)[1] is False


def test_string_pointer_kind_and_size():
    sp = StringPointerField("text")
    assert sp.kind() is FieldKind.STR_PTR
    assert sp.size() == FieldKind.STR_PTR.size()


def test_string_pointer_stops_at_nul():
    sp = StringPointerField("text")
    assert sp.format_value(b"Hello\0junk", True) == '"Hello"'
    assert sp.format_value(b"Hello\0junk", False) == '-> "Hello"'


def test_string_pointer_escapes():
    sp = StringPointerField("text")
    assert sp.format_value(b'a\n"b', True) == '"a\\n\\"b"'


def test_string_pointer_without_nul_uses_whole_buffer():
    sp = StringPointerField("text")
    data = b"x" * 10
    assert sp.format_value(data, True) == '"' + "x" * 10 + '"'


def test_string_pointer_inspect():
    text = b"Test String".ljust(64, b"\0")
    proc = make_process({0x1000: (0x2000).to_bytes(8, "little"), 0x2000: text})
    sp = StringPointerField("s")
    ctx = InspectionContext(process=proc, address=0x1000)
    row = sp.inspect(ctx)
    assert row.value == '-> "Test String"'
    assert ctx.offset == sp.size()