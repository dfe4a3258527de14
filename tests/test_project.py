import pytest

from yclass.classes import Class
from yclass.fields import BoolField, FloatField, HexField, IntField
from yclass.pointers import PointerField
from yclass.project import DataClass, DataField, ProjectData, ProjectFormatError
from yclass.values import FieldKind


def _round_trip(classes):
    return ProjectData.from_str(ProjectData.store(classes).to_string()).load()


def test_text_format():
    data = ProjectData([DataClass("A", [DataField("x", 0, FieldKind.I32, None)])])
    assert data.to_string() == (
        '(classes:[(name:"A",fields:[(name:"x",offset:0,kind:I32,metadata:None)])])'
    )


def test_store_records_offsets_of_named_fields():
    data = ProjectData.store([Class(1, "A", [HexField(4), IntField(2, False, "x")])])
    assert len(data.classes[0].fields) == 1
    assert data.classes[0].fields[0].offset == 4
    assert data.classes[0].fields[0].kind is FieldKind.U16


def test_round_trip_keeps_layout():
    player = Class(1, "Player", [IntField(4, True, "hp"), HexField(4), FloatField(8, "speed")])
    loaded = _round_trip([player])
    restored = loaded.by_name("Player")
    assert [f.kind() for f in restored.fields] == [FieldKind.I32, FieldKind.UNK32, FieldKind.F64]
    assert restored.fields[0].name == "hp"
    assert restored.fields[2].name == "speed"
    assert loaded.selected is None


def test_trailing_padding_aligns_to_eight():
    loaded = _round_trip([Class(1, "B", [BoolField("alive")])])
    fields = loaded.by_name("B").fields
    assert fields[0].kind() is FieldKind.BOOL
    assert sum(f.size() for f in fields) % 8 == 0
    assert sum(f.size() for f in fields) == 8


def test_pointer_resolves_to_loaded_class():
    b = Class(2, "B", [BoolField("alive")])
    a = Class(1, "A", [PointerField("target", class_id=b.id)])
    loaded = _round_trip([a, b])
    pointer = loaded.by_name("A").fields[0]
    assert isinstance(pointer, PointerField)
    assert pointer.class_id == loaded.by_name("B").id


def test_pointer_to_missing_class_creates_it():
    data = ProjectData([DataClass("A", [DataField("p", 0, FieldKind.PTR, "Ghost")])])
    loaded = data.load()
    ghost = loaded.by_name("Ghost")
    assert ghost is not None
    assert len(ghost.fields) == 10
    assert loaded.by_name("A").fields[0].class_id == ghost.id


def test_pointer_without_metadata_is_rejected():
    data = ProjectData([DataClass("A", [DataField("p", 0, FieldKind.PTR, None)])])
    with pytest.raises(ProjectFormatError):
        data.load()


def test_fields_are_sorted_by_offset_on_load():
    data = ProjectData(
        [
            DataClass(
                "A",
                [
                    DataField("second", 8, FieldKind.I64, None),
                    DataField("first", 0, FieldKind.I64, None),
                ],
            )
        ]
    )
    names = [f.name for f in data.load().by_name("A").fields]
    assert names == ["first", "second"]


def test_parse_accepts_whitespace_names_and_trailing_commas():
    text = """
    ProjectData(
        classes: [
            DataClass(name: "A", fields: [
                (name: "x", offset: 0, kind: U8, metadata: Some("m"),),
            ],),
        ],
    )
    """
    data = ProjectData.from_str(text)
    assert data.classes == [DataClass("A", [DataField("x", 0, FieldKind.U8, "m")])]


def test_escaped_strings_round_trip():
    data = ProjectData([DataClass("A", [DataField('a"b\\c\n\t', 0, FieldKind.BOOL, None)])])
    assert ProjectData.from_str(data.to_string()) == data


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not a project",
        "(classes:[(name:\"A\")])",
        "(classes:[(name:\"A\",fields:[(name:\"x\",offset:0,kind:Wrong)])])",
        "(classes:[(name:\"A\",fields:[(name:\"x\",offset:-1,kind:I8)])])",
        "(classes:[]) extra",
    ],
)
def test_invalid_text_is_rejected(text):
    with pytest.raises(ProjectFormatError):
        ProjectData.from_str(text)