from yclass.context import InspectionContext, Selection
from yclass.process import BufferMemory, Process


def make_context(**kwargs):
    return InspectionContext(process=Process(BufferMemory()), **kwargs)


def test_select_records_position():
    ctx = make_context(address=0x1000, offset=0x10, current_container=3)
    ctx.select(5)
    assert ctx.selection == Selection(address=0x1010, container_id=3, field_id=5)
    assert ctx.is_selected(5)


def test_select_twice_deselects():
    ctx = make_context(address=0x1000)
    ctx.select(5)
    ctx.select(5)
    assert ctx.selection is None
    assert not ctx.is_selected(5)


def test_select_other_field_replaces():
    ctx = make_context()
    ctx.select(1)
    ctx.select(2)
    assert ctx.is_selected(2)
    assert not ctx.is_selected(1)


def test_selection_depends_on_address():
    ctx = make_context(address=0x1000, offset=8)
    ctx.select(7)
    ctx.offset = 16
    assert not ctx.is_selected(7)
    ctx.offset = 8
    assert ctx.is_selected(7)


def test_nothing_selected_initially():
    ctx = make_context()
    assert not ctx.is_selected(0)
    assert ctx.errors == []