import pytest

from yclass.process import BufferMemory, MemoryAccessError, Process


@pytest.fixture
def memory():
    return BufferMemory({0x1000: bytes(range(16)), 0x2000: b"\xff" * 8}, pid=42, name="game.exe")


def test_buffer_read(memory):
    assert memory.read(0x1004, 4) == bytes(range(4, 8))


def test_buffer_write_then_read(memory):
    memory.write(0x2002, b"\x01\x02")
    assert memory.read(0x2000, 4) == b"\xff\xff\x01\x02"


def test_buffer_unmapped_read_raises(memory):
    with pytest.raises(MemoryAccessError):
        memory.read(0x3000, 1)


def test_buffer_read_past_region_end_raises(memory):
    with pytest.raises(MemoryAccessError):
        memory.read(0x100C, 8)


def test_buffer_unmapped_write_raises(memory):
    with pytest.raises(MemoryAccessError):
        memory.write(0x500, b"\x00")


def test_overlapping_regions_rejected():
    with pytest.raises(ValueError):
        BufferMemory({0: b"\0" * 16, 8: b"\0" * 4})


def test_attach_with_mapping(memory):
    process = Process.attach({42: memory}, 42)
    assert process.id() == 42
    assert process.name() == "game.exe"


def test_attach_unknown_pid(memory):
    with pytest.raises(LookupError):
        Process.attach({42: memory}, 7)


def test_attach_with_os_object(memory):
    class Os:
        def process_by_pid(self, pid):
            if pid != memory.pid:
                raise LookupError(pid)
            return memory

    assert Process.attach(Os(), 42).name() == "game.exe"
    with pytest.raises(LookupError):
        Process.attach(Os(), 1)


def test_process_read_write_round_trip(memory):
    process = Process(memory)
    process.write(0x1000, b"abcd")
    assert process.read(0x1000, 4) == b"abcd"
    assert memory.read(0x1000, 4) == b"abcd"


def test_process_unreadable_returns_zeros(memory):
    process = Process(memory)
    assert process.read(0x9000, 8) == bytes(8)
    assert process.read(-4, 4) == bytes(4)
    assert process.read((1 << 64) - 2, 4) == bytes(4)


def test_process_failed_write_is_ignored(memory):
    process = Process(memory)
    process.write(0x9000, b"\x01")
    assert process.read(0x9000, 1) == b"\x00"


def test_can_read_everything(memory):
    process = Process(memory)
    assert process.can_read(0) is True
    assert process.can_read(0xDEAD) is True