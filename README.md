# yclass

yclass helps you work out the layout of data structures in another
program's memory. You describe a class as a sequence of fields (raw hex
bytes, integers, floats, booleans, pointers to other classes and string
pointers), read memory through that layout, refine it field by field,
save it as a project, and generate matching Rust or C++ definitions.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

The `yclass` command reads a project file and prints struct declarations:

```
yclass project.yclass                  # Rust declarations to stdout
yclass project.yclass -g cpp           # C++ declarations
yclass project.yclass -o structs.rs    # write to a file
yclass --help
```

`-g/--generator` is `rust` (the default) or `cpp`. The command exits with
status 1 and a message on stderr when the project cannot be read, is not
in the project format, or the output cannot be written.

A project file looks like this:

```
(classes:[(name:"Player",fields:[(name:"health",offset:8,kind:I32,metadata:None)])])
```

and `yclass` turns it into:

```rust
// Generated by YClass 0.1.0

#[repr(C)]
pub struct Player {
    _pad_0x8: [u8; 0x8],
    pub health: i32,
}
```

Unknown bytes before a named field become a padding array; unknown bytes
after the last named field are not emitted.

## Library

- **Field kinds and values** (`yclass.values`): `FieldKind` lists every
  kind of field with its `size()` in bytes; `label()` and
  `named_variants()` give the numeric kinds with display labels. A
  `Value` is a scalar of one numeric kind; values of the same kind
  compare (floats equal within machine epsilon), values of different
  kinds raise `TypeError` when compared.
- **Fields** (`yclass.fields`, `yclass.pointers`): every field has an
  `id`, an optional `name`, a `size()` and a `kind()`. `inspect(ctx)`
  reads the field at the position of an `InspectionContext`
  (`yclass.context`), returns a `FieldRow` and advances the offset.
  `HexField` (1, 2, 4 or 8 bytes) shows its bytes in hex together with
  integer, float and pointer views of the same bytes. `IntField`,
  `FloatField`, `BoolField`, `PointerField` and `StringPointerField`
  format the value they read; all but `StringPointerField` have
  `write_value`, which parses text and writes it, raising `ValueError`
  for text that does not parse.
- **Layout** (`yclass.layout`): `allocate_padding(n)` covers `n` bytes
  with the fewest hex fields (8, then 4, 2 and 1 bytes);
  `into_field(kind, name)` makes a field of a kind, with a default name
  when none is given; `format_prelude` and `is_unaligned` give the
  offset/address prefix of a row and whether an offset is not 8-aligned.
- **Classes** (`yclass.classes`): a `ClassList` holds `Class` objects
  and the selected class id. A default list holds one class,
  `FirstClass`; a new class starts as ten 8-byte hex fields.
  `remove_empty()` drops classes that hold nothing but hex fields.
- **Editing** (`yclass.editing`): `add_bytes`, `remove_fields`,
  `insert_bytes` and `change_kind` reshape a list of fields.
  `change_kind` keeps the field's name; a smaller kind is followed by
  padding, a larger one takes over the fields after it and raises
  `EditError` when there are not enough bytes. `is_valid_ident` checks
  class and field names.
- **Projects** (`yclass.project`): `ProjectData.store(classes)` captures
  the named fields of classes with their offsets and kinds;
  `to_string()` and `ProjectData.from_str(text)` write and read the text
  form (`ProjectFormatError` for invalid text); `load()` rebuilds a
  `ClassList`, padding gaps and rounding each class up to 8 bytes. A
  pointer to a class that is not in the project creates that class.
- **Code generation** (`yclass.generators`): `generate(classes,
  generator)` runs a `RustGenerator` or `CppGenerator` (or an
  `AvailableGenerator` member) over classes and returns the text.
- **Structure spider** (`yclass.spider`): `first_search(process,
  options)` walks `SearchOptions.struct_size` bytes from a base address
  at a given alignment, follows 8-aligned pointers down to `depth`
  levels, and collects every `SearchResult` whose value equals the one
  sought. `parse_kind_to_value` parses search values (integers may be
  `0x` hex). `SearchResult.should_remain` narrows results with a
  `FilterMode` and remembers the value read; `current_value` reads the
  value a result refers to. `DisplayMode` renders values in decimal or
  hex. `ScannerState` runs a first search on a background thread;
  `try_take()` and `wait()` report progress and hand over the results
  sorted by depth.
- **Memory** (`yclass.process`): reads and writes go through a
  `Process`. Unreadable memory reads as zero bytes and failed writes are
  ignored. `BufferMemory` is an in-memory backing store made of regions
  keyed by base address; `Process.attach(os, pid)` takes the backend for
  `pid` from a mapping or from an object with a `process_by_pid` method.
- **Text binding** (`yclass.binding`): `TextBind` keeps editable text
  together with the value parsed from it after every insertion or
  deletion.
- **Application state** (`yclass.state`): `GlobalState` holds the class
  list, selection, configuration and attached process;
  `save_project` and `open_project_path` write and read project files
  (raising `ProjectError`) and record opened projects in the
  configuration.

## Addresses

Addresses are hexadecimal, with or without a `0x` prefix; invalid text
raises `ValueError`:

```python
from yclass.address import parse_address

parse_address("0x7FF0")
parse_address("7ff0")
```

## Configuration

`YClassConfig` holds the last attached process name, the last inspected
address, recent projects and the display scale. It is kept as TOML at
`YClassConfig.config_path()` in the user configuration directory;
`load_or_default()` creates the file with defaults when it is missing and
falls back to defaults when it cannot be read.

## What yclass does not do

- There is no graphical interface: inspecting, selecting and editing
  fields is done through the library, and the command only generates
  declarations from project files.
- It does not attach to running processes of the operating system on
  its own. A `Process` works over a backend you supply; `BufferMemory`
  is the only backend included.