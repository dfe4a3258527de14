import pytest

from yclass.cli import main
from yclass.generators import AvailableGenerator, generate
from yclass.project import DataClass, DataField, ProjectData
from yclass.values import FieldKind


@pytest.fixture
def project(tmp_path):
    data = ProjectData([DataClass("Player", [DataField("health", 8, FieldKind.I32)])])
    path = tmp_path / "game.yclass"
    path.write_text(data.to_string(), encoding="utf-8")
    return path


def _expected(path, which):
    class_list = ProjectData.from_str(path.read_text(encoding="utf-8")).load()
    return generate(class_list.classes, which)


def test_rust_output(project, capsys):
    assert main([str(project)]) == 0
    out = capsys.readouterr().out
    assert out == _expected(project, AvailableGenerator.RUST)
    assert "pub struct Player {" in out
    assert "    _pad_0x8: [u8; 0x8],\n    pub health: i32,\n" in out


def test_cpp_output(project, capsys):
    assert main([str(project), "--generator", "cpp"]) == 0
    out = capsys.readouterr().out
    assert out == _expected(project, AvailableGenerator.CPP)
    assert "#include <cstdint>" in out
    assert "    int32_t health;\n" in out


def test_output_file_matches_stdout(project, tmp_path, capsys):
    target = tmp_path / "out.rs"
    assert main([str(project), "-o", str(target)]) == 0
    assert capsys.readouterr().out == ""
    assert target.read_text(encoding="utf-8") == _expected(project, AvailableGenerator.RUST)


def test_missing_project_fails(tmp_path, capsys):
    assert main([str(tmp_path / "missing.yclass")]) == 1
    assert "Failed to open the project" in capsys.readouterr().err


def test_invalid_project_fails(tmp_path, capsys):
    path = tmp_path / "bad.yclass"
    path.write_text("(classes: nope", encoding="utf-8")
    assert main([str(path)]) == 1
    assert "invalid format" in capsys.readouterr().err


def test_unknown_generator_is_rejected(project):
    with pytest.raises(SystemExit) as excinfo:
        main([str(project), "--generator", "go"])
    assert excinfo.value.code == 2