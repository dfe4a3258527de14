import tomllib

from yclass.config import YClassConfig


def test_config_path_location():
    path = YClassConfig.config_path()
    assert path.name == "config.toml"
    assert path.parent.name == "yclass"


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "nested" / "config.toml"
    config = YClassConfig.load_or_default(path)
    assert config == YClassConfig()
    assert path.exists()
    assert tomllib.loads(path.read_text()) == {}
    assert YClassConfig.load_or_default(path) == YClassConfig()


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "config.toml"
    config = YClassConfig(
        last_attached_process_name="game.exe",
        last_address=0x1000,
        recent_projects={tmp_path / "a.yclass", tmp_path / "b.yclass"},
        dpi=1.5,
    )
    config.save(path)
    assert YClassConfig.load_or_default(path) == config


def test_invalid_toml_gives_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("dpi = [")
    assert YClassConfig.load_or_default(path) == YClassConfig()


def test_wrong_types_give_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('dpi = "big"\nlast_attached_process_name = "game.exe"\n')
    assert YClassConfig.load_or_default(path) == YClassConfig()


def test_integer_dpi_is_accepted(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("dpi = 2\n")
    assert YClassConfig.load_or_default(path).dpi == 2.0