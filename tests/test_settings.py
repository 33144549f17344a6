"""Tests for settings loading and plugin resolution."""

import pytest

from clusterbench.config import BenchmarkSettings, import_object, load_settings
from clusterbench.exceptions import ConfigurationError, InvalidConfigError, InvalidPathError
from clusterbench.solution.repository import Repository


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep the user's home, cwd and environment out of settings discovery."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for field_name in BenchmarkSettings.__dataclass_fields__:
        monkeypatch.delenv(f"CLUSTERBENCH_{field_name.upper()}", raising=False)
    return tmp_path


class TestBenchmarkSettings:
    """Test validation of the settings dataclass."""

    def test_defaults(self):
        settings = BenchmarkSettings()
        assert settings.reruns_per_config == 5
        assert settings.max_workers is None
        assert settings.verbosity == "normal"
        assert settings.repositories == ()

    @pytest.mark.parametrize(
        "field, value",
        [("reruns_per_config", 0), ("max_workers", 0), ("verbosity", "loud")],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            BenchmarkSettings(**{field: value})

    def test_paths(self, tmp_path):
        settings = BenchmarkSettings(parsed_data_location=str(tmp_path / "parsed"))
        assert settings.parsed_data_path == tmp_path / "parsed"


class TestLoadSettings:
    """Test merging of config sources."""

    def test_no_sources(self):
        assert load_settings() == BenchmarkSettings()

    def test_explicit_file(self, tmp_path):
        config = tmp_path / "bench.toml"
        config.write_text(
            'reruns_per_config = 7\n'
            'backend = "plugin:make_backend"\n'
            '\n'
            '[[repositories]]\n'
            'owner = "acme"\n'
            'name = "widgets"\n'
            'solution = "Widgets.sln"\n'
        )
        settings = load_settings(config_file=config)
        assert settings.reruns_per_config == 7
        assert settings.backend == "plugin:make_backend"
        assert settings.repositories == (Repository("acme", "widgets", "Widgets.sln"),)

    def test_project_file_discovered(self, isolated):
        (isolated / "clusterbench.toml").write_text("max_workers = 2\n")
        assert load_settings().max_workers == 2

    def test_explicit_file_beats_project_file(self, isolated):
        (isolated / "clusterbench.toml").write_text("reruns_per_config = 2\n")
        explicit = isolated / "other.toml"
        explicit.write_text("reruns_per_config = 4\n")
        assert load_settings(config_file=explicit).reruns_per_config == 4

    def test_env_beats_files(self, isolated, monkeypatch):
        (isolated / "clusterbench.toml").write_text("reruns_per_config = 2\n")
        monkeypatch.setenv("CLUSTERBENCH_RERUNS_PER_CONFIG", "9")
        monkeypatch.setenv("CLUSTERBENCH_CONFIGS", "plugin:CONFIGS")
        settings = load_settings()
        assert settings.reruns_per_config == 9
        assert settings.configs == "plugin:CONFIGS"

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv("CLUSTERBENCH_RERUNS_PER_CONFIG", "9")
        assert load_settings(reruns_per_config=3).reruns_per_config == 3

    def test_none_overrides_ignored(self):
        assert load_settings(reruns_per_config=None).reruns_per_config == 5

    def test_verbosity_flags(self):
        assert load_settings(verbose=True).verbosity == "verbose"
        assert load_settings(quiet=True).verbosity == "quiet"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidPathError):
            load_settings(config_file=tmp_path / "absent.toml")

    def test_malformed_toml(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("reruns_per_config = = 3\n")
        with pytest.raises(ConfigurationError):
            load_settings(config_file=config)

    def test_unknown_key(self, tmp_path):
        config = tmp_path / "bench.toml"
        config.write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError):
            load_settings(config_file=config)

    def test_invalid_value(self, tmp_path):
        config = tmp_path / "bench.toml"
        config.write_text("reruns_per_config = 0\n")
        with pytest.raises(ConfigurationError):
            load_settings(config_file=config)

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("CLUSTERBENCH_MAX_WORKERS", "many")
        with pytest.raises(ConfigurationError):
            load_settings()

    def test_incomplete_repository(self, tmp_path):
        config = tmp_path / "bench.toml"
        config.write_text('[[repositories]]\nowner = "acme"\n')
        with pytest.raises(InvalidConfigError):
            load_settings(config_file=config)


class TestImportObject:
    """Test dotted-path plugin resolution."""

    def test_resolves_attribute(self):
        assert import_object("clusterbench.config:load_settings") is load_settings

    def test_resolves_nested_attribute(self):
        assert import_object("clusterbench.config:BenchmarkSettings.__post_init__") is (
            BenchmarkSettings.__post_init__
        )

    @pytest.mark.parametrize(
        "path",
        ["clusterbench.config", "clusterbench.no_such_module:thing", "clusterbench.config:nothing"],
    )
    def test_invalid_paths(self, path):
        with pytest.raises(InvalidConfigError):
            import_object(path)
