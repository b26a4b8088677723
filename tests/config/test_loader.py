import pytest

from heap_region_advisor.config.loader import AdvisorConfig
from heap_region_advisor.config.loader import load_config


def test_defaults_without_file():
    config = load_config()
    assert config == AdvisorConfig()
    assert config.base_url == "http://localhost:7070"
    assert config.profile == "summary"


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "base_url: https://cache-1:7071\n"
        "profile: deep\n"
        "max_workers: 4\n"
        "verify_ssl: false\n"
    )
    config = load_config(str(path))
    assert config.base_url == "https://cache-1:7071"
    assert config.profile == "deep"
    assert config.max_workers == 4
    assert config.verify_ssl is False
    assert config.estimator == "deep"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(str(path)) == AdvisorConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("base_url: http://x\nregion_size: 64M\n")
    with pytest.raises(ValueError, match="region_size"):
        load_config(str(path))


def test_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(str(path))


def test_overrides_skip_none():
    config = AdvisorConfig(profile="deep").with_overrides(profile=None, timeout=30)
    assert config.profile == "deep"
    assert config.timeout == 30
