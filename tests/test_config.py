import configparser

import pytest

from vanity.config_utils import SearchConfig, load_config, search_config_from_parser


def parser_from(text):
    config = configparser.ConfigParser()
    config.read_string(text)
    return config


def test_defaults():
    config = SearchConfig()
    assert config.total_budget == 1000000
    assert config.single_thread_budget == 300000
    assert config.enable_parallel is True
    assert config.min_parallel_length == 3
    assert config.progress_interval == 5000


def test_reads_vanity_section():
    config = search_config_from_parser(parser_from("""
[vanity]
suffix = pump
total_budget = 2000000
enable_parallel = false
max_workers = 4
max_time =
show_progress = yes
"""))
    assert config.suffix == "pump"
    assert config.total_budget == 2000000
    assert config.enable_parallel is False
    assert config.max_workers == 4
    assert config.max_time is None
    assert config.show_progress is True


def test_missing_section_uses_defaults():
    assert search_config_from_parser(parser_from("[other]\nkey = value\n")) == SearchConfig()


def test_with_overrides_skips_none():
    config = SearchConfig(suffix="abc", total_budget=10).with_overrides(suffix=None, total_budget=20)
    assert config.suffix == "abc"
    assert config.total_budget == 20


@pytest.mark.parametrize("kwargs", [
    {"total_budget": -1},
    {"batch_size": 0},
    {"progress_interval": 0},
    {"max_workers": 0},
])
def test_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SearchConfig(**kwargs)


def test_load_config_missing_file(tmp_path):
    config = load_config(str(tmp_path / "missing.ini"))
    assert config.sections() == []


def test_load_config_reads_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[vanity]\nsuffix = Sun\n")
    assert search_config_from_parser(load_config(str(path))).suffix == "Sun"
