from pathlib import Path

import pytest

from cloudzone.errors import ConfigurationError
from cloudzone.schema import IngestOptions, load_options


def test_defaults():
    opts = IngestOptions()
    assert not opts.verbose
    assert not opts.suppress_convergence_warnings
    assert opts.hydrogen_tolerance == 0.0
    assert opts.max_lines is None
    assert opts.search_dirs == []


@pytest.mark.parametrize("field, value", [("hydrogen_tolerance", -1.0), ("hydrogen_tolerance", float("nan")), ("max_lines", 0)])
def test_invalid_values(field, value):
    with pytest.raises(ValueError):
        IngestOptions(**{field: value})


def test_unknown_keys_rejected():
    with pytest.raises(ValueError):
        IngestOptions(tolerance=1.0)


def test_load_from_yaml(tmp_path):
    path = tmp_path / "ingest.yml"
    path.write_text("verbose: true\nhydrogen_tolerance: 1.0e-8\nsearch_dirs:\n  - clouds\n  - /data/clouds\n")
    opts = load_options(path)
    assert opts.verbose
    assert opts.hydrogen_tolerance == 1.0e-8
    assert opts.search_dirs == [Path("clouds"), Path("/data/clouds")]


def test_overrides_win_and_none_is_ignored(tmp_path):
    path = tmp_path / "ingest.yml"
    path.write_text("max_lines: 100\nverbose: false\n")
    opts = load_options(path, verbose=True, max_lines=None)
    assert opts.verbose
    assert opts.max_lines == 100


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_options(path) == IngestOptions()


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- verbose\n")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_options(path)


def test_missing_yaml(tmp_path):
    with pytest.raises(ConfigurationError, match="cannot read"):
        load_options(tmp_path / "absent.yml")
