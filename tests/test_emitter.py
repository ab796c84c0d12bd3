import math

import pytest

from cloudzone.emitter import EmitterConfig
from cloudzone.errors import SourceUnavailable
from cloudzone.warnings import LineDataWarning


def test_describe_lists_options():
    config = EmitterConfig("CO", 1.0e-4, energySkip=True, extrap=False, emitterFile="co.dat", emitterURL="http://x/co.dat")
    assert config.describe("1.0e-4") == (
        "Adding emitter CO with abundance 1.0e-4; setting energySkip; disallowing extrapolation"
        "; using file name co.dat; using URL http://x/co.dat"
    )
    assert EmitterConfig("C+", 2.0e-6).describe() == "Adding emitter C+ with abundance 2e-06"


@pytest.mark.parametrize("name, abundance", [("", 1.0e-4), ("CO", math.nan), ("CO", math.inf)])
def test_invalid_emitters(name, abundance):
    with pytest.raises(ValueError):
        EmitterConfig(name, abundance)


def test_config_is_frozen():
    config = EmitterConfig("CO", 1.0e-4)
    with pytest.raises(AttributeError):
        config.abundance = 2.0


def test_data_file_found_by_species_name(co_datafile):
    config = EmitterConfig("CO", 1.0e-4, extrap=False)
    assert config.resolve_data_path([co_datafile.parent]).name.lower() == "co.dat"
    data = config.load_data([co_datafile.parent])
    assert data.name == "CO"
    assert not data.allow_extrapolation


def test_explicit_file_name(co_datafile):
    config = EmitterConfig("carbon-monoxide", 1.0e-4, emitterFile="co.dat")
    assert config.resolve_data_path([co_datafile.parent]) == co_datafile


def test_level_check_skipped_with_energy_skip(co_datafile, recwarn):
    text = co_datafile.read_text().replace("230.5380000", "250.0000000")
    co_datafile.write_text(text)
    EmitterConfig("co", 1.0e-4, energySkip=True).load_data([co_datafile.parent])
    assert not [w for w in recwarn if issubclass(w.category, LineDataWarning)]
    with pytest.warns(LineDataWarning):
        EmitterConfig("co", 1.0e-4).load_data([co_datafile.parent])


def test_missing_data_reports_url(tmp_path):
    config = EmitterConfig("HCN", 1.0e-8, emitterURL="https://example.org/hcn.dat")
    with pytest.raises(SourceUnavailable) as excinfo:
        config.resolve_data_path([tmp_path])
    assert excinfo.value.path == "HCN.dat"
    assert "https://example.org/hcn.dat" in excinfo.value.tried
    assert str(tmp_path / "hcn.dat") in excinfo.value.tried
