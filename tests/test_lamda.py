import math
from pathlib import Path

import numpy as np
import pytest

from cloudzone.errors import LineDataError
from cloudzone.lamda import CollisionTable, read_lamda
from cloudzone.warnings import LineDataWarning

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def co():
    return read_lamda(FIXTURES / "co_min.dat")


def test_reads_levels_transitions_and_partners(co):
    assert co.name == "CO"
    assert co.molWgt == 28.0
    assert co.nlev == 3
    assert co.nrad == 2
    assert co.levels["weight"].tolist() == [1.0, 3.0, 5.0]
    assert co.levels["label"].tolist() == ["0", "1", "2"]
    assert co.transitions["freq"].iloc[0] == pytest.approx(115.2712018)
    assert list(co.partners) == ["pH2"]
    table = co.partners["pH2"]
    assert table.T_range == (10.0, 40.0)
    assert table.description.startswith("CO-pH2")


def test_level_energies_are_consistent(co):
    assert co.check_level_energies() == []


def test_inconsistent_frequency_warns(co):
    co.transitions.loc[1, "freq"] = 240.0
    with pytest.warns(LineDataWarning, match=r"\[2\]"):
        assert co.check_level_energies() == [2]


def test_rates_interpolate_in_log_temperature(co):
    np.testing.assert_allclose(co.collision_rates("pH2", 20.0), [4.0e-11, 2.0e-11, 6.0e-11])
    mid = math.sqrt(10.0 * 20.0)
    np.testing.assert_allclose(co.collision_rates("pH2", mid), [3.5e-11, 1.5e-11, 6.0e-11])


def test_rates_extrapolate_as_power_law(co):
    with pytest.warns(LineDataWarning):
        hot = co.collision_rates("pH2", 80.0)
    np.testing.assert_allclose(hot, [6.25e-11, 8.0e-11, 6.0e-11])
    with pytest.warns(LineDataWarning):
        cold = co.collision_rates("pH2", 5.0)
    np.testing.assert_allclose(cold, [2.25e-11, 0.5e-11, 6.0e-11])


def test_extrapolation_can_be_forbidden(co):
    co.allow_extrapolation = False
    with pytest.raises(LineDataError, match="outside collision table range"):
        co.collision_rates("pH2", 80.0)
    np.testing.assert_allclose(co.collision_rates("pH2", 10.0), [3.0e-11, 1.0e-11, 6.0e-11])


def test_unknown_partner(co):
    with pytest.raises(LineDataError, match="known: pH2"):
        co.collision_rates("e", 20.0)


def test_collision_table_validation():
    with pytest.raises(LineDataError):
        CollisionTable("H", np.array([2]), np.array([1]), np.array([20.0, 10.0]), np.ones((1, 2)))
    with pytest.raises(LineDataError):
        CollisionTable("H", np.array([2]), np.array([1]), np.array([10.0, 20.0]), np.ones((2, 2)))


def test_single_temperature_table_is_constant():
    table = CollisionTable("He", np.array([2]), np.array([1]), np.array([100.0]), np.array([[1.0e-11]]))
    assert table.rate(5.0)[0] == 1.0e-11
    with pytest.raises(LineDataError):
        table.rate(-1.0)


def test_misnumbered_levels(tmp_path):
    text = (FIXTURES / "co_min.dat").read_text().replace("    3    11.534919938", "    4    11.534919938")
    path = tmp_path / "bad.dat"
    path.write_text(text)
    with pytest.raises(LineDataError, match="numbered"):
        read_lamda(path)


def test_truncated_file(tmp_path):
    lines = (FIXTURES / "co_min.dat").read_text().splitlines()
    path = tmp_path / "short.dat"
    path.write_text("\n".join(lines[:10]) + "\n")
    with pytest.raises(LineDataError, match="unexpected end of file"):
        read_lamda(path)


def test_missing_file(tmp_path):
    with pytest.raises(LineDataError, match="cannot read"):
        read_lamda(tmp_path / "absent.dat")
