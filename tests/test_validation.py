import pytest

from cloudzone import Cloud
from cloudzone.composition import Composition
from cloudzone.diagnostics import CollectingSink
from cloudzone.errors import InvariantViolation
from cloudzone.validation import check_hydrogen_balance, finalize


def test_exact_balance_for_ortho_para_pair():
    comp = Composition(xoH2=0.1, xpH2=0.4)
    assert check_hydrogen_balance(comp) == 1.0


def test_exact_check_rejects_roundoff():
    comp = Composition(xHI=1.0 - 1.0e-12)
    with pytest.raises(InvariantViolation) as excinfo:
        check_hydrogen_balance(comp)
    assert excinfo.value.total == pytest.approx(1.0 - 1.0e-12)
    assert "xHI + xH+ + 2 xH2 != 1" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)


def test_tolerance_widens_the_check():
    comp = Composition(xHI=1.0 - 1.0e-12)
    assert check_hydrogen_balance(comp, tolerance=1.0e-9) == pytest.approx(1.0)
    with pytest.raises(InvariantViolation, match="tolerance"):
        check_hydrogen_balance(Composition(xHI=0.9), tolerance=1.0e-3)


def test_finalize_without_temperature_skips_cv():
    cloud = Cloud(nH=100.0, comp=Composition(xHI=1.0))
    sink = CollectingSink()
    finalize(cloud, sink=sink)
    assert cloud.comp.has_derived
    assert not cloud.comp.has_cv
    assert sink.messages[0] == "Derived quantities:"
    assert sink.messages[1] == f"   ===> mean mass per particle = {cloud.comp.mu} mH"
    assert not any("c_v" in msg for msg in sink.messages)


def test_finalize_with_temperature_computes_cv():
    cloud = Cloud(nH=100.0, Tg=50.0, comp=Composition(xHI=1.0))
    sink = CollectingSink()
    finalize(cloud, sink=sink)
    assert cloud.comp.cv == pytest.approx(1.5)
    assert sink.messages[-1] == "   ===> c_v/(k_B n_H mu_H) = 1.5"


def test_finalize_aborts_before_deriving():
    cloud = Cloud(nH=100.0, comp=Composition(xHI=0.5))
    with pytest.raises(InvariantViolation):
        finalize(cloud)
    assert not cloud.comp.has_derived
