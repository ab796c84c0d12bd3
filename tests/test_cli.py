import json
import logging

import pytest

from cloudzone import cli


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(
        cli, "configure_logging", lambda level, suppress_warnings=False: calls.append((level, suppress_warnings))
    )
    return calls


def test_bundled_descriptor_json(capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli.main(["cloudfiles/MilkyWayGMC.desc", "--json"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["nH"] == 100.0
    assert summary["comp"]["muH"] == pytest.approx(1.4)
    assert "CO" in summary["emitters"]


def test_text_summary(capsys, gmc_descriptor):
    assert cli.main([str(gmc_descriptor), "--no-warn"]) == 0
    out = capsys.readouterr().out
    assert "nH = 100" in out
    assert "CO: abundance 0.0001" in out


def test_error_exit_status(capsys, write_descriptor):
    path = write_descriptor("nH = 100\nxHI = 0.5\n")
    assert cli.main([str(path)]) == 1
    assert capsys.readouterr().out.startswith("[ERROR] total hydrogen abundance")


def test_tolerance_flag(capsys, write_descriptor):
    path = write_descriptor("nH = 100\nxHI = 0.9995\n")
    assert cli.main([str(path), "--tolerance", "1e-3"]) == 0


def test_options_file_and_search_dir(capsys, tmp_path, write_descriptor, monkeypatch):
    write_descriptor("nH = 100\nxHI = 0.9995\n", "near.desc")
    opts = tmp_path / "ingest.yml"
    opts.write_text("hydrogen_tolerance: 1.0e-3\n")
    elsewhere = tmp_path / "run"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    assert cli.main(["near.desc", "--options", str(opts), "--search-dir", str(tmp_path), "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["comp"]["xHI"] == 0.9995


def test_invalid_options_reported(capsys, gmc_descriptor):
    assert cli.main([str(gmc_descriptor), "--tolerance", "-1"]) == 1
    assert capsys.readouterr().out.startswith("[ERROR]")


def test_missing_descriptor(capsys, tmp_path):
    assert cli.main([str(tmp_path / "absent.desc")]) == 1
    assert "cannot open file" in capsys.readouterr().out


def test_no_warn_silences_python_warnings(capsys, gmc_descriptor, logging_calls):
    assert cli.main([str(gmc_descriptor), "--no-warn"]) == 0
    assert cli.main([str(gmc_descriptor), "--verbose"]) == 0
    assert logging_calls == [(logging.WARNING, True), (logging.INFO, False)]


def test_undecodable_descriptor_reported(capsys, write_descriptor):
    path = write_descriptor("")
    path.write_bytes(b"# caf\xe9\nnH = 100\nxHI = 1\n")
    assert cli.main([str(path)]) == 1
    assert "not valid UTF-8" in capsys.readouterr().out


def test_non_finite_value_reported(capsys, write_descriptor):
    path = write_descriptor("nH = 100\nxHI = 1\nTg = inf\n")
    assert cli.main([str(path)]) == 1
    assert capsys.readouterr().out.startswith("[ERROR] Non-finite value in input line: Tg = inf")
