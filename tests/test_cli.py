import json

import pytest

from vex2pdf.cli import main, run
from vex2pdf.config import Config
from vex2pdf.env_vars import EnvVarNames
from vex2pdf.input_file_type import InputFileType


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in EnvVarNames:
        if var is not EnvVarNames.HOME:
            monkeypatch.delenv(var.as_str(), raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def _sample_bom() -> dict:
    return {
        "bomFormat": "CycloneDX",
        "specVersion": "1.5",
        "serialNumber": "urn:uuid:3e671687-395b-41f5-a30f-a58921a69b79",
        "version": 1,
    }


def test_run_shows_notices_and_converts_nothing(tmp_path, capsys):
    (tmp_path / "doc.json").write_text(json.dumps(_sample_bom()))
    config = Config.default()
    config.working_dir = tmp_path
    run(config)
    out = capsys.readouterr().out
    assert "Helvetica" in out
    assert not (tmp_path / "doc.pdf").exists()


def test_run_on_empty_directory(tmp_path, capsys):
    config = Config(working_dir=tmp_path)
    run(config)
    out = capsys.readouterr().out
    assert "No JSON files found in the current directory." in out
    assert "No XML files found in the current directory." in out


def test_run_skips_disabled_type(tmp_path, capsys):
    config = Config(
        working_dir=tmp_path,
        file_types_to_process={InputFileType.JSON: True, InputFileType.XML: False},
    )
    run(config)
    assert "Skipping XML files : deactivated by user" in capsys.readouterr().out


def test_run_missing_directory_raises(tmp_path):
    config = Config(working_dir=tmp_path / "missing")
    with pytest.raises(FileNotFoundError):
        run(config)


def test_run_converts_json(tmp_path):
    (tmp_path / "sample_vex.json").write_text(json.dumps(_sample_bom()))
    run(Config(working_dir=tmp_path))
    pdf = tmp_path / "sample_vex.pdf"
    assert pdf.read_bytes().startswith(b"%PDF-1.4")


def test_main_converts_current_directory(clean_env, tmp_path):
    (tmp_path / "report.json").write_text(json.dumps(_sample_bom()))
    assert main([]) == 0
    assert (tmp_path / "report.pdf").read_bytes().startswith(b"%PDF-")


def test_main_reports_unparsable_file_and_succeeds(clean_env, tmp_path, capsys):
    (tmp_path / "broken.json").write_text("{not json")
    assert main([]) == 0
    assert "Failed to parse" in capsys.readouterr().out
    assert not (tmp_path / "broken.pdf").exists()


def test_main_rejects_unknown_arguments(clean_env):
    with pytest.raises(SystemExit) as excinfo:
        main(["--no-such-option"])
    assert excinfo.value.code == 2