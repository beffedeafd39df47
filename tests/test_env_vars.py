import pytest

from vex2pdf.env_vars import EnvVarNames, is_value_on, print_report_titles_info

TRUE_VALUES = ["true", "True", "TRUE", "yes", "YES", "1", "on", "ON"]
FALSE_VALUES = ["false", "False", "FALSE", "no", "NO", "0", "off", "OFF"]


@pytest.mark.parametrize("value", TRUE_VALUES + ["anything_else"])
def test_is_value_on_true(value):
    assert is_value_on(value) is True


@pytest.mark.parametrize("value", FALSE_VALUES)
def test_is_value_on_false(value):
    assert is_value_on(value) is False


def test_names():
    assert EnvVarNames.HOME.as_str() == "HOME"
    assert EnvVarNames.NO_VULNS_MSG.as_str() == "VEX2PDF_NOVULNS_MSG"
    assert EnvVarNames.PROCESS_JSON.as_str() == "VEX2PDF_JSON"
    assert EnvVarNames.PROCESS_XML.as_str() == "VEX2PDF_XML"
    assert EnvVarNames.SHOW_OSS_LICENSES.as_str() == "VEX2PDF_SHOW_OSS_LICENSES"
    assert EnvVarNames.VERSION_INFO.as_str() == "VEX2PDF_VERSION_INFO"
    assert EnvVarNames.REPORT_TITLE.as_str() == "VEX2PDF_REPORT_TITLE"
    assert EnvVarNames.PDF_NAME.as_str() == "VEX2PDF_PDF_META_NAME"
    assert EnvVarNames.SHOW_COMPONENTS.as_str() == "VEX2PDF_SHOW_COMPONENTS"


def test_is_on_when_unset(monkeypatch):
    monkeypatch.delenv(EnvVarNames.PROCESS_XML.as_str(), raising=False)
    assert EnvVarNames.PROCESS_XML.is_on() is False


@pytest.mark.parametrize("value", TRUE_VALUES)
def test_is_on_true_values(monkeypatch, value):
    monkeypatch.setenv(EnvVarNames.PROCESS_XML.as_str(), value)
    assert EnvVarNames.PROCESS_XML.is_on() is True


@pytest.mark.parametrize("value", FALSE_VALUES)
def test_is_on_false_values(monkeypatch, value):
    monkeypatch.setenv(EnvVarNames.PROCESS_XML.as_str(), value)
    assert EnvVarNames.PROCESS_XML.is_on() is False


def test_is_on_or_unset_when_unset(monkeypatch):
    monkeypatch.delenv(EnvVarNames.PROCESS_XML.as_str(), raising=False)
    assert EnvVarNames.PROCESS_XML.is_on_or_unset() is True


@pytest.mark.parametrize("value", TRUE_VALUES)
def test_is_on_or_unset_true_values(monkeypatch, value):
    monkeypatch.setenv(EnvVarNames.PROCESS_XML.as_str(), value)
    assert EnvVarNames.PROCESS_XML.is_on_or_unset() is True


@pytest.mark.parametrize("value", FALSE_VALUES)
def test_is_on_or_unset_false_values(monkeypatch, value):
    monkeypatch.setenv(EnvVarNames.PROCESS_XML.as_str(), value)
    assert EnvVarNames.PROCESS_XML.is_on_or_unset() is False


def test_get_value_unset(monkeypatch):
    monkeypatch.delenv(EnvVarNames.REPORT_TITLE.as_str(), raising=False)
    assert EnvVarNames.REPORT_TITLE.get_value() is None


def test_get_value_set(monkeypatch):
    monkeypatch.setenv(EnvVarNames.PDF_NAME.as_str(), "Test PDF Name")
    assert EnvVarNames.PDF_NAME.get_value() == "Test PDF Name"


def test_get_value_empty(monkeypatch):
    monkeypatch.setenv(EnvVarNames.REPORT_TITLE.as_str(), "")
    assert EnvVarNames.REPORT_TITLE.get_value() == ""


def test_novulns_msg_env_var(monkeypatch):
    monkeypatch.delenv(EnvVarNames.NO_VULNS_MSG.as_str(), raising=False)
    assert EnvVarNames.NO_VULNS_MSG.get_value() is None
    monkeypatch.setenv(EnvVarNames.NO_VULNS_MSG.as_str(), "false")
    assert EnvVarNames.NO_VULNS_MSG.get_value() == "false"
    assert EnvVarNames.NO_VULNS_MSG.is_on_or_unset() is False


def test_print_report_titles_info_overrides(monkeypatch, capsys):
    monkeypatch.setenv(EnvVarNames.REPORT_TITLE.as_str(), "My Title")
    monkeypatch.delenv(EnvVarNames.PDF_NAME.as_str(), raising=False)
    print_report_titles_info()
    out = capsys.readouterr().out
    assert "Overriding report title to My Title" in out
    assert "Using default pdf metadata title" in out
    assert "VEX2PDF_PDF_META_NAME" in out


def test_print_report_titles_info_defaults(monkeypatch, capsys):
    monkeypatch.delenv(EnvVarNames.REPORT_TITLE.as_str(), raising=False)
    monkeypatch.setenv(EnvVarNames.PDF_NAME.as_str(), "Meta")
    print_report_titles_info()
    out = capsys.readouterr().out
    assert "Using default report title" in out
    assert "Overriding pdf metadata title to Meta" in out