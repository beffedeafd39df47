from pathlib import Path

import pytest

from vex2pdf.input_file_type import InputFileType


def test_lowercase_names():
    assert InputFileType.XML.as_str_lowercase() == "xml"
    assert InputFileType.JSON.as_str_lowercase() == "json"


def test_uppercase_names():
    assert InputFileType.XML.as_str_uppercase() == "XML"
    assert InputFileType.JSON.as_str_uppercase() == "JSON"


@pytest.mark.parametrize("file_type", list(InputFileType))
def test_lowercase_round_trips_to_member(file_type):
    assert InputFileType(file_type.as_str_lowercase()) is file_type


@pytest.mark.parametrize(
    ("file_type", "expected"),
    [(InputFileType.JSON, "JSON"), (InputFileType.XML, "XML")],
)
def test_uppercase_is_upper_of_lowercase(file_type, expected):
    assert file_type.as_str_uppercase() == expected
    assert file_type.as_str_lowercase().upper() == expected


def test_usable_as_mapping_key():
    flags = {InputFileType.JSON: True, InputFileType.XML: False}
    assert flags[InputFileType("json")] is True
    assert flags[InputFileType("xml")] is False
    assert len(flags) == 2


def test_error_message_formatting():
    message = f"Failed to parse {InputFileType.JSON.as_str_uppercase()} document"
    assert message == "Failed to parse JSON document"


def test_extension_matching():
    suffix = Path("document.json").suffix.lstrip(".")
    assert InputFileType.JSON.as_str_lowercase() == suffix
    assert InputFileType.XML.as_str_lowercase() != suffix
    assert InputFileType(suffix) is InputFileType.JSON