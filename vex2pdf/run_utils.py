"""Finding, parsing and converting VEX documents in a working directory."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .input_file_type import InputFileType
from .model import (
    Bom,
    BomError,
    InvalidNamespaceError,
    UnsupportedSpecVersionError,
    parse_json,
    parse_json_value,
    parse_xml,
)

_VERSION = "0.7.1"
_DOWNGRADABLE_SPEC_VERSION = "1.6"
_DOWNGRADED_SPEC_VERSION = "1.5"


def find_files(config: Any, file_type: InputFileType) -> list[Path] | None:
    """Return the files of ``file_type`` in the configured working directory.

    Returns None when processing of this file type is switched off.
    """
    if config.file_types_to_process.get(file_type) is False:
        print(f"Skipping {file_type.as_str_uppercase()} files : deactivated by user")
        return None

    working_dir = Path(config.working_dir)
    print(f"Scanning for {file_type.as_str_uppercase()} files in: {working_dir}")

    wanted = file_type.as_str_lowercase()
    files = sorted(
        path
        for path in working_dir.iterdir()
        if path.is_file() and path.suffix[1:].lower() == wanted
    )

    if files:
        print(f"Found {len(files)} {file_type.as_str_uppercase()} files")
    else:
        print(f"No {file_type.as_str_uppercase()} files found in the current directory.")
    return files


def parse_files(
    pdf_generator: Any,
    files: Iterable[Path] | None,
    input_file_type: InputFileType,
) -> None:
    """Parse each file and write a PDF report next to it; failures are reported, not raised."""
    if files is None:
        return
    parse = parse_vex_json if input_file_type is InputFileType.JSON else parse_vex_xml
    for file_path in files:
        file_path = Path(file_path)
        print(f"Processing: {file_path}")
        try:
            vex = parse(file_path)
        except (BomError, OSError, ValueError) as exc:
            print(f"Failed to parse {file_path}: {exc}")
            continue

        output_path = get_output_pdf_path(file_path)
        print(f"Generating PDF: {output_path}")
        try:
            pdf_generator.generate_pdf(vex, output_path)
        except (OSError, ValueError) as exc:
            print(f"Failed to generate PDF for {file_path}: {exc}")
        else:
            print(f"Successfully generated PDF: {output_path}")


def parse_vex_xml(path: str | Path) -> Bom:
    """Parse a CycloneDX XML file, downgrading a 1.6 namespace to 1.5 if needed."""
    content = Path(path).read_bytes()
    try:
        return parse_xml(content)
    except InvalidNamespaceError as exc:
        actual = exc.actual_namespace
        if actual is None or _DOWNGRADABLE_SPEC_VERSION not in actual:
            raise
        _print_downgrade_warning()
        text = content.decode("utf-8", errors="replace")
        return parse_xml(text.replace(actual, exc.expected_namespace).encode("utf-8"))


def parse_vex_json(path: str | Path) -> Bom:
    """Parse a CycloneDX JSON file, downgrading spec version 1.6 to 1.5 if needed."""
    content = Path(path).read_bytes()
    try:
        return parse_json(content)
    except UnsupportedSpecVersionError as exc:
        if exc.version != _DOWNGRADABLE_SPEC_VERSION:
            raise
        try:
            value = json.loads(content)
        except ValueError as json_exc:
            raise BomError(f"invalid JSON: {json_exc}") from json_exc
        _print_downgrade_warning()
        value["specVersion"] = _DOWNGRADED_SPEC_VERSION
        return parse_json_value(value)


def _print_downgrade_warning() -> None:
    print()
    print("NOTE: Downgrading CycloneDX BOM from spec version 1.6 to 1.5")
    print("Reason: Current implementation does not yet fully support spec version 1.6")
    print(
        "Warning: This compatibility mode only works for BOMs that don't utilize "
        "1.6-specific fields"
    )
    print("         Processing will fail if 1.6-specific fields are encountered")
    print()


def get_output_pdf_path(file_path: str | Path) -> Path:
    """Return the path of the PDF report for ``file_path``: same stem, ``.pdf`` suffix."""
    path = Path(file_path)
    if not path.name:
        return path
    return path.with_name(f"{path.stem}.pdf")


def print_copyright() -> None:
    """Print the application name and version."""
    print(f"vex2pdf v{_VERSION} - CycloneDX (VEX) to PDF Converter")
    print()