"""Command-line entry point: convert VEX documents in the current directory to PDF."""

from __future__ import annotations

import argparse
import sys

from .config import Config
from .generator import PdfGenerator
from .input_file_type import InputFileType
from .run_utils import find_files, parse_files, print_copyright

_SEPARATOR = "-----------------------------------------------------------------------------\n"
_FONT_NOTE = (
    "Reports are set in the standard PDF Helvetica family, "
    "so no font files are bundled with the documents."
)


def _print_notices() -> None:
    print_copyright()
    print(_SEPARATOR)
    print(_FONT_NOTE)
    print()


def run(config: Config) -> None:
    """Convert the JSON and XML documents selected by ``config`` to PDF reports.

    When ``config.show_oss_licenses`` is set, only notices are printed.
    Raises OSError if the working directory cannot be read.
    """
    if config.show_oss_licenses:
        _print_notices()
        return

    generator = PdfGenerator(
        config.report_title,
        config.pdf_meta_name,
        config.show_novulns_msg,
        config.show_components,
    )
    for file_type in (InputFileType.JSON, InputFileType.XML):
        files = find_files(config, file_type)
        parse_files(generator, files, file_type)


def main(argv: list[str] | None = None) -> int:
    """Run the converter; return the process exit status."""
    parser = argparse.ArgumentParser(
        prog="vex2pdf",
        description=(
            "Convert CycloneDX (VEX) JSON or XML documents in the current directory "
            "to PDF reports. Behaviour is controlled by VEX2PDF_* environment variables."
        ),
    )
    parser.parse_args(argv)

    try:
        config = Config.build()
    except (OSError, ValueError) as exc:
        print("Problem setting up working environment:", file=sys.stderr)
        print(exc, file=sys.stderr)
        return 1

    try:
        run(config)
    except (OSError, ValueError) as exc:
        print(f"Application error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())