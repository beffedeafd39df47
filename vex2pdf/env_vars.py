"""Environment variables that control report generation."""

from __future__ import annotations

import enum
import os

_OFF_VALUES = frozenset({"false", "off", "no", "0"})


def is_value_on(value: str) -> bool:
    """Return False for false/off/no/0 (ASCII case-insensitive), True otherwise."""
    return not (value.isascii() and value.lower() in _OFF_VALUES)


class EnvVarNames(enum.Enum):
    """Environment variables read by the application."""

    HOME = "HOME"
    NO_VULNS_MSG = "VEX2PDF_NOVULNS_MSG"
    PROCESS_JSON = "VEX2PDF_JSON"
    PROCESS_XML = "VEX2PDF_XML"
    SHOW_OSS_LICENSES = "VEX2PDF_SHOW_OSS_LICENSES"
    VERSION_INFO = "VEX2PDF_VERSION_INFO"
    REPORT_TITLE = "VEX2PDF_REPORT_TITLE"
    PDF_NAME = "VEX2PDF_PDF_META_NAME"
    SHOW_COMPONENTS = "VEX2PDF_SHOW_COMPONENTS"

    def as_str(self) -> str:
        """Return the variable's name in the environment."""
        return self.value

    def get_value(self) -> str | None:
        """Return the variable's value, or None when it is not set."""
        return os.environ.get(self.value)

    def is_on(self) -> bool:
        """True when the variable is set to an 'on' value; unset means off."""
        value = self.get_value()
        return value is not None and is_value_on(value)

    def is_on_or_unset(self) -> bool:
        """True when the variable is unset or set to an 'on' value."""
        value = self.get_value()
        return value is None or is_value_on(value)


def print_report_titles_info() -> None:
    """Print which report and PDF metadata titles are in effect."""
    print()
    title = EnvVarNames.REPORT_TITLE.get_value()
    if title is not None:
        print(f"Overriding report title to {title}")
    else:
        print("Using default report title")
        print(
            f"to override this set the {EnvVarNames.REPORT_TITLE.as_str()} "
            "environment variable to the desired title"
        )
    print()
    meta_name = EnvVarNames.PDF_NAME.get_value()
    if meta_name is not None:
        print(f"Overriding pdf metadata title to {meta_name}")
    else:
        print("Using default pdf metadata title")
        print(
            f"to override this set the {EnvVarNames.PDF_NAME.as_str()} "
            "environment variable to the desired title"
        )
    print()