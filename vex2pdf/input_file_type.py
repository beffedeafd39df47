"""Input document formats accepted for conversion."""

from __future__ import annotations

import enum


class InputFileType(enum.Enum):
    """A supported VEX document format, valued by its file extension."""

    XML = "xml"
    JSON = "json"

    def as_str_lowercase(self) -> str:
        """Return the lowercase name, suitable for extension matching."""
        return self.value

    def as_str_uppercase(self) -> str:
        """Return the uppercase name, suitable for messages."""
        return self.value.upper()