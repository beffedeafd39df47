"""Font family used for rendering reports, with glyph metrics for layout."""

from __future__ import annotations

from dataclasses import dataclass

# Advance widths (1/1000 em) of the printable ASCII range, code points 32..126.
_REGULAR_ASCII = (
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556,
    278, 278, 584, 584, 584, 556, 1015,
    667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833,
    722, 778, 667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611,
    278, 278, 278, 469, 556, 333,
    556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833,
    556, 556, 556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500,
    334, 260, 334, 584,
)

_BOLD_ASCII = (
    278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556,
    333, 333, 584, 584, 584, 611, 975,
    722, 722, 722, 722, 667, 611, 778, 722, 278, 556, 722, 611, 833,
    722, 778, 667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611,
    333, 278, 333, 584, 556, 333,
    556, 611, 556, 611, 556, 333, 611, 611, 278, 278, 556, 278, 889,
    611, 611, 611, 611, 389, 556, 333, 611, 556, 778, 556, 556, 500,
    389, 280, 389, 584,
)

_EXTRA_WIDTHS = {
    "\u00a0": 278,
    "\u2013": 556,
    "\u2014": 1000,
    "\u2022": 350,
    "\u2026": 1000,
}

_DEFAULT_WIDTH = 556
_ENCODING = "cp1252"


def _table(ascii_widths: tuple[int, ...]) -> dict[str, int]:
    widths = {chr(code): width for code, width in enumerate(ascii_widths, start=32)}
    widths.update(_EXTRA_WIDTHS)
    return widths


_REGULAR_TABLE = _table(_REGULAR_ASCII)
_BOLD_TABLE = _table(_BOLD_ASCII)

_WIDTHS = {
    "Helvetica": _REGULAR_TABLE,
    "Helvetica-Oblique": _REGULAR_TABLE,
    "Helvetica-Bold": _BOLD_TABLE,
    "Helvetica-BoldOblique": _BOLD_TABLE,
}


@dataclass(frozen=True)
class FontFamily:
    """The four faces of a font family, named by their PDF base-font names."""

    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"
    bold_italic: str = "Helvetica-BoldOblique"

    def font_for(self, bold: bool, italic: bool) -> str:
        """Return the face matching the given weight and slant."""
        if bold and italic:
            return self.bold_italic
        if bold:
            return self.bold
        if italic:
            return self.italic
        return self.regular


def build_font_family() -> FontFamily:
    """Return the built-in sans-serif family, metric-compatible with Liberation Sans."""
    return FontFamily()


def _char_width(char: str, table: dict[str, int]) -> int:
    try:
        char.encode(_ENCODING)
    except UnicodeEncodeError:
        char = "?"
    return table.get(char, _DEFAULT_WIDTH)


def text_width(text: str, font: str, size: float) -> float:
    """Return the width of ``text`` in points when set in ``font`` at ``size``."""
    try:
        table = _WIDTHS[font]
    except KeyError:
        raise ValueError(f"unknown font '{font}'") from None
    return sum(_char_width(char, table) for char in text) * size / 1000


def print_fonts_info() -> str:
    """Print which font family reports are rendered with and return the message."""
    family = build_font_family()
    message = (
        f"Active font path: <built-in {family.regular} family, metric-compatible with "
        "Liberation Sans> -- the env variable VEX2PDF_SHOW_OSS_LICENSES=true shows font details"
    )
    print(message)
    print()
    return message