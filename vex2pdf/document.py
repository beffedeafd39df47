"""Page layout elements and a small PDF writer for reports."""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable

from .fonts import FontFamily, build_font_family, text_width

_MM = 72 / 25.4
_LINE_FACTOR = 1.15
_ASCENT_FACTOR = 0.905
_DEFAULT_FONT_SIZE = 12
_ALIGNMENTS = ("left", "center", "right")
_A4_MM = (210.0, 297.0)
_FRAME_LINE_WIDTH = 0.5
_ENCODING = "cp1252"


@dataclass(frozen=True)
class Color:
    """An RGB colour with 0-255 components."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        if not all(0 <= c <= 255 for c in (self.r, self.g, self.b)):
            raise ValueError(f"colour components must be within 0..255, got {self}")


_BLACK = Color(0, 0, 0)


@dataclass(frozen=True)
class Style:
    """Text style; unset fields are inherited from the enclosing element."""

    font_size: float | None = None
    color: Color | None = None
    bold: bool = False
    italic: bool = False

    def bolded(self) -> Style:
        """Return a bold copy of this style."""
        return replace(self, bold=True)

    def with_font_size(self, size: float) -> Style:
        """Return a copy with the given font size in points."""
        if size <= 0:
            raise ValueError("font size must be positive")
        return replace(self, font_size=size)

    def with_color(self, color: Color) -> Style:
        """Return a copy with the given colour."""
        return replace(self, color=color)

    def _merged(self, other: Style | None) -> Style:
        if other is None:
            return self
        return Style(
            font_size=other.font_size if other.font_size is not None else self.font_size,
            color=other.color if other.color is not None else self.color,
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
        )

    @property
    def _size(self) -> float:
        return self.font_size if self.font_size is not None else _DEFAULT_FONT_SIZE

    @property
    def _line_height(self) -> float:
        return self._size * _LINE_FACTOR

    @property
    def _rgb(self) -> Color:
        return self.color if self.color is not None else _BLACK


@dataclass(frozen=True)
class _Text:
    x: float
    y: float  # baseline, measured down from the top
    font: str
    size: float
    color: Color
    text: str

    def moved(self, dx: float, dy: float) -> _Text:
        return replace(self, x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True)
class _Rect:
    x: float
    y: float  # top edge, measured down from the top
    width: float
    height: float
    color: Color

    def moved(self, dx: float, dy: float) -> _Rect:
        return replace(self, x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True)
class _Row:
    """An unbreakable horizontal strip of drawing operations."""

    height: float
    ops: tuple = ()

    def moved(self, dx: float, dy: float) -> _Row:
        return _Row(self.height, tuple(op.moved(dx, dy) for op in self.ops))


class _Element:
    style: Style | None = None

    def _layout(self, parent: Style, family: FontFamily, width: float) -> list[_Row]:
        raise NotImplementedError


def _width(text: str, style: Style, family: FontFamily) -> float:
    return text_width(text, family.font_for(style.bold, style.italic), style._size)


def _trimmed(line: list[tuple[str, Style]]) -> list[tuple[str, Style]]:
    while line and line[-1][0] == " ":
        line.pop()
    return line


class Paragraph(_Element):
    """Word-wrapped text made of differently styled runs."""

    def __init__(self, text: str | None = None, style: Style | None = None, alignment: str = "left"):
        if alignment not in _ALIGNMENTS:
            raise ValueError(f"alignment must be one of {_ALIGNMENTS}, got '{alignment}'")
        self.runs: list[tuple[str, Style | None]] = []
        self.style = style
        self.alignment = alignment
        if text is not None:
            self.add(text)

    def add(self, text: str, style: Style | None = None) -> Paragraph:
        """Append a run of text and return the paragraph for chaining."""
        self.runs.append((str(text), style))
        return self

    def _layout(self, parent: Style, family: FontFamily, width: float) -> list[_Row]:
        base = parent._merged(self.style)
        tokens = [
            (" " if piece.isspace() else piece, run_style)
            for text, style in self.runs
            for run_style in (base._merged(style),)
            for piece in re.findall(r"\S+|\s+", text)
        ]
        return [self._line_row(line, base, family, width) for line in self._wrap(tokens, family, width)]

    @staticmethod
    def _split_to_fit(piece: str, style: Style, family: FontFamily, width: float) -> tuple[str, str]:
        prefix_widths = itertools.accumulate(_width(char, style, family) for char in piece)
        count = max(1, sum(1 for w in prefix_widths if w <= width))
        return piece[:count], piece[count:]

    def _wrap(self, tokens, family: FontFamily, width: float) -> list[list[tuple[str, Style]]]:
        lines: list[list[tuple[str, Style]]] = []
        line: list[tuple[str, Style]] = []
        used = 0.0
        for piece, style in tokens:
            w = _width(piece, style, family)
            if piece == " ":
                if line:
                    line.append((piece, style))
                    used += w
                continue
            if line and used + w > width:
                lines.append(_trimmed(line))
                line, used = [], 0.0
            while w > width and len(piece) > 1:
                head, piece = self._split_to_fit(piece, style, family, width)
                lines.append([(head, style)])
                w = _width(piece, style, family)
            line.append((piece, style))
            used += w
        if _trimmed(line):
            lines.append(line)
        return lines

    def _line_row(self, line, base: Style, family: FontFamily, width: float) -> _Row:
        runs = [(("".join(text for text, _ in group)), style) for style, group in
                itertools.groupby(line, key=lambda token: token[1])]
        largest = max((style._size for _, style in runs), default=base._size)
        baseline = largest * _ASCENT_FACTOR
        line_width = sum(_width(text, style, family) for text, style in runs)
        x = {"left": 0.0, "center": (width - line_width) / 2, "right": width - line_width}[self.alignment]
        ops = []
        for text, style in runs:
            font = family.font_for(style.bold, style.italic)
            ops.append(_Text(x, baseline, font, style._size, style._rgb, text))
            x += text_width(text, font, style._size)
        return _Row(largest * _LINE_FACTOR, tuple(ops))


class Break(_Element):
    """Vertical space of a number of text lines."""

    def __init__(self, lines: float = 1.0, style: Style | None = None):
        if lines < 0:
            raise ValueError("a break cannot have a negative number of lines")
        self.lines = lines
        self.style = style

    def _layout(self, parent: Style, family: FontFamily, width: float) -> list[_Row]:
        if self.lines == 0:
            return []
        return [_Row(self.lines * parent._merged(self.style)._line_height)]


class LinearLayout(_Element):
    """Elements stacked vertically."""

    def __init__(self, style: Style | None = None):
        self.elements: list[_Element] = []
        self.style = style

    def push(self, element: _Element) -> None:
        """Append an element below the previous ones."""
        self.elements.append(element)

    def _layout(self, parent: Style, family: FontFamily, width: float) -> list[_Row]:
        style = parent._merged(self.style)
        return [row for element in self.elements for row in element._layout(style, family, width)]


class _LabelledList(_Element):
    def __init__(self, style: Style | None = None):
        self.items: list[_Element] = []
        self.style = style

    def _label(self, number: int) -> str:
        raise NotImplementedError

    def _layout(self, parent: Style, family: FontFamily, width: float) -> list[_Row]:
        if not self.items:
            return []
        style = parent._merged(self.style)
        font = family.font_for(style.bold, style.italic)
        labels = [self._label(number) for number in range(1, len(self.items) + 1)]
        indent = max(text_width(label, font, style._size) for label in labels) + style._size * 0.5
        if indent >= width:
            raise ValueError("list is too narrow for its labels")
        rows: list[_Row] = []
        for label, item in zip(labels, self.items):
            item_rows = item._layout(style, family, width - indent) or [_Row(style._line_height)]
            first, *rest = (row.moved(indent, 0) for row in item_rows)
            baseline = next(
                (op.y for op in first.ops if isinstance(op, _Text)), style._size * _ASCENT_FACTOR
            )
            marker = _Text(0.0, baseline, font, style._size, style._rgb, label)
            rows.append(_Row(first.height, (marker, *first.ops)))
            rows.extend(rest)
        return rows


class UnorderedList(_LabelledList):
    """Items marked with a bullet."""

    def __init__(self, bullet: str = "\u2013", style: Style | None = None):
        super().__init__(style)
        self.bullet = bullet

    def push(self, element: _Element) -> None:
        """Append a bulleted item to the list."""
        self.items.append(element)

    def _label(self, number: int) -> str:
        return self.bullet


class OrderedList(_LabelledList):
    """Items numbered from 1."""

    def push(self, element: _Element) -> None:
        """Append the next numbered item to the list."""
        self.items.append(element)

    def _label(self, number: int) -> str:
        return f"{number}."


class FramedBox(_Element):
    """An element with padding (in millimetres) and a frame, kept on one page."""

    def __init__(self, element: _Element, padding_v: float = 0.0, padding_h: float = 0.0,
                 style: Style | None = None):
        if padding_v < 0 or padding_h < 0:
            raise ValueError("padding cannot be negative")
        self.element = element
        self.padding_v = padding_v
        self.padding_h = padding_h
        self.style = style

    def _layout(self, parent: Style, family: FontFamily, width: float) -> list[_Row]:
        style = parent._merged(self.style)
        pad_v, pad_h = self.padding_v * _MM, self.padding_h * _MM
        if width - 2 * pad_h <= 0:
            raise ValueError("horizontal padding leaves no room for content")
        ops: list = []
        y = pad_v
        for row in self.element._layout(style, family, width - 2 * pad_h):
            ops.extend(row.moved(pad_h, y).ops)
            y += row.height
        height = y + pad_v
        ops.append(_Rect(0.0, 0.0, width, height, style._rgb))
        return [_Row(height, tuple(ops))]


class _Pager:
    def __init__(self, doc: Document, base: Style, width: float, page_height: float, margin: float):
        self.doc = doc
        self.base = base
        self.width = width
        self.left = margin
        self.top = margin
        self.bottom = page_height - margin
        self.pages: list[list] = []
        self.y = 0.0
        self.has_content = False
        self._new_page()

    def _new_page(self) -> None:
        self.pages.append([])
        self.y = self.top
        self.has_content = False
        if self.doc.header is not None:
            element = self.doc.header(len(self.pages))
            if element is not None:
                for row in element._layout(self.base, self.doc.font_family, self.width):
                    self._place(row)

    def _place(self, row: _Row) -> None:
        self.pages[-1].extend(row.moved(self.left, self.y).ops)
        self.y += row.height

    def add(self, row: _Row) -> None:
        if self.has_content and self.y + row.height > self.bottom:
            self._new_page()
        self._place(row)
        self.has_content = True


def _num(value: float) -> str:
    return f"{value:.2f}"


def _pdf_literal(text: str) -> bytes:
    encoded = text.encode(_ENCODING, errors="replace")
    return b"(" + re.sub(rb"([\\()])", rb"\\\1", encoded) + b")"


def _pdf_text_string(text: str) -> bytes:
    return b"<FEFF" + text.encode("utf-16-be").hex().upper().encode("ascii") + b">"


def _rgb_operands(color: Color) -> str:
    return " ".join(f"{c / 255:.3f}" for c in (color.r, color.g, color.b))


class Document:
    """A sequence of elements laid out on pages and written as PDF."""

    def __init__(
        self,
        font_family: FontFamily | None = None,
        title: str = "",
        margins: float = 10.0,
        header: Callable[[int], _Element | None] | None = None,
        style: Style | None = None,
        paper_size: tuple[float, float] = _A4_MM,
    ):
        self.font_family = font_family if font_family is not None else build_font_family()
        self.title = title
        self.margins = margins
        self.header = header
        self.style = style
        self.paper_size = paper_size
        self.elements: list[_Element] = []

    def push(self, element: _Element) -> None:
        """Append an element to the document body."""
        self.elements.append(element)

    def _layout_pages(self, page_width: float, page_height: float) -> list[list]:
        margin = self.margins * _MM
        width = page_width - 2 * margin
        if width <= 0 or page_height - 2 * margin <= 0:
            raise ValueError("margins leave no room on the page")
        base = Style()._merged(self.style)
        pager = _Pager(self, base, width, page_height, margin)
        for element in self.elements:
            for row in element._layout(base, self.font_family, width):
                pager.add(row)
        return pager.pages

    def render(self) -> bytes:
        """Lay the document out and return it as PDF bytes."""
        page_width, page_height = (d * _MM for d in self.paper_size)
        pages = self._layout_pages(page_width, page_height)

        fonts = list(dict.fromkeys(
            [self.font_family.regular]
            + [op.font for ops in pages for op in ops if isinstance(op, _Text)]
        ))
        font_names = {font: f"F{number}" for number, font in enumerate(fonts, start=1)}

        objects: list[bytes] = [b"<</Type /Catalog /Pages 2 0 R>>", b""]
        objects.append(b"<</Title " + _pdf_text_string(self.title) + b" /Producer (vex2pdf)>>")
        font_refs = []
        for font in fonts:
            objects.append(
                f"<</Type /Font /Subtype /Type1 /BaseFont /{font} /Encoding /WinAnsiEncoding>>".encode()
            )
            font_refs.append(f"/{font_names[font]} {len(objects)} 0 R")
        resources = "<</Font <<" + " ".join(font_refs) + ">>>>"

        page_refs = []
        for ops in pages:
            content = self._content_stream(ops, page_height, font_names)
            objects.append(f"<</Length {len(content)}>>\nstream\n".encode() + content + b"\nendstream")
            content_ref = len(objects)
            objects.append(
                (
                    f"<</Type /Page /Parent 2 0 R /MediaBox [0 0 {_num(page_width)} {_num(page_height)}] "
                    f"/Resources {resources} /Contents {content_ref} 0 R>>"
                ).encode()
            )
            page_refs.append(f"{len(objects)} 0 R")
        objects[1] = f"<</Type /Pages /Kids [{' '.join(page_refs)}] /Count {len(page_refs)}>>".encode()

        out = bytearray(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
        offsets = []
        for number, body in enumerate(objects, start=1):
            offsets.append(len(out))
            out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
        xref = len(out)
        out += f"xref\n0 {len(objects) + 1}\n".encode() + b"0000000000 65535 f \n"
        out += b"".join(f"{offset:010d} 00000 n \n".encode() for offset in offsets)
        out += (
            f"trailer\n<</Size {len(objects) + 1} /Root 1 0 R /Info 3 0 R>>\n"
            f"startxref\n{xref}\n%%EOF\n"
        ).encode()
        return bytes(out)

    @staticmethod
    def _content_stream(ops: list, page_height: float, font_names: dict[str, str]) -> bytes:
        parts = []
        for op in ops:
            if isinstance(op, _Text):
                parts.append(
                    (
                        f"BT /{font_names[op.font]} {_num(op.size)} Tf {_rgb_operands(op.color)} rg "
                        f"{_num(op.x)} {_num(page_height - op.y)} Td "
                    ).encode()
                    + _pdf_literal(op.text)
                    + b" Tj ET"
                )
            else:
                parts.append(
                    (
                        f"q {_rgb_operands(op.color)} RG {_FRAME_LINE_WIDTH} w "
                        f"{_num(op.x)} {_num(page_height - op.y - op.height)} "
                        f"{_num(op.width)} {_num(op.height)} re S Q"
                    ).encode()
                )
        return b"\n".join(parts)

    def render_to_file(self, path: str | Path) -> None:
        """Render the document and write it to ``path``."""
        Path(path).write_bytes(self.render())