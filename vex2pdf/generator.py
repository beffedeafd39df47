"""Builds PDF vulnerability reports from CycloneDX (VEX) documents."""

from __future__ import annotations

from pathlib import Path

from .document import (
    Break,
    Color,
    Document,
    FramedBox,
    LinearLayout,
    OrderedList,
    Paragraph,
    Style,
    UnorderedList,
)
from .fonts import build_font_family
from .model import Bom, ImpactAnalysisState, Metadata, Tools, Vulnerability

DEFAULT_REPORT_TITLE = "Vulnerability Report Document"
DEFAULT_PDF_META_NAME = "VEX Vulnerability Report"

_HEADING_COLOR = Color(0, 0, 80)
_NOVULNS_COLOR = Color(0, 100, 0)


def fmt_analysis_state(state: ImpactAnalysisState | str) -> str:
    """Return the analysis state in its lowercase wire form, e.g. ``not_affected``."""
    return str(state).lower()


def _versioned(name: str, version: str | None) -> str:
    return name if version is None else f"{name} (v{version})"


class PdfGenerator:
    """Turns a Bom into a styled PDF report."""

    title_style = Style(font_size=18, color=_HEADING_COLOR)
    header_style = Style(font_size=14, color=_HEADING_COLOR)
    normal_style = Style(font_size=11)
    indent_style = Style(font_size=10, color=Color(40, 40, 40))

    def __init__(
        self,
        report_title: str | None = None,
        pdf_meta_name: str | None = None,
        show_novulns_msg: bool = True,
        show_components: bool = True,
    ) -> None:
        self.report_title = report_title
        self.pdf_meta_name = pdf_meta_name
        self.show_novulns_msg = show_novulns_msg
        self.show_components = show_components

    @property
    def document_title(self) -> str:
        """The heading on the first page and in page headers."""
        return self.report_title if self.report_title is not None else DEFAULT_REPORT_TITLE

    @property
    def pdf_title(self) -> str:
        """The title stored in the PDF metadata."""
        return self.pdf_meta_name if self.pdf_meta_name is not None else DEFAULT_PDF_META_NAME

    def _page_header(self, page: int) -> LinearLayout:
        layout = LinearLayout(style=Style(font_size=10, color=_HEADING_COLOR))
        if page > 1:
            layout.push(Paragraph(self.document_title, alignment="left"))
            layout.push(Paragraph(f"Page {page}", alignment="center"))
            layout.push(Break(2))
        return layout

    def build_document(self, vex: Bom) -> Document:
        """Lay out the report for ``vex`` without writing it anywhere."""
        doc = Document(
            font_family=build_font_family(),
            title=self.pdf_title,
            margins=10,
            header=self._page_header,
        )

        doc.push(Paragraph().add(self.document_title, self.title_style))
        doc.push(Break(1.0))

        if vex.metadata is not None:
            self._push_metadata(doc, vex.metadata)

        doc.push(Paragraph().add("BOM Format: CycloneDX", self.normal_style))
        doc.push(Paragraph().add(f"Specification Version: {vex.spec_version}", self.normal_style))
        doc.push(Paragraph().add(f"Version: {vex.version}", self.normal_style))
        if vex.serial_number is not None:
            doc.push(Paragraph().add(f"Serial Number: {vex.serial_number}", self.normal_style))
        doc.push(Break(2.0))

        vulns_available = bool(vex.vulnerabilities)
        if vulns_available or self.show_novulns_msg:
            doc.push(Paragraph().add("Vulnerabilities", self.header_style))
            doc.push(Break(1.0))

        if vex.vulnerabilities is not None:
            ordered = OrderedList()
            for vuln in vex.vulnerabilities:
                ordered.push(self._vulnerability_layout(vuln))
            doc.push(ordered)
            doc.push(Break(0.5))

        if not vulns_available and self.show_novulns_msg:
            message_style = Style().bolded().with_font_size(16).with_color(_NOVULNS_COLOR)
            doc.push(
                FramedBox(
                    Paragraph("No Vulnerabilities reported", alignment="center"),
                    padding_v=10,
                    padding_h=0,
                    style=message_style,
                )
            )
            doc.push(Break(1.0))

        if self.show_components and vex.components is not None:
            doc.push(Paragraph().add("Components", self.header_style))
            doc.push(Break(0.5))
            for component in vex.components:
                doc.push(Paragraph().add(f"Name: {component.name}", self.normal_style))
                if component.version is not None:
                    doc.push(Paragraph().add(f"Version: {component.version}", self.indent_style))
                doc.push(Break(0.5))

        return doc

    def _tool_names(self, tools: Tools) -> list[str]:
        if tools.is_list:
            return [tool.name for tool in tools.legacy if tool.name is not None]
        names = [_versioned(c.name, c.version) for c in tools.components or ()]
        names.extend(_versioned(s.name, s.version) for s in tools.services or ())
        return names

    def _push_metadata(self, doc: Document, metadata: Metadata) -> None:
        doc.push(Paragraph().add("Document Information", self.header_style))
        doc.push(Break(1))

        if metadata.timestamp is not None:
            doc.push(Paragraph().add(f"Date: {metadata.timestamp}", self.normal_style))
        doc.push(Break(1))

        if metadata.tools is not None:
            doc.push(Paragraph().add("Tools:", self.normal_style))
            tools_list = UnorderedList()
            for name in self._tool_names(metadata.tools):
                tools_list.push(Paragraph().add(name, self.indent_style))
            doc.push(tools_list)
            doc.push(Break(1))

        component = metadata.component
        if component is not None:
            doc.push(
                Paragraph()
                .add("Component name : ", self.normal_style)
                .add(component.name, self.indent_style)
            )
            if component.version is not None:
                doc.push(
                    Paragraph()
                    .add("Version: ", self.normal_style)
                    .add(component.version, self.indent_style)
                )

        doc.push(Break(1.0))

    def _vulnerability_layout(self, vuln: Vulnerability) -> LinearLayout:
        label = self.indent_style.bolded()
        layout = LinearLayout()

        if vuln.id is not None:
            layout.push(Paragraph().add("ID: ", self.normal_style).add(vuln.id, self.normal_style))
        else:
            layout.push(Paragraph().add("ID: N/A", self.normal_style))

        description = vuln.description if vuln.description is not None else "N/A"
        layout.push(Paragraph().add("Description: ", label).add(description, self.indent_style))
        layout.push(Break(0.5))

        analysis = vuln.analysis
        if analysis is not None:
            layout.push(Paragraph().add("Analysis:", label))
            if analysis.state is not None:
                layout.push(
                    Paragraph()
                    .add("  state: ", label)
                    .add(fmt_analysis_state(analysis.state), self.indent_style)
                )
            if analysis.detail:
                layout.push(
                    Paragraph().add("  detail: ", label).add(analysis.detail, self.indent_style)
                )
            if analysis.justification is not None:
                layout.push(
                    Paragraph()
                    .add("  justification: ", label)
                    .add(str(analysis.justification), self.indent_style)
                )
            layout.push(Break(0.5))

        ratings_list = UnorderedList()
        for rating in vuln.ratings or ():
            if rating.severity is None:
                continue
            method = str(rating.method) if rating.method is not None else "N/A"
            paragraph = (
                Paragraph()
                .add("Severity: ", label)
                .add(f"{rating.severity} ({method}", self.indent_style)
            )
            if rating.source is not None and rating.source.name is not None:
                paragraph.add(" \u2014 Source: ", self.indent_style).add(
                    rating.source.name, self.indent_style
                )
            paragraph.add(")", self.indent_style)
            ratings_list.push(paragraph)
        layout.push(ratings_list)
        layout.push(Break(1))
        return layout

    def generate_pdf(self, vex: Bom, output_path: str | Path) -> None:
        """Render the report for ``vex`` and write it to ``output_path``."""
        self.build_document(vex).render_to_file(output_path)