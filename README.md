# vex2pdf

`vex2pdf` turns CycloneDX VEX documents, in JSON or XML form, into PDF
vulnerability reports.

CycloneDX spec version 1.5 is fully supported; JSON documents declaring 1.3
or 1.4 are read as well. Version 1.6 documents are accepted as long as they
only use 1.5 fields: the tool downgrades them to 1.5 before reading them and
prints a note when it does so.

## Installation

```
pip install .
```

## Usage

Run the command in a directory that holds `.json` or `.xml` VEX files:

```
vex2pdf
```

Every file in the current directory with a `.json` or `.xml` extension (in any
letter case) is read as a CycloneDX document, JSON files first, each group in
sorted order. A PDF with the same base name and a `.pdf` extension is written
next to each one that can be read. A file that fails to parse or render is
reported and skipped, and the rest are still processed. The command takes no
arguments besides `--help`; it exits with status 1 if the working directory
cannot be read.

Each report holds:

- the report title,
- document information (timestamp, tools, main component and its version),
- BOM format, specification version, version and serial number,
- a numbered list of vulnerabilities, each with its ID, description, analysis
  (state, detail, justification) and the ratings that carry a severity,
  with their scoring method and source,
- the list of components with their versions.

From the second page on, each page starts with the report title and the page
number.

## Environment variables

| Variable | Effect | Default |
| --- | --- | --- |
| `VEX2PDF_NOVULNS_MSG` | Show a framed "No Vulnerabilities reported" message when there are none. When off, the Vulnerabilities heading is left out too. | on |
| `VEX2PDF_SHOW_COMPONENTS` | Include the Components section. | on |
| `VEX2PDF_JSON` | Process `.json` files. | on |
| `VEX2PDF_XML` | Process `.xml` files. If both this and `VEX2PDF_JSON` are off, JSON processing is switched back on with a warning. | on |
| `VEX2PDF_REPORT_TITLE` | Title shown on the first page and in page headers. | `Vulnerability Report Document` |
| `VEX2PDF_PDF_META_NAME` | Title stored in the PDF metadata, shown by PDF readers. | `VEX Vulnerability Report` |
| `VEX2PDF_VERSION_INFO` | Print the program name and version, then run normally. | off |
| `VEX2PDF_SHOW_OSS_LICENSES` | Print the version and a note on fonts, then exit without processing files. | off |

Switches count as off for `false`, `off`, `no` or `0`, in any letter case.
Any other value counts as on.

Example:

```
VEX2PDF_REPORT_TITLE="Product Security Review" VEX2PDF_SHOW_COMPONENTS=false vex2pdf
```

## Library use

```python
from vex2pdf.config import Config
from vex2pdf.cli import run

config = Config.build()   # reads the environment variables above
run(config)
```

`Config.default()` gives the out-of-the-box settings without looking at the
environment.

To render a single document:

```python
from pathlib import Path

from vex2pdf.generator import PdfGenerator
from vex2pdf.model import parse_json

bom = parse_json(Path("sample_vex.json").read_bytes())
generator = PdfGenerator("Security Analysis Results", "Product Security Report", True, True)
generator.generate_pdf(bom, "sample_vex.pdf")
```

`PdfGenerator.build_document` returns the laid-out `vex2pdf.document.Document`
without writing it; its `render()` returns the PDF as bytes.

`vex2pdf.model` provides the `Bom` data classes together with `parse_json`,
`parse_json_value`, `parse_xml`, `dump_json` and `dump_xml`. Readers raise
`BomError`, or its subclasses `UnsupportedSpecVersionError` and
`InvalidNamespaceError`. The writers always produce CycloneDX 1.5.

`vex2pdf.run_utils` holds the steps the command is made of: `find_files`,
`parse_files`, `parse_vex_json`, `parse_vex_xml` (with the 1.6 downgrade) and
`get_output_pdf_path`.

## Limitations

- Only a subset of the CycloneDX model is read: metadata (timestamp, tools,
  component), components, and vulnerabilities with their ratings and analysis.
  Other fields are ignored.
- Reports use the standard PDF Helvetica fonts; no font files are embedded.
  Text is written in the Windows-1252 character set, so characters outside it
  appear as `?`.

## Running the tests

```
pip install .[test]
pytest
```