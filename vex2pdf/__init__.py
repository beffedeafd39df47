"""Convert CycloneDX (VEX) JSON or XML documents to PDF vulnerability reports."""

__version__ = "0.7.1"