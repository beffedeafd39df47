[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vex2pdf"
version = "0.7.1"
description = "Convert CycloneDX (VEX) JSON or XML documents to PDF reports"
requires-python = ">=3.10"
dependencies = [
    "defusedxml",
]
keywords = ["vex", "pdf", "security", "cyclonedx", "vulnerability", "sbom"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
vex2pdf = "vex2pdf.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["vex2pdf"]

[tool.pytest.ini_options]
addopts = "-ra"
