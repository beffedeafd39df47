import json

import pytest

from vex2pdf.model import (
    Bom,
    BomError,
    Component,
    ImpactAnalysisJustification,
    ImpactAnalysisState,
    InvalidNamespaceError,
    Metadata,
    ScoreMethod,
    Service,
    Severity,
    Tool,
    Tools,
    UnsupportedSpecVersionError,
    Vulnerability,
    VulnerabilityAnalysis,
    VulnerabilityRating,
    VulnerabilitySource,
    dump_json,
    dump_xml,
    parse_json,
    parse_json_value,
    parse_xml,
)

SERIAL = "urn:uuid:3e671687-395b-41f5-a30f-a58921a69b79"
NS_15 = "http://cyclonedx.org/schema/bom/1.5"
NS_16 = "http://cyclonedx.org/schema/bom/1.6"


@pytest.fixture
def sample_vex():
    return Bom(
        spec_version="1.5",
        version=1,
        serial_number=SERIAL,
        metadata=Metadata(
            timestamp="2025-01-01T00:00:00Z",
            tools=Tools(legacy=[Tool(name="my_tool")]),
        ),
        vulnerabilities=[
            Vulnerability(
                description="Known vulnerability in library that allows unauthorized access",
                detail="Detailed explanation of the vulnerability and its potential impact.",
                recommendation="Upgrade to version 1.2.4 or later",
                ratings=[
                    VulnerabilityRating(
                        score=8.1,
                        severity=Severity.HIGH,
                        method=ScoreMethod.CVSS_V31,
                        vector="CVSS:3.1/AV:N/AC:L/PR:N/UI:R/S:U/C:H/I:H/A:H",
                    )
                ],
            ),
            Vulnerability(
                description="Component does not use the affected library",
                detail="Detailed explanation of the vulnerability and its potential impact.",
                recommendation="Upgrade to version 1.2.3 or later",
                ratings=[
                    VulnerabilityRating(
                        score=6.5,
                        severity=Severity.HIGH,
                        method=ScoreMethod.CVSS_V31,
                        vector="CVSS:3.1/AV:N/AC:L/PR:L/UI:N/S:U/C:L/I:L/A:L",
                    )
                ],
            ),
        ],
    )


@pytest.fixture
def rich_vex(sample_vex):
    sample_vex.metadata.component = Component(name="app", version="2.0", bom_ref="app-ref")
    sample_vex.components = [Component(name="lib", version="1.2.3", purl="pkg:generic/lib@1.2.3")]
    sample_vex.vulnerabilities[0].id = "CVE-2025-0001"
    sample_vex.vulnerabilities[0].cwes = [79, 89]
    sample_vex.vulnerabilities[0].source = VulnerabilitySource(name="NVD", url="https://nvd.example.com")
    sample_vex.vulnerabilities[0].analysis = VulnerabilityAnalysis(
        state=ImpactAnalysisState.NOT_AFFECTED,
        justification=ImpactAnalysisJustification.CODE_NOT_REACHABLE,
        responses=["will_not_fix"],
        detail="not reachable",
    )
    return sample_vex


def test_vex_serialization(sample_vex):
    parsed = parse_json_value(json.loads(dump_json(sample_vex)))
    assert parsed.serial_number == sample_vex.serial_number
    assert parsed.spec_version == sample_vex.spec_version


def test_vex_json_file_io(sample_vex, tmp_path):
    path = tmp_path / "test_vex.json"
    path.write_text(dump_json(sample_vex), encoding="utf-8")
    with path.open("rb") as handle:
        loaded = parse_json(handle)
    assert loaded.serial_number == sample_vex.serial_number


def test_vex_xml_file_io(sample_vex, tmp_path):
    path = tmp_path / "test_vex.xml"
    path.write_text(dump_xml(sample_vex), encoding="utf-8")
    with path.open("rb") as handle:
        loaded = parse_xml(handle)
    assert loaded.serial_number == sample_vex.serial_number


def test_generate_sample_file(sample_vex, tmp_path):
    path = tmp_path / "sample_vex.json"
    path.write_text(dump_json(sample_vex), encoding="utf-8")
    assert parse_json(path.read_bytes()) == sample_vex


def test_json_full_round_trip(rich_vex):
    assert parse_json(dump_json(rich_vex)) == rich_vex


def test_xml_full_round_trip(rich_vex):
    assert parse_xml(dump_xml(rich_vex).encode("utf-8")) == rich_vex


def test_tools_object_round_trip(sample_vex):
    sample_vex.metadata.tools = Tools(
        components=[Component(name="scanner", version="3.1")],
        services=[Service(name="api", version="1")],
    )
    for loaded in (parse_json(dump_json(sample_vex)), parse_xml(dump_xml(sample_vex))):
        assert loaded.metadata.tools == sample_vex.metadata.tools
        assert loaded.metadata.tools.is_list is False


def test_json_output_fields(sample_vex):
    document = json.loads(dump_json(sample_vex))
    assert document["bomFormat"] == "CycloneDX"
    assert document["specVersion"] == "1.5"
    assert document["serialNumber"] == SERIAL
    assert document["vulnerabilities"][0]["ratings"][0]["method"] == "CVSSv31"
    assert document["vulnerabilities"][0]["ratings"][0]["severity"] == "high"


def test_xml_output_namespace(sample_vex):
    assert NS_15 in dump_xml(sample_vex)


def test_json_spec_16_unsupported(sample_vex):
    document = json.loads(dump_json(sample_vex))
    document["specVersion"] = "1.6"
    with pytest.raises(UnsupportedSpecVersionError) as info:
        parse_json(json.dumps(document))
    assert info.value.version == "1.6"
    document["specVersion"] = "1.5"
    assert parse_json_value(document).serial_number == SERIAL


def test_json_missing_spec_version():
    with pytest.raises(BomError, match="specVersion"):
        parse_json('{"bomFormat": "CycloneDX"}')


def test_json_invalid_text():
    with pytest.raises(BomError):
        parse_json("{not json")


def test_json_wrong_bom_format():
    with pytest.raises(BomError):
        parse_json('{"bomFormat": "SPDX", "specVersion": "1.5"}')


def test_json_component_requires_name():
    document = {"bomFormat": "CycloneDX", "specVersion": "1.5", "components": [{"type": "library"}]}
    with pytest.raises(BomError):
        parse_json_value(document)


def test_json_version_defaults_to_one():
    bom = parse_json('{"bomFormat": "CycloneDX", "specVersion": "1.4"}')
    assert bom.version == 1
    assert bom.spec_version == "1.4"
    assert bom.vulnerabilities is None


def test_unknown_severity_kept_as_text():
    document = {
        "bomFormat": "CycloneDX",
        "specVersion": "1.5",
        "vulnerabilities": [{"ratings": [{"severity": "catastrophic"}]}],
    }
    bom = parse_json_value(document)
    assert bom.vulnerabilities[0].ratings[0].severity == "catastrophic"


def test_xml_namespace_16_rejected_then_accepted(sample_vex):
    text = dump_xml(sample_vex).replace(NS_15, NS_16)
    with pytest.raises(InvalidNamespaceError) as info:
        parse_xml(text)
    assert info.value.expected_namespace == NS_15
    assert info.value.actual_namespace == NS_16
    fixed = text.replace(info.value.actual_namespace, info.value.expected_namespace)
    assert parse_xml(fixed).serial_number == SERIAL


def test_xml_without_namespace():
    with pytest.raises(InvalidNamespaceError) as info:
        parse_xml("<bom version='1'/>")
    assert info.value.actual_namespace is None


def test_xml_malformed():
    with pytest.raises(BomError):
        parse_xml("<bom")


def test_bom_defaults():
    bom = Bom()
    assert bom.spec_version == "1.5"
    assert bom.version == 1
    assert bom.serial_number.startswith("urn:uuid:")