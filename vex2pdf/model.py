"""CycloneDX bill-of-materials model with JSON and XML readers and writers."""

from __future__ import annotations

import enum
import json
import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any

from defusedxml import ElementTree as SafeET
from defusedxml.common import DefusedXmlException

BOM_FORMAT = "CycloneDX"
SUPPORTED_JSON_SPEC_VERSIONS = ("1.3", "1.4", "1.5")
OUTPUT_SPEC_VERSION = "1.5"
XML_NAMESPACE = "http://cyclonedx.org/schema/bom/1.5"


class BomError(Exception):
    """A document could not be read as a CycloneDX BOM."""


class UnsupportedSpecVersionError(BomError):
    """The document declares a spec version this reader does not handle."""

    def __init__(self, version: str) -> None:
        super().__init__(f"Unsupported Spec Version '{version}'")
        self.version = version


class InvalidNamespaceError(BomError):
    """The XML root element is not in the expected CycloneDX namespace."""

    def __init__(self, expected_namespace: str, actual_namespace: str | None) -> None:
        found = actual_namespace if actual_namespace is not None else "no namespace"
        super().__init__(f"Expected namespace `{expected_namespace}` but found `{found}`")
        self.expected_namespace = expected_namespace
        self.actual_namespace = actual_namespace


class _WireEnum(enum.Enum):
    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str):
        """Return the matching member, or the raw string if none matches."""
        try:
            return cls(value)
        except ValueError:
            return value


class Severity(_WireEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"
    NONE = "none"
    UNKNOWN = "unknown"


class ScoreMethod(_WireEnum):
    CVSS_V2 = "CVSSv2"
    CVSS_V3 = "CVSSv3"
    CVSS_V31 = "CVSSv31"
    CVSS_V4 = "CVSSv4"
    OWASP = "OWASP"
    SSVC = "SSVC"
    OTHER = "other"


class ImpactAnalysisState(_WireEnum):
    RESOLVED = "resolved"
    RESOLVED_WITH_PEDIGREE = "resolved_with_pedigree"
    EXPLOITABLE = "exploitable"
    IN_TRIAGE = "in_triage"
    FALSE_POSITIVE = "false_positive"
    NOT_AFFECTED = "not_affected"


class ImpactAnalysisJustification(_WireEnum):
    CODE_NOT_PRESENT = "code_not_present"
    CODE_NOT_REACHABLE = "code_not_reachable"
    REQUIRES_CONFIGURATION = "requires_configuration"
    REQUIRES_DEPENDENCY = "requires_dependency"
    REQUIRES_ENVIRONMENT = "requires_environment"
    PROTECTED_BY_COMPILER = "protected_by_compiler"
    PROTECTED_AT_RUNTIME = "protected_at_runtime"
    PROTECTED_AT_PERIMETER = "protected_at_perimeter"
    PROTECTED_BY_MITIGATING_CONTROL = "protected_by_mitigating_control"


@dataclass
class VulnerabilitySource:
    name: str | None = None
    url: str | None = None


@dataclass
class VulnerabilityRating:
    score: float | None = None
    severity: Severity | str | None = None
    method: ScoreMethod | str | None = None
    vector: str | None = None
    source: VulnerabilitySource | None = None
    justification: str | None = None


@dataclass
class VulnerabilityAnalysis:
    state: ImpactAnalysisState | str | None = None
    justification: ImpactAnalysisJustification | str | None = None
    responses: list[str] | None = None
    detail: str | None = None


@dataclass
class Vulnerability:
    bom_ref: str | None = None
    id: str | None = None
    source: VulnerabilitySource | None = None
    ratings: list[VulnerabilityRating] | None = None
    cwes: list[int] | None = None
    description: str | None = None
    detail: str | None = None
    recommendation: str | None = None
    workaround: str | None = None
    created: str | None = None
    published: str | None = None
    updated: str | None = None
    analysis: VulnerabilityAnalysis | None = None


@dataclass
class Component:
    name: str
    version: str | None = None
    component_type: str = "library"
    bom_ref: str | None = None
    description: str | None = None
    purl: str | None = None


@dataclass
class Service:
    name: str
    version: str | None = None
    bom_ref: str | None = None
    description: str | None = None


@dataclass
class Tool:
    vendor: str | None = None
    name: str | None = None
    version: str | None = None


@dataclass
class Tools:
    """Tools used to make the BOM: a legacy list, or components and services."""

    legacy: list[Tool] | None = None
    components: list[Component] | None = None
    services: list[Service] | None = None

    @property
    def is_list(self) -> bool:
        return self.legacy is not None


@dataclass
class Metadata:
    timestamp: str | None = None
    tools: Tools | None = None
    component: Component | None = None


def _new_serial_number() -> str:
    return f"urn:uuid:{uuid.uuid4()}"


@dataclass
class Bom:
    spec_version: str = OUTPUT_SPEC_VERSION
    version: int = 1
    serial_number: str | None = field(default_factory=_new_serial_number)
    metadata: Metadata | None = None
    components: list[Component] | None = None
    vulnerabilities: list[Vulnerability] | None = None


# ---------------------------------------------------------------- JSON reading


def _as_obj(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise BomError(f"{what} must be an object")
    return value


def _str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise BomError(f"field '{key}' must be a string")


def _required_str(data: dict, key: str, what: str) -> str:
    value = _str(data, key)
    if value is None:
        raise BomError(f"{what} is missing field '{key}'")
    return value


def _obj(data: dict, key: str) -> dict | None:
    value = data.get(key)
    if value is None:
        return None
    return _as_obj(value, f"field '{key}'")


def _list(data: dict, key: str, parse) -> list | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise BomError(f"field '{key}' must be an array")
    return [parse(item) for item in value]


def _int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise BomError(f"{what} must be an integer")
    return value


def _enum(cls, value: str | None):
    return None if value is None else cls.parse(value)


def _string_item(value: Any) -> str:
    if not isinstance(value, str):
        raise BomError("array item must be a string")
    return value


def _component_from_json(value: Any) -> Component:
    data = _as_obj(value, "component")
    return Component(
        name=_required_str(data, "name", "component"),
        version=_str(data, "version"),
        component_type=_required_str(data, "type", "component"),
        bom_ref=_str(data, "bom-ref"),
        description=_str(data, "description"),
        purl=_str(data, "purl"),
    )


def _service_from_json(value: Any) -> Service:
    data = _as_obj(value, "service")
    return Service(
        name=_required_str(data, "name", "service"),
        version=_str(data, "version"),
        bom_ref=_str(data, "bom-ref"),
        description=_str(data, "description"),
    )


def _tool_from_json(value: Any) -> Tool:
    data = _as_obj(value, "tool")
    return Tool(vendor=_str(data, "vendor"), name=_str(data, "name"), version=_str(data, "version"))


def _tools_from_json(value: Any) -> Tools:
    if isinstance(value, list):
        return Tools(legacy=[_tool_from_json(item) for item in value])
    data = _as_obj(value, "tools")
    return Tools(
        components=_list(data, "components", _component_from_json),
        services=_list(data, "services", _service_from_json),
    )


def _metadata_from_json(data: dict) -> Metadata:
    tools = data.get("tools")
    component = _obj(data, "component")
    return Metadata(
        timestamp=_str(data, "timestamp"),
        tools=None if tools is None else _tools_from_json(tools),
        component=None if component is None else _component_from_json(component),
    )


def _source_from_json(data: dict | None) -> VulnerabilitySource | None:
    if data is None:
        return None
    return VulnerabilitySource(name=_str(data, "name"), url=_str(data, "url"))


def _rating_from_json(value: Any) -> VulnerabilityRating:
    data = _as_obj(value, "rating")
    score = data.get("score")
    if score is not None and (isinstance(score, bool) or not isinstance(score, (int, float))):
        raise BomError("field 'score' must be a number")
    return VulnerabilityRating(
        score=None if score is None else float(score),
        severity=_enum(Severity, _str(data, "severity")),
        method=_enum(ScoreMethod, _str(data, "method")),
        vector=_str(data, "vector"),
        source=_source_from_json(_obj(data, "source")),
        justification=_str(data, "justification"),
    )


def _analysis_from_json(data: dict | None) -> VulnerabilityAnalysis | None:
    if data is None:
        return None
    return VulnerabilityAnalysis(
        state=_enum(ImpactAnalysisState, _str(data, "state")),
        justification=_enum(ImpactAnalysisJustification, _str(data, "justification")),
        responses=_list(data, "response", _string_item),
        detail=_str(data, "detail"),
    )


def _vulnerability_from_json(value: Any) -> Vulnerability:
    data = _as_obj(value, "vulnerability")
    return Vulnerability(
        bom_ref=_str(data, "bom-ref"),
        id=_str(data, "id"),
        source=_source_from_json(_obj(data, "source")),
        ratings=_list(data, "ratings", _rating_from_json),
        cwes=_list(data, "cwes", lambda item: _int(item, "cwe")),
        description=_str(data, "description"),
        detail=_str(data, "detail"),
        recommendation=_str(data, "recommendation"),
        workaround=_str(data, "workaround"),
        created=_str(data, "created"),
        published=_str(data, "published"),
        updated=_str(data, "updated"),
        analysis=_analysis_from_json(_obj(data, "analysis")),
    )


def parse_json_value(value: Any) -> Bom:
    """Build a Bom from an already decoded JSON value."""
    data = _as_obj(value, "BOM")
    spec_version = data.get("specVersion")
    if spec_version is None:
        raise BomError("No field 'specVersion' found")
    if not isinstance(spec_version, str):
        raise BomError("field 'specVersion' must be a string")
    if spec_version not in SUPPORTED_JSON_SPEC_VERSIONS:
        raise UnsupportedSpecVersionError(spec_version)
    if data.get("bomFormat") != BOM_FORMAT:
        raise BomError(f"field 'bomFormat' must be '{BOM_FORMAT}'")
    version = _int(data.get("version", 1), "field 'version'")
    if version < 0:
        raise BomError("field 'version' must not be negative")
    metadata = _obj(data, "metadata")
    return Bom(
        spec_version=spec_version,
        version=version,
        serial_number=_str(data, "serialNumber"),
        metadata=None if metadata is None else _metadata_from_json(metadata),
        components=_list(data, "components", _component_from_json),
        vulnerabilities=_list(data, "vulnerabilities", _vulnerability_from_json),
    )


def parse_json(data: str | bytes | Any) -> Bom:
    """Parse a CycloneDX JSON document from text, bytes or a readable file."""
    if hasattr(data, "read"):
        data = data.read()
    try:
        value = json.loads(data)
    except ValueError as exc:
        raise BomError(f"invalid JSON: {exc}") from exc
    return parse_json_value(value)


# ----------------------------------------------------------------- XML reading


def _q(name: str) -> str:
    return f"{{{XML_NAMESPACE}}}{name}"


def _split_tag(tag: str) -> tuple[str | None, str]:
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


def _xtext(elem: ET.Element, name: str) -> str | None:
    child = elem.find(_q(name))
    if child is None:
        return None
    return child.text or ""


def _xrequired(elem: ET.Element, name: str, what: str) -> str:
    value = _xtext(elem, name)
    if value is None:
        raise BomError(f"{what} is missing element '{name}'")
    return value


def _xitems(elem: ET.Element, container: str, item: str) -> list[ET.Element] | None:
    parent = elem.find(_q(container))
    if parent is None:
        return None
    return parent.findall(_q(item))


def _component_from_xml(elem: ET.Element) -> Component:
    component_type = elem.get("type")
    if component_type is None:
        raise BomError("component is missing attribute 'type'")
    return Component(
        name=_xrequired(elem, "name", "component"),
        version=_xtext(elem, "version"),
        component_type=component_type,
        bom_ref=elem.get("bom-ref"),
        description=_xtext(elem, "description"),
        purl=_xtext(elem, "purl"),
    )


def _service_from_xml(elem: ET.Element) -> Service:
    return Service(
        name=_xrequired(elem, "name", "service"),
        version=_xtext(elem, "version"),
        bom_ref=elem.get("bom-ref"),
        description=_xtext(elem, "description"),
    )


def _tools_from_xml(elem: ET.Element) -> Tools:
    tools = elem.findall(_q("tool"))
    components = _xitems(elem, "components", "component")
    services = _xitems(elem, "services", "service")
    if tools or (components is None and services is None):
        return Tools(
            legacy=[
                Tool(vendor=_xtext(t, "vendor"), name=_xtext(t, "name"), version=_xtext(t, "version"))
                for t in tools
            ]
        )
    return Tools(
        components=None if components is None else [_component_from_xml(c) for c in components],
        services=None if services is None else [_service_from_xml(s) for s in services],
    )


def _metadata_from_xml(elem: ET.Element) -> Metadata:
    tools = elem.find(_q("tools"))
    component = elem.find(_q("component"))
    return Metadata(
        timestamp=_xtext(elem, "timestamp"),
        tools=None if tools is None else _tools_from_xml(tools),
        component=None if component is None else _component_from_xml(component),
    )


def _source_from_xml(elem: ET.Element | None) -> VulnerabilitySource | None:
    if elem is None:
        return None
    return VulnerabilitySource(name=_xtext(elem, "name"), url=_xtext(elem, "url"))


def _rating_from_xml(elem: ET.Element) -> VulnerabilityRating:
    score_text = _xtext(elem, "score")
    try:
        score = None if score_text is None else float(score_text)
    except ValueError as exc:
        raise BomError(f"invalid score '{score_text}'") from exc
    return VulnerabilityRating(
        score=score,
        severity=_enum(Severity, _xtext(elem, "severity")),
        method=_enum(ScoreMethod, _xtext(elem, "method")),
        vector=_xtext(elem, "vector"),
        source=_source_from_xml(elem.find(_q("source"))),
        justification=_xtext(elem, "justification"),
    )


def _analysis_from_xml(elem: ET.Element | None) -> VulnerabilityAnalysis | None:
    if elem is None:
        return None
    responses = _xitems(elem, "responses", "response")
    return VulnerabilityAnalysis(
        state=_enum(ImpactAnalysisState, _xtext(elem, "state")),
        justification=_enum(ImpactAnalysisJustification, _xtext(elem, "justification")),
        responses=None if responses is None else [r.text or "" for r in responses],
        detail=_xtext(elem, "detail"),
    )


def _cwe_from_xml(elem: ET.Element) -> int:
    try:
        return int(elem.text or "")
    except ValueError as exc:
        raise BomError(f"invalid cwe '{elem.text}'") from exc


def _vulnerability_from_xml(elem: ET.Element) -> Vulnerability:
    ratings = _xitems(elem, "ratings", "rating")
    cwes = _xitems(elem, "cwes", "cwe")
    return Vulnerability(
        bom_ref=elem.get("bom-ref"),
        id=_xtext(elem, "id"),
        source=_source_from_xml(elem.find(_q("source"))),
        ratings=None if ratings is None else [_rating_from_xml(r) for r in ratings],
        cwes=None if cwes is None else [_cwe_from_xml(c) for c in cwes],
        description=_xtext(elem, "description"),
        detail=_xtext(elem, "detail"),
        recommendation=_xtext(elem, "recommendation"),
        workaround=_xtext(elem, "workaround"),
        created=_xtext(elem, "created"),
        published=_xtext(elem, "published"),
        updated=_xtext(elem, "updated"),
        analysis=_analysis_from_xml(elem.find(_q("analysis"))),
    )


def parse_xml(data: str | bytes | Any) -> Bom:
    """Parse a CycloneDX 1.5 XML document from text, bytes or a readable file."""
    if hasattr(data, "read"):
        data = data.read()
    try:
        root = SafeET.fromstring(data)
    except (ET.ParseError, DefusedXmlException) as exc:
        raise BomError(f"invalid XML: {exc}") from exc
    namespace, local = _split_tag(root.tag)
    if namespace != XML_NAMESPACE:
        raise InvalidNamespaceError(XML_NAMESPACE, namespace)
    if local != "bom":
        raise BomError(f"expected root element 'bom', found '{local}'")
    version_text = root.get("version", "1")
    try:
        version = int(version_text)
    except ValueError as exc:
        raise BomError(f"invalid version '{version_text}'") from exc
    if version < 0:
        raise BomError("attribute 'version' must not be negative")
    metadata = root.find(_q("metadata"))
    components = _xitems(root, "components", "component")
    vulnerabilities = _xitems(root, "vulnerabilities", "vulnerability")
    return Bom(
        spec_version=OUTPUT_SPEC_VERSION,
        version=version,
        serial_number=root.get("serialNumber"),
        metadata=None if metadata is None else _metadata_from_xml(metadata),
        components=None if components is None else [_component_from_xml(c) for c in components],
        vulnerabilities=None
        if vulnerabilities is None
        else [_vulnerability_from_xml(v) for v in vulnerabilities],
    )


# ---------------------------------------------------------------- JSON writing


def _compact(**fields: Any) -> dict:
    return {key: value for key, value in fields.items() if value is not None}


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _component_to_json(c: Component) -> dict:
    return _compact(
        type=c.component_type,
        **{"bom-ref": c.bom_ref},
        name=c.name,
        version=c.version,
        description=c.description,
        purl=c.purl,
    )


def _service_to_json(s: Service) -> dict:
    return _compact(**{"bom-ref": s.bom_ref}, name=s.name, version=s.version, description=s.description)


def _tools_to_json(tools: Tools) -> list | dict:
    if tools.legacy is not None:
        return [_compact(vendor=t.vendor, name=t.name, version=t.version) for t in tools.legacy]
    return _compact(
        components=None if tools.components is None else [_component_to_json(c) for c in tools.components],
        services=None if tools.services is None else [_service_to_json(s) for s in tools.services],
    )


def _source_to_json(source: VulnerabilitySource | None) -> dict | None:
    return None if source is None else _compact(name=source.name, url=source.url)


def _vulnerability_to_json(v: Vulnerability) -> dict:
    ratings = None
    if v.ratings is not None:
        ratings = [
            _compact(
                source=_source_to_json(r.source),
                score=r.score,
                severity=_text(r.severity),
                method=_text(r.method),
                vector=r.vector,
                justification=r.justification,
            )
            for r in v.ratings
        ]
    analysis = None
    if v.analysis is not None:
        analysis = _compact(
            state=_text(v.analysis.state),
            justification=_text(v.analysis.justification),
            response=v.analysis.responses,
            detail=v.analysis.detail,
        )
    return _compact(
        **{"bom-ref": v.bom_ref},
        id=v.id,
        source=_source_to_json(v.source),
        ratings=ratings,
        cwes=v.cwes,
        description=v.description,
        detail=v.detail,
        recommendation=v.recommendation,
        workaround=v.workaround,
        created=v.created,
        published=v.published,
        updated=v.updated,
        analysis=analysis,
    )


def dump_json(bom: Bom) -> str:
    """Serialise a Bom as a CycloneDX 1.5 JSON document."""
    metadata = None
    if bom.metadata is not None:
        m = bom.metadata
        metadata = _compact(
            timestamp=m.timestamp,
            tools=None if m.tools is None else _tools_to_json(m.tools),
            component=None if m.component is None else _component_to_json(m.component),
        )
    document = _compact(
        bomFormat=BOM_FORMAT,
        specVersion=OUTPUT_SPEC_VERSION,
        serialNumber=bom.serial_number,
        version=bom.version,
        metadata=metadata,
        components=None if bom.components is None else [_component_to_json(c) for c in bom.components],
        vulnerabilities=None
        if bom.vulnerabilities is None
        else [_vulnerability_to_json(v) for v in bom.vulnerabilities],
    )
    return json.dumps(document, indent=2)


# ----------------------------------------------------------------- XML writing


def _xsub(parent: ET.Element, name: str, value: Any) -> ET.Element | None:
    if value is None:
        return None
    child = ET.SubElement(parent, _q(name))
    child.text = str(value)
    return child


def _component_to_xml(parent: ET.Element, c: Component) -> None:
    elem = ET.SubElement(parent, _q("component"), {"type": c.component_type})
    if c.bom_ref is not None:
        elem.set("bom-ref", c.bom_ref)
    _xsub(elem, "name", c.name)
    _xsub(elem, "version", c.version)
    _xsub(elem, "description", c.description)
    _xsub(elem, "purl", c.purl)


def _service_to_xml(parent: ET.Element, s: Service) -> None:
    elem = ET.SubElement(parent, _q("service"))
    if s.bom_ref is not None:
        elem.set("bom-ref", s.bom_ref)
    _xsub(elem, "name", s.name)
    _xsub(elem, "version", s.version)
    _xsub(elem, "description", s.description)


def _tools_to_xml(parent: ET.Element, tools: Tools) -> None:
    elem = ET.SubElement(parent, _q("tools"))
    if tools.legacy is not None:
        for tool in tools.legacy:
            tool_elem = ET.SubElement(elem, _q("tool"))
            _xsub(tool_elem, "vendor", tool.vendor)
            _xsub(tool_elem, "name", tool.name)
            _xsub(tool_elem, "version", tool.version)
        return
    if tools.components is not None:
        container = ET.SubElement(elem, _q("components"))
        for component in tools.components:
            _component_to_xml(container, component)
    if tools.services is not None:
        container = ET.SubElement(elem, _q("services"))
        for service in tools.services:
            _service_to_xml(container, service)


def _source_to_xml(parent: ET.Element, source: VulnerabilitySource | None) -> None:
    if source is None:
        return
    elem = ET.SubElement(parent, _q("source"))
    _xsub(elem, "name", source.name)
    _xsub(elem, "url", source.url)


def _vulnerability_to_xml(parent: ET.Element, v: Vulnerability) -> None:
    elem = ET.SubElement(parent, _q("vulnerability"))
    if v.bom_ref is not None:
        elem.set("bom-ref", v.bom_ref)
    _xsub(elem, "id", v.id)
    _source_to_xml(elem, v.source)
    if v.ratings is not None:
        ratings = ET.SubElement(elem, _q("ratings"))
        for r in v.ratings:
            rating = ET.SubElement(ratings, _q("rating"))
            _source_to_xml(rating, r.source)
            _xsub(rating, "score", r.score)
            _xsub(rating, "severity", r.severity)
            _xsub(rating, "method", r.method)
            _xsub(rating, "vector", r.vector)
            _xsub(rating, "justification", r.justification)
    if v.cwes is not None:
        cwes = ET.SubElement(elem, _q("cwes"))
        for cwe in v.cwes:
            _xsub(cwes, "cwe", cwe)
    for name in ("description", "detail", "recommendation", "workaround", "created", "published", "updated"):
        _xsub(elem, name, getattr(v, name))
    if v.analysis is not None:
        analysis = ET.SubElement(elem, _q("analysis"))
        _xsub(analysis, "state", v.analysis.state)
        _xsub(analysis, "justification", v.analysis.justification)
        if v.analysis.responses is not None:
            responses = ET.SubElement(analysis, _q("responses"))
            for response in v.analysis.responses:
                _xsub(responses, "response", response)
        _xsub(analysis, "detail", v.analysis.detail)


def dump_xml(bom: Bom) -> str:
    """Serialise a Bom as a CycloneDX 1.5 XML document."""
    root = ET.Element(_q("bom"))
    if bom.serial_number is not None:
        root.set("serialNumber", bom.serial_number)
    root.set("version", str(bom.version))
    if bom.metadata is not None:
        metadata = ET.SubElement(root, _q("metadata"))
        _xsub(metadata, "timestamp", bom.metadata.timestamp)
        if bom.metadata.tools is not None:
            _tools_to_xml(metadata, bom.metadata.tools)
        if bom.metadata.component is not None:
            _component_to_xml(metadata, bom.metadata.component)
    if bom.components is not None:
        components = ET.SubElement(root, _q("components"))
        for component in bom.components:
            _component_to_xml(components, component)
    if bom.vulnerabilities is not None:
        vulnerabilities = ET.SubElement(root, _q("vulnerabilities"))
        for vulnerability in bom.vulnerabilities:
            _vulnerability_to_xml(vulnerabilities, vulnerability)
    body = ET.tostring(root, encoding="unicode", default_namespace=XML_NAMESPACE)
    return '<?xml version="1.0" encoding="utf-8"?>\n' + body