"""Extraction strategies, one per section label.

List-style sections (Consumes, Produces, Schemes, Security) are lenient:
tokens that do not match are dropped and logged. Structured sections
(Parameters, Responses, Extensions) raise SectionError on any malformed line.
"""

import logging
import re

import yaml

from api_doc_scan.errors import SectionError
from api_doc_scan.parser.base import Parameter, Response
from api_doc_scan.parser.sections import SectionLabel, dedent

logger = logging.getLogger(__name__)

RX_LIST_MARKER = re.compile(r"^[-*]\s+")
RX_MEDIA_TYPE = re.compile(
    r"^[\w.+*!#$&^-]+/[\w.+*!#$&^-]+(?:\s*;\s*[\w.+-]+=[^;,\s]+)*$"
)
RX_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
RX_SECURITY = re.compile(r"^([A-Za-z_][\w.-]*)\s*(?::\s*(.*))?$")
RX_SCOPE = re.compile(r"^[\w.:/-]+$")
RX_TOKEN_SPLIT = re.compile(r"[\s,]+")

RX_PARAM_START = re.compile(r"^[+-]\s+(.*)$")
RX_KEY_VALUE = re.compile(r"^([A-Za-z][\w]*)\s*:\s*(.*)$")

PARAM_LOCATIONS = ("query", "path", "header", "cookie")
PARAM_TYPES = ("string", "integer", "number", "boolean", "array", "object")
SCHEMA_KEYS = ("type", "format", "default", "enum", "minimum", "maximum", "pattern")
PARAM_KEYS = ("name", "in", "description", "required", "deprecated") + SCHEMA_KEYS

SCHEMA_REF = "#/components/schemas/"
RESPONSE_REF = "#/components/responses/"


def _strip_marker(line: str) -> str:
    return RX_LIST_MARKER.sub("", line.strip())


def _scalar(value: str):
    """Coerce a raw value with YAML scalar rules: true -> True, 10 -> 10, 'a b' -> 'a b'."""
    try:
        return yaml.safe_load(value) if value else ""
    except yaml.YAMLError:
        return value


class MediaTypes:
    """Consumes / Produces: one or more media types per line."""

    def __init__(self, label: SectionLabel, setter):
        self.label = label
        self.setter = setter

    def parse(self, lines: list[str]) -> None:
        media_types = []
        for line in lines:
            for token in _strip_marker(line).split(","):
                token = token.strip()
                if not token:
                    continue
                if RX_MEDIA_TYPE.match(token):
                    media_types.append(token)
                else:
                    logger.debug("%s: dropping invalid media type %r", self.label.value, token)
        self.setter(media_types)


class Schemes:
    def __init__(self, setter):
        self.setter = setter

    def parse(self, lines: list[str]) -> None:
        schemes = []
        for line in lines:
            for token in RX_TOKEN_SPLIT.split(line.strip()):
                if not token:
                    continue
                if RX_SCHEME.match(token):
                    schemes.append(token.lower())
                else:
                    logger.debug("Schemes: dropping invalid scheme %r", token)
        self.setter(schemes)


class Security:
    """One requirement per line: ``name`` or ``name: scope1, scope2``."""

    def __init__(self, setter):
        self.setter = setter

    def parse(self, lines: list[str]) -> None:
        requirements = []
        for line in lines:
            match = RX_SECURITY.match(_strip_marker(line))
            if not match:
                logger.debug("Security: dropping invalid requirement %r", line)
                continue
            scopes = []
            for scope in RX_TOKEN_SPLIT.split(match.group(2) or ""):
                if not scope:
                    continue
                if RX_SCOPE.match(scope):
                    scopes.append(scope)
                else:
                    logger.debug("Security: dropping invalid scope %r", scope)
            requirements.append({match.group(1): scopes})
        self.setter(requirements)


class Parameters:
    """Parses ``+ name: ...`` entries followed by indented ``key: value`` lines."""

    def __init__(self, setter):
        self.setter = setter

    def parse(self, lines: list[str]) -> None:
        entries: list[tuple[str, dict]] = []
        for line in lines:
            text = line.strip()
            if not text:
                continue
            start = RX_PARAM_START.match(text)
            if start:
                entries.append((line, {}))
                text = start.group(1)
            elif not entries:
                raise SectionError(SectionLabel.PARAMETERS.value, line, "expected a '+ name: ...' entry")
            match = RX_KEY_VALUE.match(text)
            if not match:
                raise SectionError(SectionLabel.PARAMETERS.value, line, "expected 'key: value'")
            key, value = match.group(1), match.group(2).strip()
            if key not in PARAM_KEYS:
                raise SectionError(SectionLabel.PARAMETERS.value, line, f"unknown parameter field {key!r}")
            entries[-1][1][key] = value

        self.setter([self._build(line, fields) for line, fields in entries])

    def _build(self, line: str, fields: dict) -> Parameter:
        section = SectionLabel.PARAMETERS.value
        if not fields.get("name"):
            raise SectionError(section, line, "parameter is missing 'name'")
        location = fields.get("in", "").lower()
        if location not in PARAM_LOCATIONS:
            raise SectionError(section, line, f"parameter 'in' must be one of {', '.join(PARAM_LOCATIONS)}")

        flags = {}
        for key in ("required", "deprecated"):
            if key in fields:
                value = _scalar(fields[key])
                if not isinstance(value, bool):
                    raise SectionError(section, line, f"parameter {key!r} must be true or false")
                flags[key] = value

        schema = {}
        for key in SCHEMA_KEYS:
            if key not in fields:
                continue
            if key == "enum":
                schema["enum"] = [_scalar(v.strip()) for v in fields["enum"].split(",") if v.strip()]
            elif key in ("type", "format", "pattern"):
                schema[key] = fields[key]
            else:
                schema[key] = _scalar(fields[key])
        if schema.get("type", "string") not in PARAM_TYPES:
            raise SectionError(section, line, f"unsupported parameter type {schema['type']!r}")

        if location == "path":
            flags["required"] = True
        return Parameter(
            name=fields["name"],
            location=location,
            description=fields.get("description", ""),
            schema_=schema,
            **flags,
        )


class Responses:
    """Parses ``<code>: [body:Model|response:Name|Name] description`` lines."""

    def __init__(self, setter, known_responses=()):
        self.setter = setter
        self.known_responses = set(known_responses)

    def parse(self, lines: list[str]) -> None:
        section = SectionLabel.RESPONSES.value
        default = None
        status_codes: dict[int, Response] = {}
        for line in lines:
            text = line.strip()
            if not text:
                continue
            key, sep, value = text.partition(":")
            key = key.strip()
            if not sep or not key:
                raise SectionError(section, line, "expected '<status code>: <response>'")
            response = self._response(value.strip())
            if key.lower() == "default":
                if default is not None:
                    raise SectionError(section, line, "default response declared twice")
                default = response
                continue
            if not key.isdigit() or not 100 <= int(key) <= 599:
                raise SectionError(section, line, f"invalid status code {key!r}")
            code = int(key)
            if code in status_codes:
                raise SectionError(section, line, f"status code {code} declared twice")
            status_codes[code] = response

        self.setter(default, status_codes)

    def _response(self, value: str) -> Response:
        first, _, rest = value.partition(" ")
        tag, sep, target = first.partition(":")
        if sep and tag == "body" and target:
            if target.startswith("[]"):
                schema = {"type": "array", "items": {"$ref": SCHEMA_REF + target[2:]}}
            else:
                schema = {"$ref": SCHEMA_REF + target}
            return Response(description=rest.strip(), schema_=schema)
        if sep and tag == "response" and target:
            return Response(ref=RESPONSE_REF + target)
        if first in self.known_responses:
            return Response(ref=RESPONSE_REF + first)
        return Response(description=value)


class Deprecated:
    def __init__(self, setter):
        self.setter = setter

    def parse(self, lines: list[str]) -> None:
        self.setter()


class Extensions:
    """Parses ``x-name: value`` lines.

    Values are kept as written. A key with an empty value followed by lines
    indented deeper than the key takes that block as YAML, for lists and maps.
    """

    def __init__(self, setter):
        self.setter = setter

    def parse(self, lines: list[str]) -> None:
        extensions = {}
        nested = None  # (key, key line, key indent, block lines)
        for line in lines:
            indent = len(line) - len(line.lstrip())
            if nested is not None and (not line.strip() or indent > nested[2]):
                nested[3].append(line)
                continue
            if nested is not None:
                extensions[nested[0]] = _nested_value(*nested)
                nested = None
            if not line.strip():
                continue

            key, sep, value = line.strip().partition(":")
            key = key.strip()
            if not sep or not key or " " in key:
                raise SectionError(SectionLabel.EXTENSIONS.value, line, "expected 'x-name: value'")
            if not key.lower().startswith("x-"):
                raise SectionError(SectionLabel.EXTENSIONS.value, line, f"extension name {key!r} must start with 'x-'")
            value = value.strip()
            if value:
                extensions[key] = value
            else:
                nested = (key, line, indent, [])

        if nested is not None:
            extensions[nested[0]] = _nested_value(*nested)
        if extensions:
            self.setter(extensions)


def _nested_value(key: str, key_line: str, indent: int, block: list[str]):
    if not any(line.strip() for line in block):
        return ""
    try:
        return yaml.safe_load("\n".join(dedent(block)))
    except yaml.YAMLError as e:
        raise SectionError(
            SectionLabel.EXTENSIONS.value, key_line, f"invalid value for {key}: {getattr(e, 'problem', e)}"
        ) from e
