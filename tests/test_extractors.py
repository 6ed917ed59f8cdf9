import pytest

from api_doc_scan.errors import SectionError
from api_doc_scan.parser import extractors
from api_doc_scan.parser.sections import SectionLabel


class Capture:
    def __init__(self):
        self.values = []

    def __call__(self, *args):
        self.values.append(args if len(args) > 1 else (args[0] if args else None))


class TestMediaTypes:
    def test_valid_media_types(self):
        cap = Capture()
        extractors.MediaTypes(SectionLabel.PRODUCES, cap).parse(
            ["- application/json", "application/xml, text/plain; charset=utf-8"]
        )
        assert cap.values == [["application/json", "application/xml", "text/plain; charset=utf-8"]]

    def test_invalid_tokens_dropped(self):
        cap = Capture()
        extractors.MediaTypes(SectionLabel.CONSUMES, cap).parse(["application/json", "not a media type", "json"])
        assert cap.values == [["application/json"]]


class TestSchemes:
    def test_space_and_comma_separated(self):
        cap = Capture()
        extractors.Schemes(cap).parse(["http https, WS"])
        assert cap.values == [["http", "https", "ws"]]

    def test_invalid_scheme_dropped(self):
        cap = Capture()
        extractors.Schemes(cap).parse(["http 9bad"])
        assert cap.values == [["http"]]


class TestSecurity:
    def test_requirements_with_and_without_scopes(self):
        cap = Capture()
        extractors.Security(cap).parse(["api_key:", "- oauth2: read:pets, write:pets", "bearer"])
        assert cap.values == [[{"api_key": []}, {"oauth2": ["read:pets", "write:pets"]}, {"bearer": []}]]

    def test_invalid_line_dropped(self):
        cap = Capture()
        extractors.Security(cap).parse(["!!!", "api_key"])
        assert cap.values == [[{"api_key": []}]]


class TestParameters:
    def test_entries_parsed(self):
        cap = Capture()
        extractors.Parameters(cap).parse([
            "+ name: limit",
            "  in: query",
            "  description: maximum number of items",
            "  type: integer",
            "  minimum: 1",
            "  default: 20",
            "",
            "+ name: id",
            "  in: path",
            "  type: string",
            "  enum: a, b",
        ])
        params = cap.values[0]
        assert [p.name for p in params] == ["limit", "id"]
        limit, pid = params
        assert limit.location == "query"
        assert limit.required is False
        assert limit.description == "maximum number of items"
        assert limit.schema_ == {"type": "integer", "default": 20, "minimum": 1}
        assert pid.required is True
        assert pid.schema_ == {"type": "string", "enum": ["a", "b"]}

    def test_required_flag(self):
        cap = Capture()
        extractors.Parameters(cap).parse(["+ name: X-Trace", "  in: header", "  required: true"])
        assert cap.values[0][0].required is True

    def test_content_before_first_entry(self):
        with pytest.raises(SectionError) as exc:
            extractors.Parameters(Capture()).parse(["in: query"])
        assert exc.value.section == "Parameters"
        assert exc.value.line == "in: query"

    def test_line_without_colon(self):
        with pytest.raises(SectionError) as exc:
            extractors.Parameters(Capture()).parse(["+ name: limit", "  in query"])
        assert exc.value.line == "  in query"

    def test_unknown_field(self):
        with pytest.raises(SectionError, match="unknown parameter field"):
            extractors.Parameters(Capture()).parse(["+ name: limit", "  colour: red"])

    def test_missing_location(self):
        with pytest.raises(SectionError, match="'in'"):
            extractors.Parameters(Capture()).parse(["+ name: limit"])

    def test_bad_type(self):
        with pytest.raises(SectionError, match="unsupported parameter type"):
            extractors.Parameters(Capture()).parse(["+ name: limit", "  in: query", "  type: int64"])

    def test_non_boolean_required(self):
        with pytest.raises(SectionError, match="true or false"):
            extractors.Parameters(Capture()).parse(["+ name: limit", "  in: query", "  required: maybe"])


class TestResponses:
    def test_default_and_status_codes(self):
        cap = Capture()
        extractors.Responses(cap, known_responses=["genericError"]).parse([
            "200: body:[]Pet the pets",
            "",
            "404: response:notFound",
            "default: genericError",
            "204: deleted without content",
        ])
        default, codes = cap.values[0]
        assert default.ref == "#/components/responses/genericError"
        assert set(codes) == {200, 404, 204}
        assert codes[200].description == "the pets"
        assert codes[200].schema_ == {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
        assert codes[404].ref == "#/components/responses/notFound"
        assert codes[204].description == "deleted without content"

    def test_body_schema_ref(self):
        cap = Capture()
        extractors.Responses(cap).parse(["201: body:Pet"])
        _, codes = cap.values[0]
        assert codes[201].schema_ == {"$ref": "#/components/schemas/Pet"}
        assert codes[201].description == ""

    def test_unknown_bare_name_is_description(self):
        cap = Capture()
        extractors.Responses(cap).parse(["default: genericError"])
        default, codes = cap.values[0]
        assert default.ref is None
        assert default.description == "genericError"
        assert codes == {}

    def test_missing_colon(self):
        with pytest.raises(SectionError) as exc:
            extractors.Responses(Capture()).parse(["200 ok"])
        assert exc.value.section == "Responses"

    def test_invalid_status_code(self):
        with pytest.raises(SectionError, match="invalid status code"):
            extractors.Responses(Capture()).parse(["ok: fine"])

    def test_duplicate_status_code(self):
        with pytest.raises(SectionError, match="declared twice"):
            extractors.Responses(Capture()).parse(["200: a", "200: b"])


class TestDeprecated:
    def test_content_ignored(self):
        cap = Capture()
        extractors.Deprecated(cap).parse(["whatever"])
        extractors.Deprecated(cap).parse([])
        assert cap.values == [None, None]


class TestExtensions:
    def test_values_kept_as_written(self):
        cap = Capture()
        extractors.Extensions(cap).parse([
            "  x-note: see: docs",
            "  x-tag: #internal",
            "  x-version: 1.10",
            "  x-flag: true",
            "  x-url: https://example.com/a",
        ])
        assert cap.values == [{
            "x-note": "see: docs",
            "x-tag": "#internal",
            "x-version": "1.10",
            "x-flag": "true",
            "x-url": "https://example.com/a",
        }]

    def test_nested_values(self):
        cap = Capture()
        extractors.Extensions(cap).parse(["  x-list:", "    - dog", "    - cat", "", "  x-map:", "    a: 1", "  x-b: 2"])
        assert cap.values == [{"x-list": ["dog", "cat"], "x-map": {"a": 1}, "x-b": "2"}]

    def test_empty_value_without_block(self):
        cap = Capture()
        extractors.Extensions(cap).parse(["x-empty:", "x-b: 2"])
        assert cap.values == [{"x-empty": "", "x-b": "2"}]

    def test_inline_entry_followed_by_indented_entries(self):
        cap = Capture()
        extractors.Extensions(cap).parse(["x-a: 1", "  x-b: 2", "  x-c: 3"])
        assert cap.values == [{"x-a": "1", "x-b": "2", "x-c": "3"}]

    def test_empty_body_is_noop(self):
        cap = Capture()
        extractors.Extensions(cap).parse(["", ""])
        assert cap.values == []

    def test_key_without_prefix(self):
        with pytest.raises(SectionError, match="must start with 'x-'") as exc:
            extractors.Extensions(Capture()).parse(["x-ok: 1", "bad: 2"])
        assert exc.value.line == "bad: 2"

    def test_line_without_colon(self):
        with pytest.raises(SectionError, match="expected 'x-name: value'") as exc:
            extractors.Extensions(Capture()).parse(["just text"])
        assert exc.value.line == "just text"

    def test_invalid_nested_block(self):
        with pytest.raises(SectionError, match="invalid value for x-a") as exc:
            extractors.Extensions(Capture()).parse(["x-a:", "  - [1, 2"])
        assert exc.value.line == "x-a:"
