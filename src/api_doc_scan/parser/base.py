"""Data models for routes and the API description document.

Routes come in from the comment-block discovery stage; operations are
built from their annotation lines and merged into a shared Document.
Fields this tool does not model are kept as pydantic extras so that an
existing document survives a load/dump cycle.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api_doc_scan.config import DEFAULT_OPENAPI_VERSION

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class Route(BaseModel):
    """One discovered route declaration plus its raw annotation lines."""

    model_config = ConfigDict(populate_by_name=True)

    method: str
    path: str
    operation_id: str = Field(default="", alias="operationId")
    tags: list[str] = []
    remaining_lines: list[str] = Field(default=[], alias="lines")

    @field_validator("remaining_lines", mode="before")
    @classmethod
    def _split_block(cls, value):
        if isinstance(value, str):
            return value.splitlines()
        return value


class Server(BaseModel):
    url: str
    description: str = ""


class Parameter(BaseModel):
    """A single operation parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    location: str = Field(alias="in")  # query / path / header / cookie
    description: str = ""
    required: bool = False
    deprecated: bool = False
    schema_: dict = Field(default={}, alias="schema")


class Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    description: str = ""
    ref: str | None = Field(default=None, alias="$ref")
    schema_: dict | None = Field(default=None, alias="schema")

    def to_openapi(self) -> dict:
        if self.ref:
            return {"$ref": self.ref}
        data = {"description": self.description}
        if self.schema_ is not None:
            data["schema"] = self.schema_
        data.update(self.model_extra or {})
        return data


class Responses(BaseModel):
    """Default response plus responses keyed by status code."""

    default: Response | None = None
    status_codes: dict[int, Response] = {}


class Operation(BaseModel):
    """One method + path endpoint, as assembled from annotation blocks."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    operation_id: str = Field(default="", alias="operationId")
    summary: str = ""
    description: str = ""
    tags: list[str] = []
    consumes: list[str] = []  # legacy request content types
    produces: list[str] = []  # legacy response content types
    servers: list[Server] = []
    security: list[dict[str, list[str]]] = []
    parameters: list[Parameter] = []
    responses: Responses | None = None
    deprecated: bool = False
    extensions: dict = {}

    def add_param(self, param: Parameter) -> None:
        """Append a parameter, replacing one with the same name and location in place."""
        for i, existing in enumerate(self.parameters):
            if existing.name == param.name and existing.location == param.location:
                self.parameters[i] = param
                return
        self.parameters.append(param)

    @classmethod
    def from_openapi(cls, data: dict) -> "Operation":
        data = dict(data)
        extensions = {k: data.pop(k) for k in list(data) if k.lower().startswith("x-")}
        raw_responses = data.pop("responses", None)
        responses = None
        if raw_responses is not None:
            responses = Responses()
            for code, resp in raw_responses.items():
                if str(code).lower() == "default":
                    responses.default = Response.model_validate(resp)
                else:
                    responses.status_codes[int(code)] = Response.model_validate(resp)
        return cls.model_validate(data | {"extensions": extensions, "responses": responses})

    def to_openapi(self) -> dict:
        data: dict = {}
        if self.tags:
            data["tags"] = list(self.tags)
        if self.summary:
            data["summary"] = self.summary
        if self.description:
            data["description"] = self.description
        if self.operation_id:
            data["operationId"] = self.operation_id
        if self.consumes:
            data["consumes"] = list(self.consumes)
        if self.produces:
            data["produces"] = list(self.produces)
        if self.parameters:
            data["parameters"] = [p.model_dump(by_alias=True, exclude_defaults=True) for p in self.parameters]
        if self.responses is not None:
            responses = {}
            if self.responses.default is not None:
                responses["default"] = self.responses.default.to_openapi()
            for code in sorted(self.responses.status_codes):
                responses[str(code)] = self.responses.status_codes[code].to_openapi()
            data["responses"] = responses
        if self.servers:
            data["servers"] = [s.model_dump(exclude_defaults=True) for s in self.servers]
        if self.security:
            data["security"] = [dict(req) for req in self.security]
        if self.deprecated:
            data["deprecated"] = True
        data.update(self.model_extra or {})
        data.update(self.extensions)
        return data


PathItem = dict[str, Operation]


class Document(BaseModel):
    """The API description being assembled, keyed by path then method."""

    model_config = ConfigDict(extra="allow")

    openapi: str = DEFAULT_OPENAPI_VERSION
    info: dict = {}
    paths: dict[str, PathItem] = {}
    path_fields: dict[str, dict] = {}  # non-method path-item keys: parameters, summary, $ref, ...
    components: dict = {}

    def known_responses(self) -> list[str]:
        return list(self.components.get("responses") or {})

    @classmethod
    def from_openapi(cls, data: dict) -> "Document":
        data = dict(data)
        paths, path_fields = {}, {}
        for path, item in (data.pop("paths", None) or {}).items():
            paths[path] = {}
            for key, value in item.items():
                if key.lower() in HTTP_METHODS:
                    paths[path][key.lower()] = Operation.from_openapi(value)
                else:
                    path_fields.setdefault(path, {})[key] = value
        return cls.model_validate(data | {"paths": paths, "path_fields": path_fields})

    def to_openapi(self) -> dict:
        data = {"openapi": self.openapi, "info": dict(self.info), "paths": {}}
        for path, item in self.paths.items():
            data["paths"][path] = dict(self.path_fields.get(path, {}))
            data["paths"][path].update({method: op.to_openapi() for method, op in item.items()})
        if self.components:
            data["components"] = self.components
        data.update(self.model_extra or {})
        return data
