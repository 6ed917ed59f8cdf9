"""Mutation adapters that apply extracted section values to one Operation.

Setters do no parsing. Each may be called more than once per build
(repeated sections), so server appends skip URLs already present.
"""

from api_doc_scan.parser.base import Operation, Parameter, Response, Responses, Server


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


class OperationSetters:
    """One entry point per operation field group, bound to a single Operation."""

    def __init__(self, operation: Operation):
        self.operation = operation

    def set_title(self, lines: list[str]) -> None:
        self.operation.summary = join_lines(lines)

    def set_description(self, lines: list[str]) -> None:
        self.operation.description = join_lines(lines)

    # Consumes/Produces are legacy per-operation fields, kept so older
    # annotations still carry their content types.
    def set_consumes(self, media_types: list[str]) -> None:
        self.operation.consumes = media_types

    def set_produces(self, media_types: list[str]) -> None:
        self.operation.produces = media_types

    def add_servers(self, schemes: list[str]) -> None:
        """Re-express legacy schemes as operation-level servers."""
        known = {server.url for server in self.operation.servers}
        for scheme in schemes:
            url = f"{scheme}://"
            if url not in known:
                self.operation.servers.append(Server(url=url))
                known.add(url)

    def set_security(self, requirements: list[dict[str, list[str]]]) -> None:
        self.operation.security = requirements

    def add_params(self, params: list[Parameter]) -> None:
        for param in params:
            self.operation.add_param(param)

    def set_responses(self, default: Response | None, status_codes: dict[int, Response]) -> None:
        self.operation.responses = Responses(default=default, status_codes=status_codes)

    def set_deprecated(self) -> None:
        self.operation.deprecated = True

    def add_extensions(self, extensions: dict) -> None:
        self.operation.extensions.update(extensions)
