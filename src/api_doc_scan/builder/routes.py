"""Builds operations from route annotation blocks and merges them into a Document."""

import logging

from api_doc_scan.errors import ApiDocScanError, BuildError
from api_doc_scan.parser import extractors
from api_doc_scan.parser.base import Document, Operation, Route
from api_doc_scan.parser.sections import SectionedParser, SectionLabel, TagParser, multi_line, single_line
from api_doc_scan.parser.setters import OperationSetters

logger = logging.getLogger(__name__)


def section_taggers(setters: OperationSetters, known_responses=()) -> list[TagParser]:
    """The section registry, wired to one operation's setters."""
    return [
        multi_line(SectionLabel.CONSUMES, extractors.MediaTypes(SectionLabel.CONSUMES, setters.set_consumes)),
        multi_line(SectionLabel.PRODUCES, extractors.MediaTypes(SectionLabel.PRODUCES, setters.set_produces)),
        single_line(SectionLabel.SCHEMES, extractors.Schemes(setters.add_servers)),
        multi_line(SectionLabel.SECURITY, extractors.Security(setters.set_security)),
        multi_line(SectionLabel.PARAMETERS, extractors.Parameters(setters.add_params), keep_blank=True),
        multi_line(SectionLabel.RESPONSES, extractors.Responses(setters.set_responses, known_responses), keep_blank=True),
        single_line(SectionLabel.DEPRECATED, extractors.Deprecated(setters.set_deprecated)),
        multi_line(SectionLabel.EXTENSIONS, extractors.Extensions(setters.add_extensions), keep_blank=True),
    ]


class RouteBuilder:
    """Builds one route into a Document.

    The operation is edited as a detached copy and installed only when the
    whole annotation block parses, so a failed build leaves the document
    untouched.
    """

    def __init__(self, route: Route, known_responses=(), operations: dict[str, Operation] | None = None):
        self.route = route
        self.known_responses = tuple(known_responses)
        self.operations = operations or {}

    def build(self, document: Document) -> Operation:
        method = self.route.method.lower()
        path_item = document.paths.get(self.route.path, {})
        existing = path_item.get(method) or self.operations.get(self.route.operation_id)
        op = existing.model_copy(deep=True) if existing is not None else Operation()
        if self.route.operation_id:
            op.operation_id = self.route.operation_id
        op.tags = list(self.route.tags)

        setters = OperationSetters(op)
        parser = SectionedParser(
            section_taggers(setters, self.known_responses),
            set_title=setters.set_title,
            set_description=setters.set_description,
        )
        try:
            parser.parse(self.route.remaining_lines)
        except ApiDocScanError as e:
            raise BuildError(op.operation_id, e) from e

        document.paths.setdefault(self.route.path, {})[method] = op
        logger.debug("Built %s %s (%s)", method.upper(), self.route.path, op.operation_id)
        return op


def build_routes(routes: list[Route], document: Document, skip_errors: bool = False) -> list[BuildError]:
    """Build every route in order.

    With ``skip_errors`` a failed route is logged and collected and the rest
    still build; otherwise the first failure propagates.
    """
    known_responses = document.known_responses()
    errors = []
    for route in routes:
        try:
            RouteBuilder(route, known_responses).build(document)
        except BuildError as e:
            if not skip_errors:
                raise
            logger.warning("Skipping %s %s: %s", route.method.upper(), route.path, e)
            errors.append(e)
    return errors
