"""Section scanner for annotation blocks.

An annotation block is a free-text preamble (title + description) followed
by labeled sections::

    List all pets.

    Returns every pet the store knows about.

    Produces:
    - application/json

    Schemes: http, https

    Responses:
      200: body:[]Pet the pets
      default: genericError

A header is an unindented line whose text up to the first colon matches a
known label, ignoring case. Anything after the colon is inline content.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class SectionLabel(str, Enum):
    CONSUMES = "Consumes"
    PRODUCES = "Produces"
    SCHEMES = "Schemes"
    SECURITY = "Security"
    PARAMETERS = "Parameters"
    RESPONSES = "Responses"
    DEPRECATED = "Deprecated"
    EXTENSIONS = "Extensions"


class TagParser:
    """Binds a section label to the extractor that handles its body.

    Single-line sections take one body line: the inline content, or else the
    next line when it is not a header. Multi-line sections run until the
    next header; ``keep_blank`` decides whether blank body lines reach the
    extractor.
    """

    def __init__(self, label: SectionLabel, extractor, multi_line: bool = True, keep_blank: bool = False):
        self.label = label
        self.extractor = extractor
        self.multi_line = multi_line
        self.keep_blank = keep_blank

    def run(self, lines: list[str]) -> None:
        if not self.keep_blank:
            lines = [line for line in lines if line.strip()]
        self.extractor.parse(lines)


def single_line(label: SectionLabel, extractor) -> TagParser:
    return TagParser(label, extractor, multi_line=False)


def multi_line(label: SectionLabel, extractor, keep_blank: bool = False) -> TagParser:
    return TagParser(label, extractor, multi_line=True, keep_blank=keep_blank)


def dedent(lines: list[str]) -> list[str]:
    """Strip trailing whitespace and the indentation shared by all non-blank lines."""
    lines = [line.rstrip() for line in lines]
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    cut = min(indents, default=0)
    return [line[cut:] for line in lines]


class SectionedParser:
    """Splits an annotation block into a preamble and labeled sections.

    Each recognized section is handed to its TagParser in positional order.
    An extractor error stops the scan; nothing after it is processed.
    """

    def __init__(self, taggers: list[TagParser], set_title=None, set_description=None):
        self.taggers = {t.label.value.lower(): t for t in taggers}
        self.set_title = set_title
        self.set_description = set_description

    def match_header(self, line: str) -> tuple[TagParser, str] | None:
        if not line or line[0].isspace():
            return None
        label, _, inline = line.partition(":")
        tagger = self.taggers.get(label.strip().lower())
        if tagger is None:
            return None
        return tagger, inline.strip()

    def parse(self, lines: list[str]) -> None:
        lines = dedent(lines)
        preamble: list[str] = []
        in_preamble = True
        current: TagParser | None = None
        body: list[str] = []

        i = 0
        while i < len(lines):
            line = lines[i]
            i += 1
            header = self.match_header(line)
            if header is None:
                if in_preamble:
                    preamble.append(line)
                elif current is not None:
                    body.append(line)
                elif line.strip():
                    logger.debug("Ignoring line outside any section: %r", line)
                continue

            if in_preamble:
                self._assign_preamble(preamble)
                in_preamble = False
            if current is not None:
                current.run(body)
                current = None

            tagger, inline = header
            body = [inline] if inline else []
            if tagger.multi_line:
                current = tagger
                continue
            if not body and i < len(lines) and self.match_header(lines[i]) is None:
                body = [lines[i].strip()]
                i += 1
            tagger.run(body)

        if in_preamble:
            self._assign_preamble(preamble)
        if current is not None:
            current.run(body)

    def _assign_preamble(self, preamble: list[str]) -> None:
        preamble = _trim_blank(preamble)
        title = [preamble[0].strip()] if preamble else []
        if self.set_title is not None:
            self.set_title(title)
        if self.set_description is not None:
            self.set_description(_trim_blank(preamble[1:]))


def _trim_blank(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]
