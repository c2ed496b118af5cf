"""Bruno ``.bru`` request file parser.

Scans the file line by line with a small state machine and produces a
``Request``. Parsing never fails: unknown sections are skipped, and
missing or malformed entries fall back to the ``Request`` defaults.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from urllib.parse import parse_qsl

from .base import HTTP_METHODS, Request

logger = logging.getLogger(__name__)

SECTION_RE = re.compile(r"^([A-Za-z0-9_-]+)(?::([A-Za-z0-9_-]+))?\s*\{$")
BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class Section(Enum):
    NONE = "none"
    META = "meta"
    METHOD = "method"
    HEADERS = "headers"
    QUERY = "query"
    PARAMS = "params"
    PARAMS_QUERY = "params:query"
    BODY = "body"
    IGNORE = "ignore"


@dataclass(frozen=True)
class _State:
    section: Section = Section.NONE
    depth: int = 0  # brace nesting, only tracked in BODY
    buffer: tuple[str, ...] = ()


@dataclass
class _Draft:
    """Request fields collected while scanning."""

    method: str = "get"
    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    path_params: dict[str, str] = field(default_factory=dict)
    body: str = ""
    body_type: str = ""
    name: str = "Unnamed"

    def set_url(self, raw: str) -> None:
        self.url, query = split_query(raw)
        for key, value in query.items():
            # explicit query entries win over the URL's own query string
            self.query.setdefault(key, value)

    def to_request(self) -> Request:
        return Request(
            method=self.method,
            url=self.url,
            headers=self.headers,
            query=self.query,
            path_params=self.path_params,
            body=self.body,
            body_type=self.body_type,
            name=self.name,
        )


def parse_bru(text: str) -> Request:
    """Parse the text of one ``.bru`` file into a Request."""
    draft = _Draft()
    state = _State()
    for raw_line in text.replace("\r\n", "\n").split("\n"):
        state = _step(state, raw_line, draft)
    _flush(state, draft)
    return draft.to_request()


def parse_bru_file(file_path: Path) -> Request:
    """Read and parse a single ``.bru`` file."""
    return parse_bru(file_path.read_text(encoding="utf-8"))


def split_key_value(line: str) -> tuple[str, str]:
    """Split ``key: value`` on the first colon; later colons stay in the value."""
    key, _, value = line.partition(":")
    return key.strip(), value.strip()


def split_query(raw: str) -> tuple[str, dict[str, str]]:
    """Split a URL into the part before ``?`` and its decoded query parameters.

    If the query string can't be parsed, the path is still returned but
    no parameters are.
    """
    trimmed = raw.strip()
    if "?" not in trimmed:
        return raw, {}

    path, _, query_string = trimmed.partition("?")
    if ";" in query_string or BAD_ESCAPE_RE.search(query_string):
        logger.debug("Ignoring unparseable query string %r", query_string)
        return path, {}

    query: dict[str, str] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        query.setdefault(key, value)
    return path, query


def _step(state: _State, raw_line: str, draft: _Draft) -> _State:
    line = raw_line.strip()
    if not line:
        if state.section is Section.BODY:
            return replace(state, buffer=state.buffer + (raw_line,))
        return state

    match = SECTION_RE.match(line)
    if match:
        _flush(state, draft)
        return _open_section(match.group(1).lower(), (match.group(2) or "").lower(), draft)

    if state.section is Section.BODY:
        # Braces inside string literals are counted too.
        depth = state.depth + raw_line.count("{") - raw_line.count("}")
        if depth <= 0:
            _flush(state, draft)
            return _State()
        return replace(state, depth=depth, buffer=state.buffer + (raw_line,))

    if line == "}":
        return _State()

    _apply_entry(state.section, line, draft)
    return state


def _open_section(name: str, subtype: str, draft: _Draft) -> _State:
    if name in HTTP_METHODS:
        draft.method = name
        return _State(Section.METHOD)
    if name == "meta":
        return _State(Section.META)
    if name == "headers":
        return _State(Section.HEADERS)
    if name == "query":
        return _State(Section.QUERY)
    if name == "params":
        return _State(Section.PARAMS_QUERY if subtype == "query" else Section.PARAMS)
    if name == "body":
        draft.body_type = subtype
        return _State(Section.BODY, depth=1)

    logger.debug("Skipping section %r", f"{name}:{subtype}" if subtype else name)
    return _State(Section.IGNORE)


def _apply_entry(section: Section, line: str, draft: _Draft) -> None:
    key, value = split_key_value(line)

    if section is Section.META:
        if key == "name" and value:
            draft.name = value
        elif key == "method":
            method = value.lower()
            if method in HTTP_METHODS:
                draft.method = method
            else:
                logger.debug("Ignoring unknown method %r", value)
        elif key == "url":
            draft.set_url(value)
    elif section is Section.METHOD:
        if key == "url":
            draft.set_url(value)
    elif not key:
        return
    elif section is Section.HEADERS:
        draft.headers[key] = value
    elif section in (Section.QUERY, Section.PARAMS_QUERY):
        draft.query[key] = value
    elif section is Section.PARAMS:
        draft.path_params[key] = value


def _flush(state: _State, draft: _Draft) -> None:
    if state.section is not Section.BODY or not state.buffer:
        return
    raw = "\n".join(state.buffer).strip()
    if raw:
        draft.body = raw
