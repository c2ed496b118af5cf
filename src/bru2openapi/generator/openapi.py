"""OpenAPI builder — aggregates parsed Bruno requests into one document.

Requests are grouped by normalized path, then by method. When two
requests share both, the later one replaces the earlier operation.
"""

import json
import logging
import re
from collections.abc import Iterable
from typing import Any
from urllib.parse import unquote, urlsplit

from bru2openapi.parser.base import Request
from bru2openapi.generator.document import (
    MediaType,
    OpenAPIDocument,
    Operation,
    Parameter,
    RequestBody,
    Schema,
    Server,
)

logger = logging.getLogger(__name__)

COLON_PARAM_RE = re.compile(r":([A-Za-z0-9_]+)")
BRACE_PARAM_RE = re.compile(r"\{([A-Za-z0-9_]+)\}")

BODY_TYPE_CONTENT_TYPES = {
    "text": "text/plain",
    "graphql": "application/graphql",
}
DEFAULT_CONTENT_TYPE = "application/json"


def build_openapi(requests: Iterable[Request]) -> OpenAPIDocument:
    """Build an OpenAPI document from requests, folded in input order."""
    paths: dict[str, dict[str, Operation]] = {}
    servers: dict[str, None] = {}

    for req in requests:
        path, server = split_url(req.url)
        path = normalize_path_params(path)
        if server:
            servers.setdefault(server)

        operations = paths.setdefault(path, {})
        if req.method in operations:
            logger.debug(
                "%s %s: %r replaces %r",
                req.method.upper(), path, req.name, operations[req.method].summary,
            )
        operations[req.method] = _build_operation(req, path)

    doc = OpenAPIDocument(paths=paths)
    if servers:
        doc.servers = [Server(url=url) for url in servers]
    return doc


def split_url(raw: str) -> tuple[str, str]:
    """Split a request URL into ``(path, server)``.

    A leading ``{{variable}}`` is kept verbatim as the server. An absolute
    http(s) URL contributes its scheme and host. Anything else is a path.
    """
    trimmed = raw.strip()
    if not trimmed:
        return "/", ""

    if trimmed.startswith("{{") and "}}" in trimmed:
        end = trimmed.index("}}") + 2
        return trimmed[end:] or "/", trimmed[:end]

    if trimmed.startswith(("http://", "https://")):
        try:
            parts = urlsplit(trimmed)
            parts.port  # raises on a malformed port
        except ValueError:
            logger.debug("Unparseable URL %r", trimmed)
            return "/", ""
        host = parts.netloc.rpartition("@")[2]  # drop user:password
        return unquote(parts.path) or "/", f"{parts.scheme}://{host}"

    if trimmed.startswith("/"):
        return trimmed, ""
    return "/" + trimmed, ""


def normalize_path_params(path: str) -> str:
    """Rewrite ``:name`` placeholders as ``{name}``."""
    return COLON_PARAM_RE.sub(r"{\1}", path)


def extract_path_params(path: str) -> list[str]:
    """Names of ``{name}`` placeholders, in order of appearance."""
    return BRACE_PARAM_RE.findall(path)


def safe_json(text: str) -> Any:
    """Decode ``text`` as JSON, or return it unchanged if that fails."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Body is not valid JSON, using raw text as example")
        return text


def build_request_body(req: Request) -> RequestBody | None:
    """Infer the request body and its content type, or None without a body."""
    if not req.body.strip():
        return None

    content_type = BODY_TYPE_CONTENT_TYPES.get(req.body_type, DEFAULT_CONTENT_TYPE)
    for header in ("Content-Type", "content-type"):
        if header in req.headers:
            content_type = req.headers[header]

    if "json" in content_type.lower():
        media = MediaType(schema_=Schema(type="object"), example=safe_json(req.body))
    else:
        media = MediaType(schema_=Schema(type="string"), example=req.body)

    return RequestBody(required=True, content={content_type: media})


def _build_parameters(req: Request, path: str) -> list[Parameter]:
    params = [
        Parameter(name=name, location="query", required=False, example=value)
        for name, value in req.query.items()
    ]
    params += [
        Parameter(name=name, location="path", required=True, example=value)
        for name, value in req.path_params.items()
    ]

    for name in extract_path_params(path):
        if not _has_path_param(params, name):
            params.append(Parameter(name=name, location="path", required=True))
    return params


def _has_path_param(params: list[Parameter], name: str) -> bool:
    return any(p.location == "path" and p.name == name for p in params)


def _build_operation(req: Request, path: str) -> Operation:
    op = Operation(summary=req.name)
    if req.tag:
        op.tags = [req.tag]
    params = _build_parameters(req, path)
    if params:
        op.parameters = params
    op.request_body = build_request_body(req)
    return op
