"""Unified data model for parsed Bruno request files.

The Bruno parser converts each ``.bru`` file into a ``Request``,
which the OpenAPI builder then aggregates into one document.
"""

from pydantic import BaseModel, ConfigDict

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head")


class Request(BaseModel):
    """A single request definition parsed from one ``.bru`` file."""

    model_config = ConfigDict(frozen=True)

    method: str = "get"  # always one of HTTP_METHODS
    url: str = ""  # path or URL as written, query string stripped
    headers: dict[str, str] = {}
    query: dict[str, str] = {}
    path_params: dict[str, str] = {}
    body: str = ""
    body_type: str = ""  # json / text / graphql / xml ...
    name: str = "Unnamed"
    tag: str = ""  # containing folder, relative to the collection root
