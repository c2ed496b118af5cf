"""OpenAPI 3.0 document models.

Only the subset the builder emits is modelled. Wire names that are not
valid Python identifiers (``in``, ``requestBody``) or that clash with
pydantic (``schema``) are aliases; dump with ``by_alias=True``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.0.0"
DEFAULT_TITLE = "API from Bruno"
DEFAULT_API_VERSION = "1.0.0"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Info(_Model):
    title: str = DEFAULT_TITLE
    version: str = DEFAULT_API_VERSION


class Server(_Model):
    url: str


class Schema(_Model):
    type: str | None = None


class Parameter(_Model):
    """A single query or path parameter."""

    name: str
    location: str = Field(alias="in")  # query / path
    required: bool
    schema_: Schema = Field(default_factory=lambda: Schema(type="string"), alias="schema")
    example: Any = None


class MediaType(_Model):
    schema_: Schema | None = Field(default=None, alias="schema")
    example: Any = None


class RequestBody(_Model):
    required: bool = True
    content: dict[str, MediaType]


class Response(_Model):
    description: str


class Operation(_Model):
    """One HTTP method on one path."""

    summary: str | None = None
    tags: list[str] | None = None
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = Field(
        default_factory=lambda: {"200": Response(description="Success")}
    )


class OpenAPIDocument(_Model):
    """The assembled document, ready for serialization."""

    openapi: str = OPENAPI_VERSION
    info: Info = Field(default_factory=Info)
    servers: list[Server] | None = None
    paths: dict[str, dict[str, Operation]] = {}

    def to_dict(self) -> dict:
        """Plain-dict form with wire names; unset optional fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
