"""Canonical Pydantic models shared across all ramlmock modules.

The models fall into three groups:

**Spec tree models** -- produced by :mod:`ramlmock.parser` and read by the
generator:
    :class:`UriParameter`, :class:`BodyDescriptor`,
    :class:`ResponseDefinition`, :class:`MethodDefinition`, and
    :class:`SpecNode`.

**Generator models** -- derived while walking the tree:
    :class:`ResponseDescriptor`.

**Option models** -- what callers pass in:
    :class:`ParserOptions`, :class:`GenerateOptions`, and
    :class:`ProjectConfig`.

Spec tree models keep the RAML field names as aliases (``relativeUri``,
``uriParameters``...) so that a normalized RAML mapping validates directly,
while Python code uses snake_case attributes.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

FormatGenerator = Callable[[Any, dict[str, Any]], Any]
"""A custom format generator: ``(faker, schema_node) -> value``."""


# --- Spec tree ---


class UriParameter(BaseModel):
    """A named URI or base-URI parameter declaration.

    Only ``default`` matters to the generator (it fills base-URI tokens);
    the remaining RAML named-parameter attributes are kept for reference.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    display_name: Optional[str] = Field(default=None, alias="displayName")
    type: Optional[str] = None
    description: Optional[str] = None
    required: Optional[bool] = None
    default: Any = None
    example: Any = None


class BodyDescriptor(BaseModel):
    """A response body for one media type.

    ``schema`` is JSON text (or an already-parsed mapping when the document
    inlined it); ``example`` is passed through untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    schema_: Any = Field(default=None, alias="schema")
    example: Any = None


class ResponseDefinition(BaseModel):
    """A response declared for one status code."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    description: Optional[str] = None
    body: Optional[dict[str, Optional[BodyDescriptor]]] = None


class MethodDefinition(BaseModel):
    """An HTTP method declared on a resource.

    ``responses`` maps the status-code key *as written* (``"200"``,
    ``"default"``...) to its definition; a ``None`` value means the code is
    declared but not applicable.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    method: str
    description: Optional[str] = None
    responses: Optional[dict[str, Optional[ResponseDefinition]]] = None


class SpecNode(BaseModel):
    """A node of the RAML resource tree.

    The document root carries ``base_uri`` and ``base_uri_parameters``;
    resources carry ``relative_uri`` and ``uri_parameters``. Any other RAML
    field (``title``, ``version``...) is preserved as an extra attribute so
    that base-URI tokens can be looked up on the node itself.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    relative_uri: Optional[str] = Field(default=None, alias="relativeUri")
    uri_parameters: Optional[dict[str, Optional[UriParameter]]] = Field(
        default=None, alias="uriParameters"
    )
    methods: Optional[list[MethodDefinition]] = None
    resources: Optional[list[SpecNode]] = None
    base_uri: Optional[str] = Field(default=None, alias="baseUri")
    base_uri_parameters: Optional[dict[str, Optional[UriParameter]]] = Field(
        default=None, alias="baseUriParameters"
    )

    def field_value(self, name: str) -> Any:
        """Return the value of a declared or extra field named *name*, or ``None``."""
        extra = self.model_extra or {}
        if name in extra:
            return extra[name]
        if name in type(self).model_fields:
            return getattr(self, name)
        return None


# --- Generator ---


class ResponseDescriptor(BaseModel):
    """One usable response of a method: numeric code, parsed schema, example."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: int = Field(ge=0)
    schema_: Any = Field(default=None, alias="schema")
    example: Any = None


# --- Options ---


class ParserOptions(BaseModel):
    """Options handed to the spec loader.

    Unknown keys are kept in ``model_extra`` and passed through untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    dereference_schemas: bool = Field(default=True, alias="dereferenceSchemas")
    decode_examples: bool = Field(default=True, alias="decodeExamples")


class GenerateOptions(BaseModel):
    """Options accepted by :func:`ramlmock.generate`.

    ``path`` wins over ``files`` when both are set. ``formats`` maps a custom
    JSON-Schema ``format`` name to a generator called as
    ``generator(faker, schema_node)``.
    """

    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, arbitrary_types_allowed=True
    )

    path: Optional[str] = None
    files: Optional[list[str]] = None
    formats: dict[str, FormatGenerator] = Field(default_factory=dict)
    parser_options: ParserOptions = Field(
        default_factory=ParserOptions, alias="parserOptions"
    )


class ProjectConfig(BaseModel):
    """Project-local defaults read from ``./ramlmock.json``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    path: Optional[str] = None
    files: list[str] = Field(default_factory=list)
    parser_options: ParserOptions = Field(
        default_factory=ParserOptions, alias="parserOptions"
    )
