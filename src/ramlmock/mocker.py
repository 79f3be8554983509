"""The :class:`RequestMocker` value object produced for each route.

A request mocker is built in two phases.  During the tree walk the method
extractor registers one pair of zero-argument *producers* per declared status
code and, when a 2xx code exists, selects the default.  Nothing is generated
at that point.  Afterwards callers evaluate a producer as often as they like:

    mocker.mock()          # body generated from the default code's schema
    mocker.mock(404)       # body generated from the 404 schema
    mocker.example(201)    # the literal example declared for 201

Each ``mock`` call runs the schema mocker again, so repeated calls may return
different fake data.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

Producer = Callable[[], Any]


def _nothing() -> None:
    return None


class RequestMocker:
    """Mock and example producers for one (URI pattern, HTTP method) pair.

    Args:
        uri: Absolute URI pattern with ``:name`` placeholders
            (e.g. ``/api/widgets/:id``).
        method: HTTP verb as declared in the document.
    """

    def __init__(self, uri: str, method: str) -> None:
        self.uri = uri
        self.method = method
        self._responses: dict[int, Producer] = {}
        self._examples: dict[int, Producer] = {}
        self._default_code: Optional[int] = None
        self._default_mock: Producer = _nothing
        self._default_example: Producer = _nothing

    def __repr__(self) -> str:
        return (
            f"RequestMocker(method={self.method!r}, uri={self.uri!r}, "
            f"codes={list(self._responses)}, default_code={self._default_code!r})"
        )

    @property
    def responses_by_code(self) -> Mapping[int, Producer]:
        """Read-only view of the mock producers, keyed by status code."""
        return MappingProxyType(self._responses)

    @property
    def examples_by_code(self) -> Mapping[int, Producer]:
        """Read-only view of the example producers, keyed by status code."""
        return MappingProxyType(self._examples)

    @property
    def codes(self) -> list[int]:
        """Declared status codes in declaration order."""
        return list(self._responses)

    @property
    def default_code(self) -> Optional[int]:
        """The code served by :meth:`mock` and :meth:`example` without arguments."""
        return self._default_code

    def add_response(self, code: int, mock: Producer, example: Producer) -> None:
        """Register the producers for *code*, replacing any earlier pair."""
        self._responses[code] = mock
        self._examples[code] = example

    def set_default(self, code: int) -> None:
        """Bind the no-argument accessors to the producers registered for *code*.

        Raises:
            KeyError: If no producers are registered for *code*.
        """
        if code not in self._responses:
            raise KeyError(code)
        self._default_code = code
        self._default_mock = self._responses[code]
        self._default_example = self._examples[code]

    def mock(self, code: Optional[int] = None) -> Any:
        """Generate a body for *code*, or for the default code when omitted.

        Returns ``None`` when no default is set, or when *code* has no schema.

        Raises:
            KeyError: If *code* is given but was never declared.
        """
        if code is None:
            return self._default_mock()
        return self._responses[code]()

    def example(self, code: Optional[int] = None) -> Any:
        """Return the declared example for *code*, or for the default code.

        Raises:
            KeyError: If *code* is given but was never declared.
        """
        if code is None:
            return self._default_example()
        return self._examples[code]()

    def matches(self, method: str, uri: str) -> bool:
        """Case-insensitive verb and exact URI pattern comparison."""
        return self.method.upper() == method.upper() and self.uri == uri
