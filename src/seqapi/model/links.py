"""
Hypermedia link types.

Every resource returned by the server carries a ``Links`` object mapping a
link name to an RFC 6570 URI template:

    {"Id": "signal-1", "Links": {"Self": "api/signals/signal-1{?draft}"}}

The link table is serialized in exactly that shape, so decoded entities can
be posted back to the server unchanged.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic.alias_generators import to_pascal


class Link(RootModel[str]):
    """A single URI template advertised by the server."""

    model_config = ConfigDict(frozen=True)

    def get_uri(self) -> str:
        """Return the raw (unexpanded) URI template."""
        return self.root

    def __str__(self) -> str:
        return self.root


@runtime_checkable
class Linked(Protocol):
    """Anything exposing a link table can be navigated by the client."""

    @property
    def links(self) -> Mapping[str, Union[Link, str]]: ...


class Entity(BaseModel):
    """
    Base model for decoded server resources.

    Field names are snake_case in Python and PascalCase on the wire. Unknown
    fields are kept so newer servers don't break older clients. Instances are
    frozen after decoding.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    id: str | None = None
    links: dict[str, Link] = Field(default_factory=dict)

    def __str__(self) -> str:
        if self.id:
            return f"{type(self).__name__}({self.id})"
        return type(self).__name__
