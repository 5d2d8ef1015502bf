"""
Exceptions raised by the Seq API client.

Link resolution errors are local programmer errors: the caller asked for a
link or parameter the resource does not advertise. API and connection errors
come from the server or the network and are never retried by the client.
"""

from __future__ import annotations


class SeqError(Exception):
    """Base class for all client errors."""


class LinkResolutionError(SeqError):
    """A link could not be resolved against an entity."""


class LinkNotAvailableError(LinkResolutionError, LookupError):
    """The entity does not advertise the requested link."""

    def __init__(self, link: str, entity: object):
        self.link = link
        self.entity = entity
        super().__init__(
            f"The requested link `{link}` isn't available on entity `{entity}`."
        )


class UnknownParameterError(LinkResolutionError, ValueError):
    """Parameters were supplied that the link's URI template does not declare."""

    def __init__(self, template: str, parameters: list[str]):
        self.template = template
        self.parameters = parameters
        super().__init__(
            f"The URI template `{template}` does not contain parameter: "
            f"`{'`, `'.join(parameters)}`."
        )


class SeqApiError(SeqError):
    """The server answered with a non-success status code."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class SeqConnectionError(SeqError):
    """Network-level failure, or a WebSocket closed abnormally."""
