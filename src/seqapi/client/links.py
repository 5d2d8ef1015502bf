"""
Link resolution - turns a named link on an entity into a concrete URI.

The server is the single source of truth for which actions exist and how
they are addressed, so the client never builds paths itself:

    uri = resolve_link(signal, "Self", {"draft": True})
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Mapping

from uritemplate import URITemplate

from seqapi.errors import LinkNotAvailableError, UnknownParameterError
from seqapi.model import Linked

logger = logging.getLogger(__name__)


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime in a fixed, round-trippable ISO-8601 form.

    Microseconds are always written. UTC is written as ``Z``; naive values
    carry no offset.
    """
    text = value.isoformat(timespec="microseconds")
    if value.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def _bind(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


def resolve_link(
    entity: Linked,
    link: str,
    parameters: Mapping[str, Any] | None = None,
) -> str:
    """
    Resolve ``link`` on ``entity`` into a URI.

    Args:
        entity: Any object exposing a ``links`` mapping of name to template
        link: Name of the link, e.g. ``"Self"`` or ``"Events"``
        parameters: Values for the template's variables. Variables left
            unbound are omitted from the result.

    Returns:
        The expanded URI. It may be relative to the server base address.

    Raises:
        LinkNotAvailableError: If the entity doesn't advertise ``link``
        UnknownParameterError: If a parameter isn't a variable of the template
    """
    item = entity.links.get(link)
    if item is None:
        raise LinkNotAvailableError(link, entity)

    expression = item if isinstance(item, str) else item.get_uri()
    template = URITemplate(expression)

    if not parameters:
        return template.expand()

    unknown = [name for name in parameters if name not in template.variable_names]
    if unknown:
        raise UnknownParameterError(expression, unknown)

    uri = template.expand({name: _bind(value) for name, value in parameters.items()})
    logger.debug(f"Resolved link {link} to {uri}")
    return uri
