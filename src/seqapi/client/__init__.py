"""Client modules for Seq server communication."""

from seqapi.client.api_client import SeqApiClient
from seqapi.client.links import format_timestamp, resolve_link
from seqapi.client.rest import HttpTransport, ResponseStream
from seqapi.client.streaming import ObservableStream, StreamingClient

__all__ = [
    "SeqApiClient",
    "HttpTransport",
    "ResponseStream",
    "StreamingClient",
    "ObservableStream",
    "resolve_link",
    "format_timestamp",
]
