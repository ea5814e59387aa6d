"""HTTP transport: pooled httpx clients and the default stream opener."""

from .client import close_all_clients, get_httpx_client
from .stream_opener import HttpxStreamOpener

__all__ = ["get_httpx_client", "close_all_clients", "HttpxStreamOpener"]
