"""httpx implementation of the :class:`StreamOpener` protocol.

``open`` sends the request with ``stream=True`` so it returns as soon as the
status line and headers arrive; the body is consumed later by the controller
through ``iter_bytes``. Exceptions from httpx propagate unchanged and are
classified by the controller.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx

from .client import get_httpx_client


class HttpxStreamOpener:
    """Opens streaming POST requests on a pooled (or supplied) ``httpx.Client``."""

    def __init__(self, client: Optional[httpx.Client] = None) -> None:
        self._client = client

    def _get_client(self) -> httpx.Client:
        return self._client if self._client is not None else get_httpx_client(None, purpose="stream")

    def open(self, url: str, *, headers: Mapping[str, str], json_body: Dict[str, Any]) -> httpx.Response:
        client = self._get_client()
        request = client.build_request("POST", url, headers=dict(headers), json=json_body)
        return client.send(request, stream=True)


__all__ = ["HttpxStreamOpener"]
