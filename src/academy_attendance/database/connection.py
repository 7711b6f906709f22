from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from ..core.constants import DEFAULT_REQUEST_TIMEOUT


@dataclass
class RestConfig:
    url: str
    api_key: str
    timeout: float = DEFAULT_REQUEST_TIMEOUT


class RestConnection:
    """Singleton-like factory for the shared PostgREST client.

    Note: One ``httpx.Client`` is kept per process and reused by every repository;
    ``transport`` lets tests plug in ``httpx.MockTransport``.
    """

    _instance: Optional["RestConnection"] = None

    def __init__(self, config: RestConfig, *, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def get_instance(cls, config: RestConfig) -> "RestConnection":
        if cls._instance is None:
            cls._instance = RestConnection(config)
        return cls._instance

    @property
    def config(self) -> RestConfig:
        return self._config

    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._config.url.rstrip("/") + "/",
                headers={
                    "apikey": self._config.api_key,
                    "Authorization": f"Bearer {self._config.api_key}",
                    "Content-Type": "application/json",
                    "Prefer": "return=representation",
                },
                timeout=float(self._config.timeout),
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
