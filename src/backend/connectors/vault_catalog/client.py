from __future__ import annotations

import json
import logging
import time
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from .config import VaultCatalogConfig

logger = logging.getLogger(__name__)


class VaultCatalogError(RuntimeError):
    def __init__(self, status: int, message: str, body: str | None = None):
        super().__init__(f"Vault Catalog HTTP {status}: {message}")
        self.status = status
        self.body = body


class VaultCatalogClient(Protocol):
    def find_dataset_by_sword_token(self, sword_token: str) -> dict[str, Any] | None:
        """Return the catalog record of the dataset with this SWORD token, or None when there is none."""
        ...


class HttpVaultCatalogClient:
    """
    Vault Catalog lookups over HTTP.

    GET {base_url}/dataset?swordToken=<token> answers 200 with the dataset record
    or 404 when no dataset carries the token.
    """

    def __init__(self, config: VaultCatalogConfig):
        self._config = config

    def find_dataset_by_sword_token(self, sword_token: str) -> dict[str, Any] | None:
        url = f"{self._config.base_url}/dataset?swordToken={quote(sword_token, safe='')}"
        return self._get(url)

    def _get(self, url: str) -> dict[str, Any] | None:
        retries = 0
        backoff = 0.5

        while True:
            req = Request(url, method="GET")
            req.add_header("Accept", "application/json")
            try:
                with urlopen(req, timeout=self._config.timeout_seconds) as resp:
                    return json.loads(resp.read().decode("utf-8"))
            except HTTPError as exc:
                body = exc.read().decode("utf-8") if exc.fp else None
                status = exc.code
                if status == 404:
                    return None
                if status in (429, 500, 502, 503, 504) and retries < self._config.max_retries:
                    logger.warning("Vault Catalog answered %s for %s, retrying", status, url)
                    time.sleep(backoff)
                    retries += 1
                    backoff *= 2
                    continue
                raise VaultCatalogError(status, exc.reason, body) from exc
            except URLError as exc:
                if retries < self._config.max_retries:
                    logger.warning("Vault Catalog unreachable (%s), retrying", exc.reason)
                    time.sleep(backoff)
                    retries += 1
                    backoff *= 2
                    continue
                raise VaultCatalogError(0, str(exc)) from exc
