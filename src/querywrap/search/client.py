"""HTTP transport for Solr's JSON Request API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from querywrap.core.types import SolrSettings
from querywrap.exceptions import ConnectionError, QueryError

logger = logging.getLogger(__name__)


class SolrClient:
    """Posts request documents to ``<core url>/query`` and returns the JSON body."""

    def __init__(self, settings: SolrSettings, session: requests.Session | None = None) -> None:
        """Initialize the client.

        Args:
            settings: Core URL and timeout
            session: Session to reuse (one is created otherwise)
        """
        self._settings = settings
        self._base_url = settings.url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @property
    def url(self) -> str:
        return self._base_url

    def ping(self) -> bool:
        """Check that the core answers its admin ping handler.

        Raises:
            ConnectionError: If the core is unreachable or unhealthy
        """
        url = f"{self._base_url}/admin/ping"
        try:
            response = self.session.get(url, params={"wt": "json"}, timeout=self._settings.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ConnectionError(f"Solr core did not answer ping: {e}", [self._base_url]) from e
        return True

    def query(self, document: dict[str, Any]) -> dict[str, Any]:
        """Run one JSON request document.

        Args:
            document: Body for the JSON Request API

        Returns:
            Decoded response body

        Raises:
            QueryError: On timeout, connection failure, HTTP error or non-JSON body
        """
        url = f"{self._base_url}/query"
        logger.debug(f"POST {url}: {document}")

        try:
            response = self.session.post(url, json=document, timeout=self._settings.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            raise QueryError(f"Query timeout after {self._settings.timeout}s", str(document)) from e
        except requests.exceptions.ConnectionError as e:
            raise QueryError(f"Connection failed: {e}", str(document)) from e
        except requests.exceptions.HTTPError as e:
            error_msg = e.response.text if e.response is not None else str(e)
            raise QueryError(f"Query failed: {error_msg}", str(document)) from e
        except ValueError as e:
            raise QueryError(f"Invalid JSON response: {e}", str(document)) from e

    def close(self) -> None:
        self.session.close()
