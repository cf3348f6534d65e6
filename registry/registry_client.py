"""HTTP client for communicating with the cache registry service."""

import uuid
from typing import List, Optional

import httpx
from pydantic import ValidationError

from common.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    ENTRY_REFUSED_STATUS,
    NO_ENTRY,
    REQUEST_ID_HEADER,
)
from common.logging_config import get_logger
from common.types import CacheEntry
from overlay.exceptions import CacheRegistryError
from registry.schemas import (
    CreateEntryRequest,
    EntryIdResponse,
    EntryResponse,
    LocationsResponse,
)

logger = get_logger(__name__)


class CacheRegistryClient:
    """
    HTTP client for the cache registry.

    Unknown paths and ids (404) come back as NO_ENTRY, an empty host list
    or None; a creation the registry declines (422) comes back as NO_ENTRY.
    Any other error status and transport errors raise CacheRegistryError.
    Requests are never retried.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        """
        Initialize registry client.

        Args:
            base_url: Registry base URL (e.g., "http://registry:19998")
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.session = httpx.Client(base_url=base_url, timeout=timeout)
        self.request_id = None
        logger.info(f"Initialized CacheRegistryClient [base_url={base_url}]")

    @classmethod
    def for_address(cls, host: str, port: int, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> "CacheRegistryClient":
        """Create a client bound to host:port."""
        return cls(f"http://{host}:{port}", timeout=timeout)

    def _request(self, method: str, endpoint: str, accept=(), **kwargs) -> httpx.Response:
        """
        Send a single request to the registry.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            accept: Error statuses returned to the caller instead of raised
            **kwargs: Additional arguments passed to httpx

        Returns:
            Response with a success status or one of the accepted statuses

        Raises:
            CacheRegistryError: On transport failure or any other error status
        """
        self.request_id = str(uuid.uuid4())
        headers = kwargs.pop('headers', {})
        headers[REQUEST_ID_HEADER] = self.request_id

        logger.debug(f"Registry request: {method} {endpoint} [request_id={self.request_id}]")

        try:
            response = self.session.request(method, endpoint, headers=headers, **kwargs)
        except httpx.ConnectError as e:
            raise CacheRegistryError(f"Cannot connect to cache registry at {self.base_url}: {e}")
        except httpx.TimeoutException:
            raise CacheRegistryError(f"Cache registry request timed out: {method} {endpoint}")
        except httpx.HTTPError as e:
            raise CacheRegistryError(f"Cache registry request failed: {method} {endpoint}: {e}")

        logger.debug(
            f"Registry response: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
        )

        if response.status_code >= 400 and response.status_code not in accept:
            raise CacheRegistryError(
                f"Cache registry error: {method} {endpoint} status={response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _parse(self, model, response: httpx.Response):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise CacheRegistryError(
                f"Malformed registry response for {response.request.url}: {e}",
                status_code=response.status_code,
            )

    def get_entry_id(self, raw_path: str) -> int:
        """
        Look up the entry id registered for raw_path.

        Returns:
            Entry id, or NO_ENTRY if the registry does not know the path
        """
        response = self._request('GET', '/entries', accept=(404,), params={'path': raw_path})
        if response.status_code == 404:
            return NO_ENTRY
        return self._parse(EntryIdResponse, response).entry_id

    def create_entry(self, raw_path: str) -> int:
        """
        Ask the registry to create an entry for raw_path.

        The registry keeps one entry per raw path; when a concurrent caller
        won the race (409), the existing id is looked up and returned.

        Returns:
            New or existing entry id, or NO_ENTRY if creation was refused
        """
        payload = CreateEntryRequest(path=raw_path).model_dump()
        response = self._request('POST', '/entries', accept=(409, ENTRY_REFUSED_STATUS), json=payload)

        if response.status_code == 409:
            logger.info(f"Entry for {raw_path} created concurrently, looking it up")
            return self.get_entry_id(raw_path)
        if response.status_code == ENTRY_REFUSED_STATUS:
            logger.warning(f"Registry refused entry creation for {raw_path}")
            return NO_ENTRY
        return self._parse(EntryIdResponse, response).entry_id

    def get_replica_hosts(self, entry_id: int) -> List[str]:
        """
        Fetch the hosts holding a replica of an entry, in registry order.

        Returns:
            Host names; empty if the entry is unknown or has no replicas
        """
        response = self._request('GET', f'/entries/{entry_id}/locations', accept=(404,))
        if response.status_code == 404:
            return []
        return [address.host for address in self._parse(LocationsResponse, response).locations]

    def get_entry(self, entry_id: int) -> Optional[CacheEntry]:
        """
        Fetch the full record of an entry.

        Returns:
            CacheEntry, or None if the registry does not know the id
        """
        response = self._request('GET', f'/entries/{entry_id}', accept=(404,))
        if response.status_code == 404:
            return None
        data = self._parse(EntryResponse, response)
        return CacheEntry(
            entry_id=data.entry_id,
            raw_path=data.path,
            replica_hosts=tuple(data.replica_hosts),
        )

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
