"""HTTP client for the Immich REST API."""

import logging
from typing import Any

import requests
from pydantic import ValidationError

from ..core.exceptions import AuthenticationError, ConnectionFailedError, ImmichApiError
from ..core.models import Album, DuplicateGroup

logger = logging.getLogger(__name__)


class ImmichApiClient:
    """Talks to an Immich server on behalf of the reconciliation engine."""

    def __init__(
        self,
        server_url: str,
        api_key: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            server_url: Base URL of the Immich server
            api_key: API key sent in the x-api-key header
            timeout: Timeout in seconds applied to every request
            session: Optional preconfigured session
        """
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"x-api-key": api_key, "Accept": "application/json"})

    def __enter__(self) -> "ImmichApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """Send a request, converting transport failures to ImmichApiError."""
        url = f"{self.server_url}{path}"
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ImmichApiError(f"{method} {path} failed: {e}") from e

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        response = self._request("GET", path, params=params)
        if not response.ok:
            raise ImmichApiError(
                f"GET {path} returned {response.status_code}", status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError as e:
            raise ImmichApiError(f"GET {path} returned invalid JSON: {e}") from e

    def validate_connection(self) -> str:
        """
        Check that the server is reachable and the API key is accepted.

        Returns:
            Server version as "major.minor.patch"

        Raises:
            ConnectionFailedError: If the server cannot be reached
            AuthenticationError: If the API key is rejected
        """
        try:
            response = self._request("GET", "/api/server/version")
        except ImmichApiError as e:
            raise ConnectionFailedError(f"Connection failed: {e}") from e

        if not response.ok:
            raise ConnectionFailedError(
                f"Failed to reach server: {response.status_code}", status_code=response.status_code
            )

        try:
            version = response.json() or {}
        except ValueError:
            version = {}
        version_string = (
            f"{version.get('major', '?')}.{version.get('minor', '?')}.{version.get('patch', '?')}"
        )

        try:
            auth_response = self._request("POST", "/api/auth/validateToken")
        except ImmichApiError as e:
            raise ConnectionFailedError(f"Connection failed: {e}") from e

        if not auth_response.ok:
            raise AuthenticationError(
                f"Invalid API key: {auth_response.status_code}",
                status_code=auth_response.status_code,
            )

        logger.info(f"Connected to Immich {version_string} at {self.server_url}")
        return version_string

    def fetch_duplicate_groups(self) -> list[DuplicateGroup]:
        """
        Fetch every duplicate group known to the server.

        Returns:
            Duplicate groups in the order the server returned them

        Raises:
            ImmichApiError: If the request fails or the response is malformed
        """
        data = self._get_json("/api/duplicates") or []
        try:
            groups = [DuplicateGroup.model_validate(item) for item in data]
        except ValidationError as e:
            raise ImmichApiError(f"Unexpected duplicates response: {e}") from e

        logger.info(f"Fetched {len(groups)} duplicate groups")
        return groups

    def fetch_albums_containing(self, asset_id: str) -> list[Album]:
        """
        Fetch the albums that contain an asset.

        Raises:
            ImmichApiError: If the request fails or the response is malformed
        """
        data = self._get_json("/api/albums", params={"assetId": asset_id}) or []
        try:
            return [Album.model_validate(item) for item in data]
        except ValidationError as e:
            raise ImmichApiError(f"Unexpected albums response: {e}") from e

    def _send(self, method: str, path: str, payload: dict[str, Any]) -> requests.Response | None:
        """Send a mutating request; failures are logged and reported as None."""
        try:
            response = self._request(method, path, json=payload)
        except ImmichApiError as e:
            logger.warning(str(e))
            return None

        if not response.ok:
            logger.warning(f"{method} {path} returned {response.status_code}")
            return None
        return response

    def add_asset_to_album(self, album_id: str, asset_id: str) -> bool:
        """Add an asset to an album."""
        response = self._send("PUT", f"/api/albums/{album_id}/assets", {"ids": [asset_id]})
        return response is not None

    def create_stack(self, asset_ids: list[str]) -> str | None:
        """Create a stack from the assets, returning the stack id."""
        response = self._send("POST", "/api/stacks", {"assetIds": asset_ids})
        if response is None:
            return None
        try:
            data = response.json() or {}
        except ValueError:
            logger.warning("Stack created but the response body could not be parsed")
            data = {}
        return str(data.get("id", ""))

    def delete_assets(self, asset_ids: list[str]) -> bool:
        """Move assets to the trash."""
        response = self._send("DELETE", "/api/assets", {"ids": asset_ids})
        return response is not None
