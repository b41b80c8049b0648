"""Archive Listener Client - Call the listener over HTTP"""

import httpx
from pydantic import ValidationError
from typing import Optional

from .models import Answer

DEFAULT_BASE_URL = "http://127.0.0.1:8888"


class ArchiveClient:
    """Client for the archive listener"""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client"""
        if self._client is None:
            # Moves of large trees can take long, no timeout by default
            self._client = httpx.Client(timeout=self.timeout)
            self._owns_client = True
        return self._client

    def _post(self, path: str, payload: dict) -> tuple[bool, Answer]:
        """POST a JSON payload and decode the answer"""
        try:
            response = self._get_client().post(f"{self.base_url}{path}", json=payload)
        except httpx.TimeoutException:
            return False, Answer(message="Request timed out")
        except httpx.RequestError as e:
            return False, Answer(message="Network error", body=str(e))

        try:
            answer = Answer.model_validate(response.json())
        except (ValueError, ValidationError):
            return False, Answer(
                message=f"Unexpected response: {response.status_code}",
                body=response.text
            )

        return response.status_code == 200, answer

    def is_ready(self) -> bool:
        """Check that the listener answers the ready check"""
        try:
            response = self._get_client().get(f"{self.base_url}/")
        except httpx.RequestError:
            return False
        if response.status_code != 200:
            return False
        try:
            return Answer.model_validate(response.json()).message == "Ready"
        except (ValueError, ValidationError):
            return False

    def move(self, src: str, dst: str) -> tuple[bool, Answer]:
        """
        Move a directory tree.

        Returns:
            tuple[bool, Answer]: (success, answer with moved size or error)
        """
        return self._post("/", {"src": src, "dst": dst})

    def size(self, src: str) -> tuple[bool, Answer]:
        """Get the size of a directory tree"""
        return self._post("/size", {"src": src})

    def close(self):
        """Close the HTTP client"""
        if self._client and self._owns_client:
            self._client.close()
        self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
