"""
HTTP client for making requests to the model service API
"""

import logging
import os
import requests
from typing import Any, Optional
from .exceptions import APIError, ResourceNotFoundError, TransportError

logger = logging.getLogger(__name__)


class HTTPClient:
    """Low-level HTTP client for API requests"""

    def __init__(self, api_url: str, timeout: Optional[float] = 30.0):
        """
        Initialize HTTP client

        Args:
            api_url: Base URL of the model service API
            timeout: Per-request timeout in seconds (None disables it)
        """
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

    def url(self, endpoint: str) -> str:
        """Construct full URL for endpoint"""
        endpoint = endpoint.lstrip('/')
        return f"{self.api_url}/{endpoint}"

    def _handle_response(self, response: requests.Response) -> Any:
        """
        Handle API response and raise appropriate exceptions

        Args:
            response: requests Response object

        Returns:
            Decoded JSON body

        Raises:
            ResourceNotFoundError: If the resource does not exist
            APIError: If request failed
        """
        try:
            response_data = response.json()
        except ValueError:
            # empty or non-JSON success bodies (e.g. 204 on delete)
            response_data = {} if response.ok else {"error": response.text}

        if response.status_code == 404:
            detail = response_data.get('detail') if isinstance(response_data, dict) else None
            raise ResourceNotFoundError(
                detail or 'Resource not found',
                response_data=response_data if isinstance(response_data, dict) else None
            )

        if not response.ok:
            detail = response_data.get('detail') if isinstance(response_data, dict) else None
            error_message = detail or f"API request failed with status {response.status_code}"
            raise APIError(
                message=str(error_message),
                status_code=response.status_code,
                response_data=response_data if isinstance(response_data, dict) else None
            )

        return response_data

    def _send(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Send a request, turning transport failures into TransportError"""
        url = self.url(endpoint)
        logger.debug(f"{method} {url}")
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

    def get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """
        Make a GET request

        Args:
            endpoint: API endpoint (e.g., '/api/models/')
            params: Query parameters

        Returns:
            Response data
        """
        response = self._send('GET', endpoint, params=params)
        return self._handle_response(response)

    def post(self, endpoint: str, data: Optional[Any] = None, params: Optional[dict] = None) -> Any:
        """
        Make a POST request

        Args:
            endpoint: API endpoint
            data: Request body data (JSON encoded). None sends no body.
            params: Query parameters

        Returns:
            Response data
        """
        response = self._send('POST', endpoint, json=data, params=params)
        return self._handle_response(response)

    def post_file(self, endpoint: str, file_path: str, field: str = 'file',
                  content_type: str = 'text/csv') -> Any:
        """
        Upload a file as multipart/form-data

        Args:
            endpoint: API endpoint
            file_path: Path of the file to upload
            field: Form field name
            content_type: MIME type of the uploaded file

        Returns:
            Response data
        """
        with open(file_path, 'rb') as fh:
            files = {field: (os.path.basename(file_path), fh, content_type)}
            # Let requests set the multipart boundary header
            response = self._send('POST', endpoint, files=files, headers={'Content-Type': None})
        return self._handle_response(response)

    def get_bytes(self, endpoint: str) -> bytes:
        """
        Make a GET request for a binary payload (e.g. a PNG image)

        Returns:
            bytes: Raw response body
        """
        response = self._send('GET', endpoint)
        if not response.ok:
            # Error bodies are JSON; reuse the standard handling
            self._handle_response(response)
        return response.content

    def delete(self, endpoint: str) -> Any:
        """Make a DELETE request"""
        response = self._send('DELETE', endpoint)
        return self._handle_response(response)
