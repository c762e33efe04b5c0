"""
HTTP client for the spreadsheet-backed memory source.

This module provides a client for reading raw memory records from the
spreadsheet endpoint and writing guesses back to it, with error handling and
optional retry logic for reads.
"""

import time
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from ..config import get_settings
from ..models import GuessSubmission, RawRecord


class APIError(Exception):
    """Custom exception for memory source errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class FetchFailed(APIError):
    """Loading memories failed (network error, non-success response, bad body)."""


class SubmissionFailed(APIError):
    """Writing a guess back to the memory source failed."""


class MemorySourceClient:
    """
    HTTP client for the memory source endpoint.

    The endpoint is a single URL: GET returns every submitted record, POST
    stores one guess. Guess writes are fire-and-forget, so their response is
    logged but never interpreted.
    """

    def __init__(
        self,
        source_url: Optional[str] = None,
        timeout: Optional[int] = None,
        retries: Optional[int] = None
    ):
        """
        Initialize the API client.

        Args:
            source_url: URL of the spreadsheet endpoint
            timeout: Request timeout in seconds
            retries: Retry attempts for failed requests
        """
        settings = get_settings()
        self.source_url = source_url or settings.memory_source_url
        self.timeout = timeout or settings.memory_source_timeout
        self.retries = settings.memory_source_retries if retries is None else retries

        logger.info(f"Initialized MemorySourceClient with source_url: {self.source_url or '<unset>'}")

    def _make_request(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        retries: Optional[int] = None
    ) -> requests.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST)
            params: Query parameters
            json_data: JSON request body
            retries: Number of retry attempts (defaults to the client's)

        Returns:
            requests.Response: HTTP response

        Raises:
            APIError: If the request cannot be sent after all retries
        """
        if not self.source_url:
            raise APIError("Memory source URL is not configured")

        retries = self.retries if retries is None else retries

        for attempt in range(retries + 1):
            try:
                logger.debug(f"Making {method} request to {self.source_url} (attempt {attempt + 1})")

                return requests.request(
                    method=method,
                    url=self.source_url,
                    params=params,
                    json=json_data,
                    timeout=self.timeout
                )

            except requests.exceptions.RequestException as e:
                if attempt < retries:
                    wait_time = 2 ** attempt
                    logger.warning(f"Request failed, retrying in {wait_time}s: {str(e)}")
                    time.sleep(wait_time)
                    continue
                raise APIError(f"Request failed after {retries} retries: {str(e)}")

        raise APIError(f"Request failed after {retries} retries")

    def fetch_records(self) -> List[RawRecord]:
        """
        Retrieve every raw memory record.

        Returns:
            List[RawRecord]: Records exactly as the spreadsheet returns them

        Raises:
            FetchFailed: If the request fails or the body is not a JSON array
        """
        try:
            response = self._make_request("GET")
        except APIError as e:
            raise FetchFailed(e.message, e.status_code)

        if response.status_code != 200:
            raise FetchFailed(f"HTTP {response.status_code}: {response.text}", response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise FetchFailed(f"Failed to parse memories response: {str(e)}")

        if not isinstance(data, list):
            raise FetchFailed(f"Expected a list of memories, got {type(data).__name__}")

        logger.info(f"Fetched {len(data)} raw records from memory source")
        return data

    def submit_guess(self, submission: GuessSubmission) -> None:
        """
        Write a guess to the memory source.

        Only a failure to send counts as an error; whatever the endpoint
        answers is not read back. The write is sent at most once, whatever
        the client retry setting.

        Args:
            submission: Guess to record

        Raises:
            SubmissionFailed: If the request could not be sent
        """
        try:
            response = self._make_request("POST", json_data=submission.to_payload(), retries=0)
        except APIError as e:
            raise SubmissionFailed(e.message, e.status_code)

        logger.debug(f"Guess for {submission.memory_id} sent, endpoint answered HTTP {response.status_code}")
