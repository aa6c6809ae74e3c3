"""
HTTP client for the prediction API used by warm calls.

This module wraps the two endpoints the warmer talks to (prediction creation
and prediction status) and maps non-success responses onto the package's
warming exceptions.
"""

import aiohttp
from typing import Optional, Dict, Any
from loguru import logger
from prewarm.constants import STATUS_PATH, WARM_PATH
from prewarm.exception import HttpStatusError, PollFetchError
from prewarm.warmer.state import Prediction


class PredictionClient:
    """
    Asynchronous HTTP client for the prediction API.

    Example:
        >>> async with PredictionClient("http://127.0.0.1:3000") as client:
        ...     prediction = await client.create_warm_prediction(source, "/gifs/thumbs_up.gif")
        ...     prediction = await client.get_prediction(prediction.prediction_id)
    """

    def __init__(
        self,
        base_url: str,
        warm_path: str = WARM_PATH,
        status_path: str = STATUS_PATH,
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            base_url: Base URL for all requests (e.g., "http://127.0.0.1:3000").
            warm_path: Path of the warm prediction creation endpoint.
            status_path: Status path template containing `{prediction_id}`.
            timeout: Optional custom timeout configuration.
        """
        self.base_url = base_url
        self.warm_path = warm_path
        self.status_path = status_path
        self.timeout = timeout or aiohttp.ClientTimeout(total=60)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Enter async context manager."""
        self._session = aiohttp.ClientSession(base_url=self.base_url, timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context manager and cleanup session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def _read(self, method: str, path: str, resp: aiohttp.ClientResponse) -> Dict:
        if not resp.ok:
            error_text = await resp.text(errors="replace")
            logger.error(f"{method} {path} failed with status {resp.status}: {error_text}")
            raise HttpStatusError(resp.status)
        return await resp.json()

    async def post(self, path: str, data: Any = None, **kwargs) -> Dict:
        """
        Send a JSON POST request.

        Raises:
            HttpStatusError: On a non-success status.
            aiohttp.ClientError: On transport errors.
        """
        logger.debug(f"POST {path}")
        async with self._session.post(path, json=data, **kwargs) as resp:
            return await self._read("POST", path, resp)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Dict:
        """
        Send a GET request.

        Raises:
            HttpStatusError: On a non-success status.
            aiohttp.ClientError: On transport errors.
        """
        logger.debug(f"GET {path} with params={params}")
        async with self._session.get(path, params=params, **kwargs) as resp:
            return await self._read("GET", path, resp)

    async def create_warm_prediction(self, source: str, target: str) -> Prediction:
        """
        Create the warming prediction.

        Args:
            source: Data URI of the source image.
            target: Reference of the target animation.
        """
        body = await self.post(self.warm_path, {"source": source, "target": target})
        return Prediction.model_validate(body)

    async def get_prediction(self, prediction_id: str) -> Prediction:
        """
        Fetch the current state of a prediction.

        Raises:
            PollFetchError: When the status endpoint returns a non-success status.
        """
        try:
            body = await self.get(self.status_path.format(prediction_id=prediction_id))
        except HttpStatusError as exc:
            raise PollFetchError(exc.status) from exc
        return Prediction.model_validate(body)
