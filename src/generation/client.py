"""
HTTP client for the book generation service.

A single POST per submission; retries are left to the user.

Configuration:
- GENERATION_SERVICE_URL: Base URL of the service (default: http://localhost:5000)
- GENERATION_TIMEOUT_SECONDS: Request timeout (default: 120)
"""

import logging
from typing import Optional

import httpx

from src.infra.settings import WizardSettings
from src.wizard.errors import SubmissionError

logger = logging.getLogger("storybook_wizard")

BOOKS_PATH = "/api/books"
DEFAULT_TIMEOUT_SECONDS = 120.0


class GenerationClient:
    """GenerationService over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        api_key: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key

    @classmethod
    def from_settings(cls, settings: WizardSettings, api_key: Optional[str] = None) -> "GenerationClient":
        return cls(settings.generation_service_url, settings.generation_timeout, api_key)

    @property
    def url(self) -> str:
        return f"{self.base_url}{BOOKS_PATH}"

    async def create(self, payload: dict) -> dict:
        """
        Submit a book generation request.

        Args:
            payload: Form state plus extended characters

        Returns:
            Response body with at least the new book "id"

        Raises:
            SubmissionError: On timeout, transport error, non-2xx status or
                a body that is not a JSON object
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "StorybookWizard/1.0",
        }
        if self.api_key:
            headers["X-API-Key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=payload, headers=headers)
        except httpx.TimeoutException:
            raise SubmissionError(f"Generation service timeout after {self.timeout}s") from None
        except httpx.RequestError as e:
            raise SubmissionError(f"Generation service request error: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning(
                f"[Generation] Service rejected request (status={response.status_code})"
            )
            raise SubmissionError(f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as e:
            raise SubmissionError("Generation service returned invalid JSON") from e

        if not isinstance(body, dict):
            raise SubmissionError("Generation service returned an unexpected body")

        logger.info(f"[Generation] Service accepted request (status={response.status_code})")
        return body
