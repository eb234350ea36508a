"""Клиент удалённого сервиса статического анализа."""

import logging
import httpx
from pydantic import ValidationError

from solidity_analyzer.errors import SubmissionError
from solidity_analyzer.services.api_models import ApiResponse
from solidity_analyzer.services.batching.models import AnalysisBundle

logger = logging.getLogger(__name__)


class AnalyzerClient:
    """Отправка бандлов исходников в сервис анализа."""

    def __init__(self, client: httpx.AsyncClient, api_url: str, api_key: str = ""):
        self.client = client
        self.api_url = api_url
        self.api_key = api_key

    async def submit(self, bundle: AnalysisBundle) -> ApiResponse:
        """
        Отправить бандл и вернуть провалидированный ответ.

        Raises:
            SubmissionError: сетевая ошибка, не-2xx статус или ответ не по контракту
        """
        logger.info(
            f"Sending {len(bundle)} files to API for analysis: {', '.join(bundle.files)}"
        )

        try:
            response = await self.client.post(
                self.api_url,
                json=bundle.to_payload(),
                headers={
                    "Content-Type": "application/json",
                    "X-API-KEY": self.api_key or "",
                },
            )
        except httpx.HTTPError as e:
            raise SubmissionError(f"API request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"API request failed with status: {response.status_code} {response.reason_phrase}"
            )
            raise SubmissionError(
                f"API Request error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SubmissionError(f"API returned invalid JSON: {e}") from e

        try:
            result = ApiResponse.model_validate(data)
        except ValidationError as e:
            raise SubmissionError(f"API response does not match contract: {e}") from e

        if result.error or result.success is False:
            # Частичный ответ: найденное всё равно нормализуется
            logger.warning(f"API reported an error: {result.error or 'success=false'}")

        logger.debug(
            f"Raw API result has {len(result.result or [])} vulnerability entries"
        )
        return result
