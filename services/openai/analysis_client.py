"""Description: Plant disease analysis through an OpenAI-compatible chat completions gateway."""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from models.analysis_record import AnalysisRecord, SourceImage
from models.languages import Language, get_language
from services.openai.analysis_prompts import build_system_prompt, build_user_prompt
from services.openai.errors import AnalysisError, AnalysisErrorKind, ParseError
from services.openai.media_inputs import build_messages
from services.openai.response_parser import extract_message_content, extract_usage, parse_analysis
from utils.settings import DEFAULT_MODEL, DEFAULT_TEMPERATURE, Settings

LOGGER = logging.getLogger(__name__)


class PlantAnalysisClient:
    """Send a plant photo to the model and return a validated diagnosis.

    Every call to `analyze` issues at most one HTTP request. The SDK's own
    retry loop is disabled; retrying is left to the caller.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        """Initialize with an async OpenAI client, or None when no credential is configured."""
        self.client = client.with_options(max_retries=0) if client is not None else None
        self.model = model
        self.temperature = temperature

    @classmethod
    def from_settings(
        cls, settings: Settings, *, http_client: Optional[httpx.AsyncClient] = None
    ) -> "PlantAnalysisClient":
        """Build a client from settings; without an API key no SDK client is created."""
        client = None
        if settings.api_key:
            client = AsyncOpenAI(
                api_key=settings.api_key,
                base_url=settings.base_url,
                max_retries=0,
                http_client=http_client,
            )
        return cls(client, model=settings.model, temperature=settings.temperature)

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def analyze(self, image: SourceImage, language: str) -> AnalysisRecord:
        """Diagnose `image` with free-text fields written in `language`.

        Args:
            image: The uploaded plant photo.
            language: Catalog code of the report language.

        Returns:
            The validated AnalysisRecord.

        Raises:
            UnknownLanguageError: If `language` is not in the catalog.
            ValueError: If the image is empty.
            AnalysisError: For every failure once the input is accepted.
        """
        target = get_language(language)
        if not image.data:
            raise ValueError("Image content is required for analysis.")
        if self.client is None:
            raise AnalysisError(AnalysisErrorKind.CONFIGURATION, "AI gateway API key is not configured.")

        start_time = time.time()
        messages = build_messages(build_system_prompt(target), build_user_prompt(target), image)
        completion = await self._create_completion(messages, target)

        content = extract_message_content(completion)
        if content is None:
            LOGGER.error("Analysis reply carried no message content.")
            raise AnalysisError(AnalysisErrorKind.EMPTY_RESPONSE)
        LOGGER.debug("Raw analysis reply: %s", content)

        try:
            record = parse_analysis(content)
        except ParseError as exc:
            LOGGER.error("Could not extract a record from the analysis reply: %s", exc.reason)
            raise AnalysisError(AnalysisErrorKind.MALFORMED_RESPONSE, exc.reason) from exc

        usage = extract_usage(completion)
        LOGGER.info(
            "Plant analysis in %s completed in %.3fs (model=%s, input_tokens=%s, output_tokens=%s)",
            target.code,
            time.time() - start_time,
            self.model,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return record

    async def _create_completion(self, messages: List[Dict[str, Any]], target: Language) -> Any:
        """Send the request and classify any non-success outcome."""
        LOGGER.info("Analyzing plant disease with language: %s", target.code)
        try:
            return await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
            )
        except openai.APIStatusError as exc:
            raise self._classify_status(exc) from exc
        except openai.APIConnectionError as exc:
            LOGGER.error("AI gateway connection error: %s", exc)
            raise AnalysisError(AnalysisErrorKind.UPSTREAM_FAILURE, str(exc)) from exc
        except openai.APIError as exc:
            LOGGER.error("AI gateway returned an unusable response: %s", exc)
            raise AnalysisError(AnalysisErrorKind.UPSTREAM_FAILURE, str(exc)) from exc

    @staticmethod
    def _classify_status(exc: openai.APIStatusError) -> AnalysisError:
        """Map an HTTP error status from the gateway to an AnalysisError."""
        if exc.status_code == 429:
            LOGGER.warning("AI gateway rate limit hit.")
            return AnalysisError(AnalysisErrorKind.RATE_LIMITED)
        if exc.status_code == 402:
            LOGGER.warning("AI gateway reports payment required.")
            return AnalysisError(AnalysisErrorKind.PAYMENT_REQUIRED)

        body = exc.response.text or exc.message
        LOGGER.error("AI gateway error: %s %s", exc.status_code, body)
        return AnalysisError(AnalysisErrorKind.UPSTREAM_FAILURE, body)
