import httpx
from google import genai
from google.genai import errors, types

from app.generation.client_base import BaseGenerationClient
from app.generation.exceptions import GenerationError, GenerationNetworkError


class GeminiClientAdapter(BaseGenerationClient):
    """Generation client for Google Gemini bound to a single API key."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
    ) -> None:
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_seconds * 1000),
        )
        self._model = model

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
            )
        except httpx.HTTPError as exc:
            raise GenerationNetworkError(f"Gemini network error: {exc}") from exc
        except errors.APIError as exc:
            raise GenerationNetworkError(f"Gemini API error: {exc}") from exc

        # .text is None when every candidate was blocked or carried no text part.
        text = response.text or ""
        if not text.strip():
            raise GenerationError("Gemini returned empty response")
        return text

    async def aclose(self) -> None:
        await self._client.aio.aclose()
