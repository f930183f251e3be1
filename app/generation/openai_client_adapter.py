import httpx
import openai

from app.generation.client_base import BaseGenerationClient
from app.generation.exceptions import GenerationError, GenerationNetworkError


class OpenAIClientAdapter(BaseGenerationClient):
    """Generation client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        max_tokens: int = 500,
        temperature: float = 0.7,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise GenerationNetworkError(f"OpenAI network error: {exc}") from exc
        except openai.APIError as exc:
            raise GenerationNetworkError(f"OpenAI API error: {exc}") from exc

        if not response.choices:
            raise GenerationError("OpenAI returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise GenerationError("OpenAI returned empty response")
        return content

    async def aclose(self) -> None:
        await self._client.close()
