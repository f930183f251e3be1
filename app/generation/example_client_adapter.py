"""Example generation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenerationClient and register the provider in GatewayFactory.
"""

from typing import ClassVar

from app.generation.client_base import BaseGenerationClient


class ExampleClientAdapter(BaseGenerationClient):
    """Example adapter that answers every prompt with a fixed text.

    No network calls. Useful for local development and tests; the default
    answer is the "not related" verdict so a run completes with no results.
    """

    DEFAULT_RESPONSE: ClassVar[str] = "NÃO RELACIONADO"

    def __init__(self, response: str | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    async def generate(self, prompt: str) -> str:
        _ = prompt
        return self._response
