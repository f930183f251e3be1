"""Text generation with credential rotation and provider fallback."""

import asyncio
from collections.abc import Callable

from app.generation.client_base import BaseGenerationClient
from app.generation.exceptions import AllProvidersFailedError, GenerationError
from app.generation.rotator import CredentialRotator
from app.logging.logger import Log

PrimaryClientFactory = Callable[[str], BaseGenerationClient]


class GenerationGateway:
    """Produces text from the primary provider, falling back to the secondary.

    Primary attempts walk the shared CredentialRotator: each failure advances
    it, so later calls start from the first credential not yet known to fail.
    Any exception a provider client raises counts as a failure of that
    provider, not only the GenerationError family the adapters map to.
    """

    def __init__(
        self,
        *,
        rotator: CredentialRotator,
        primary_client_factory: PrimaryClientFactory,
        secondary_client: BaseGenerationClient | None = None,
        backoff_seconds: float = 2.0,
        max_attempts: int | None = None,
    ) -> None:
        self._rotator = rotator
        self._primary_client_factory = primary_client_factory
        self._secondary_client = secondary_client
        self._backoff_seconds = backoff_seconds
        self._max_attempts = max_attempts
        self._primary_clients: dict[str, BaseGenerationClient] = {}

    @property
    def rotator(self) -> CredentialRotator:
        return self._rotator

    async def generate(self, prompt: str, *, max_attempts: int | None = None) -> str:
        """Generate text for prompt.

        Args:
            prompt: Full user prompt sent to the provider.
            max_attempts: Lowers the primary attempt cap for this call. The
                cap never exceeds the number of configured credentials.

        Raises:
            AllProvidersFailedError: if neither provider produced text.
        """
        cap = max_attempts if max_attempts is not None else self._max_attempts
        try:
            return await self._generate_with_primary(prompt, cap)
        except GenerationError as exc:
            last_error = exc

        if self._secondary_client is None:
            raise AllProvidersFailedError(
                f"Primary provider failed and no fallback is configured: {last_error}"
            ) from last_error

        Log.warning("Falling back to secondary generation provider")
        try:
            return await self._secondary_client.generate(prompt)
        except Exception as exc:
            Log.error(f"Secondary generation provider failed: {exc}")
            raise AllProvidersFailedError(
                f"All generation providers failed: {exc}"
            ) from exc

    async def _generate_with_primary(self, prompt: str, max_attempts: int | None) -> str:
        attempts_cap = len(self._rotator)
        if max_attempts is not None and 0 < max_attempts < attempts_cap:
            attempts_cap = max_attempts

        attempts = 0
        last_error: Exception | None = None
        while attempts < attempts_cap and not self._rotator.exhausted:
            credential = self._rotator.current_credential()
            if credential is None:
                break
            key_position = self._rotator.index + 1
            try:
                return await self._primary_client(credential).generate(prompt)
            except Exception as exc:
                last_error = exc
                attempts += 1
                Log.warning(
                    f"Primary provider failed with key #{key_position} "
                    f"(attempt {attempts}/{attempts_cap}): {exc}"
                )
                switched = self._rotator.advance()
                if not switched:
                    Log.error("All primary provider keys are exhausted")
                    break
                if attempts >= attempts_cap:
                    break
                Log.info(f"Switched to primary provider key #{self._rotator.index + 1}")
                await asyncio.sleep(self._backoff_seconds)

        raise GenerationError(
            f"Primary provider unavailable: {last_error or 'no usable keys'}"
        ) from last_error

    def _primary_client(self, credential: str) -> BaseGenerationClient:
        client = self._primary_clients.get(credential)
        if client is None:
            client = self._primary_client_factory(credential)
            self._primary_clients[credential] = client
        return client

    async def aclose(self) -> None:
        """Close every provider client this gateway created or was given."""
        clients = list(self._primary_clients.values())
        if self._secondary_client is not None:
            clients.append(self._secondary_client)
        self._primary_clients.clear()
        for client in clients:
            try:
                await client.aclose()
            except Exception as exc:
                Log.warning(f"Closing generation client failed: {exc}")
