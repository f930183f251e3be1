"""HTTP client for the TCU open-data decision registry."""

from typing import ClassVar

import httpx

from app.logging.logger import Log
from app.registry.base import BaseCandidateRegistry
from app.registry.exceptions import RegistryTimeoutError, RegistryUnavailableError
from app.registry.models import CandidateDocument


class TcuRegistryClient(BaseCandidateRegistry):
    """Fetches decision records from the TCU 'recupera-acordaos' endpoint."""

    ENDPOINT: ClassVar[str] = "/api/acordao/recupera-acordaos"
    HEADERS: ClassVar[dict[str, str]] = {
        "Accept": "application/json",
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    }

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout_seconds: float,
    ) -> None:
        self._http_client = http_client
        self._url = base_url.rstrip("/") + self.ENDPOINT
        self._timeout_seconds = timeout_seconds

    async def fetch(self, max_count: int) -> list[CandidateDocument]:
        Log.info(f"Fetching up to {max_count} decisions from registry")
        try:
            response = await self._http_client.get(
                self._url,
                params={"inicio": 0, "quantidade": max_count},
                headers=self.HEADERS,
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise RegistryTimeoutError(
                f"Registry did not answer within {self._timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise RegistryUnavailableError(f"Registry request failed: {exc}") from exc
        except ValueError as exc:
            raise RegistryUnavailableError(f"Registry returned invalid JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise RegistryUnavailableError("Registry response must be a list of records")

        candidates: list[CandidateDocument] = []
        for index, record in enumerate(payload[:max_count]):
            if not isinstance(record, dict):
                Log.warning(f"Skipping registry entry {index}: not an object")
                continue
            candidates.append(CandidateDocument.from_registry_record(record))
        Log.info(f"Registry returned {len(candidates)} decisions")
        return candidates
