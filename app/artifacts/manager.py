"""Scoped temporary storage for downloaded decision documents."""

import asyncio
import hashlib
import re
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx

from app.artifacts.exceptions import (
    DownloadFailedError,
    DownloadTimeoutError,
    NoExtractableTextError,
)
from app.logging.logger import Log
from app.pdf.base import BasePdfExtractor

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def artifact_file_name(url: str, document_id: str, timestamp_ns: int) -> str:
    """Build a collision-resistant file name: {safe_id}_{digest}.pdf"""
    digest = hashlib.sha256(f"{url}|{document_id}|{timestamp_ns}".encode()).hexdigest()
    safe_id = _UNSAFE_CHARS.sub("-", document_id).strip("-")[:40] or "document"
    return f"{safe_id}_{digest[:24]}.pdf"


class ArtifactManager:
    """Downloads a document to temporary storage, extracts its text, deletes it.

    Every file this manager creates is removed before control returns from
    the scope that created it. Callers may also pass an ``outstanding`` set;
    live paths are tracked there so a batch can sweep them with release().
    """

    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        pdf_extractor: BasePdfExtractor,
        temp_dir: Path,
        download_timeout_seconds: float = 30.0,
    ) -> None:
        self._http_client = http_client
        self._pdf_extractor = pdf_extractor
        self._temp_dir = temp_dir
        self._download_timeout_seconds = download_timeout_seconds

    async def fetch_text(
        self,
        url: str,
        document_id: str,
        outstanding: set[Path] | None = None,
    ) -> str:
        """Download the document at url and return its extracted text.

        Raises:
            DownloadFailedError: on HTTP errors or an empty download.
            DownloadTimeoutError: if the download exceeds its timeout.
            NoExtractableTextError: if the document holds no readable text.
            PdfExtractionError: if the file is not a readable PDF.
        """
        async with self.artifact(url, document_id, outstanding) as path:
            text = await asyncio.to_thread(self._pdf_extractor.extract_file, path)
        if not text.strip():
            raise NoExtractableTextError(f"No text could be extracted from document {document_id}")
        Log.info(f"Extracted {len(text)} chars from document {document_id}")
        return text

    @asynccontextmanager
    async def artifact(
        self,
        url: str,
        document_id: str,
        outstanding: set[Path] | None = None,
    ) -> AsyncIterator[Path]:
        """Yield a local copy of the document, deleting it on every exit path."""
        path = self._temp_dir / artifact_file_name(url, document_id, time.time_ns())
        if outstanding is not None:
            outstanding.add(path)
        try:
            if path.exists() and path.stat().st_size > 0:
                Log.debug(f"Reusing downloaded file {path.name} for document {document_id}")
            else:
                await self._download(url, path)
            yield path
        finally:
            self._delete(path)
            if outstanding is not None:
                outstanding.discard(path)

    def release(self, paths: set[Path]) -> int:
        """Delete every path in paths and clear the set. Returns files removed."""
        removed = 0
        for path in list(paths):
            if self._delete(path):
                removed += 1
            paths.discard(path)
        if removed:
            Log.warning(f"Released {removed} outstanding temporary files")
        return removed

    async def _download(self, url: str, path: Path) -> None:
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        size = 0
        try:
            async with self._http_client.stream(
                "GET",
                url,
                headers={"User-Agent": self.USER_AGENT},
                timeout=self._download_timeout_seconds,
                follow_redirects=True,
            ) as response:
                response.raise_for_status()
                with path.open("wb") as handle:
                    async for chunk in response.aiter_bytes(self.DOWNLOAD_CHUNK_SIZE):
                        handle.write(chunk)
                        size += len(chunk)
        except httpx.TimeoutException as exc:
            raise DownloadTimeoutError(
                f"Download exceeded {self._download_timeout_seconds}s: {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise DownloadFailedError(f"Download failed for {url}: {exc}") from exc
        except OSError as exc:
            raise DownloadFailedError(f"Cannot write {path.name}: {exc}") from exc

        if size == 0:
            raise DownloadFailedError(f"Downloaded file is empty: {url}")
        Log.debug(f"Downloaded {size} bytes to {path.name}")

    @staticmethod
    def _delete(path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            Log.warning(f"Cleanup failed for temporary file {path.name}: {exc}")
            return False
        return True
