from app.config.settings import Settings
from app.pdf.base import BasePdfExtractor
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter

_ENGINES: tuple[type[BasePdfExtractor], ...] = (PdfPlumberAdapter, PyMuPdfAdapter)


class PdfExtractorFactory:
    """Builds the extractor for settings.pdf_engine with the configured text budget."""

    @staticmethod
    def engines() -> list[str]:
        return sorted(adapter.ENGINE for adapter in _ENGINES)

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        requested = settings.pdf_engine.strip().lower()
        for adapter_cls in _ENGINES:
            if adapter_cls.ENGINE == requested:
                return adapter_cls(max_chars=settings.pdf_max_chars)
        raise ValueError(f"Unknown PDF engine '{requested}'. Choose from: {cls.engines()}")
