from dataclasses import dataclass
from typing import Any


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class CandidateDocument:
    """One decision record from the registry, referencing a downloadable PDF."""

    id: str | None
    title: str | None = None
    year: str | None = None
    rapporteur: str | None = None
    decision_type: str | None = None
    session_date: str | None = None
    collegiate: str | None = None
    pdf_url: str | None = None

    @classmethod
    def from_registry_record(cls, record: dict[str, Any]) -> "CandidateDocument":
        """Build a candidate from a raw registry JSON object."""
        return cls(
            id=_as_text(record.get("numeroAcordao")),
            title=_as_text(record.get("titulo")),
            year=_as_text(record.get("anoAcordao")),
            rapporteur=_as_text(record.get("relator")),
            decision_type=_as_text(record.get("tipo")),
            session_date=_as_text(record.get("dataSessao")),
            collegiate=_as_text(record.get("colegiado")),
            pdf_url=_as_text(record.get("urlArquivoPdf")),
        )
