from dataclasses import dataclass, field


@dataclass(frozen=True)
class Verdict:
    """Parsed relevance verdict returned by the generation provider."""

    is_relevant: bool
    raw: str
    criteria: list[int] = field(default_factory=list)
    justification: str = ""
