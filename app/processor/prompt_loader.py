from pathlib import Path

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a bundled prompt template by file name.

    Args:
        name: Template file name, e.g. "summary_prompt.txt".
        prompt_dir: Directory holding the templates.
                    Defaults to the bundled prompts/ directory.

    Returns:
        The raw template string with placeholders.

    Raises:
        OSError: if the file cannot be read.
    """
    directory = prompt_dir if prompt_dir is not None else _DEFAULT_PROMPT_DIR
    return (directory / name).read_text(encoding="utf-8")


class PromptBuilder:
    """Fills the summary and relevance templates with document text."""

    def __init__(self, *, text_limit: int = 8000, prompt_dir: Path | None = None) -> None:
        self._text_limit = text_limit
        self._summary_template = load_prompt_template("summary_prompt.txt", prompt_dir)
        self._relevance_template = load_prompt_template("relevance_prompt.txt", prompt_dir)

    def summary(self, document_text: str) -> str:
        return self._summary_template.format(document_text=self._truncate(document_text))

    def relevance(self, document_text: str, case_description: str) -> str:
        return self._relevance_template.format(
            case_description=case_description,
            document_text=self._truncate(document_text),
        )

    def _truncate(self, text: str) -> str:
        return text[: self._text_limit]
