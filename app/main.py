import argparse
import asyncio
import json
import sys
from collections.abc import Callable
from dataclasses import asdict
from pathlib import Path

import httpx

from app.config.settings import Settings
from app.logging.logger import Log
from app.processor.models import AnalysisOutcome
from app.processor.service import build_analysis_service
from app.registry.exceptions import RegistryError

MIN_CASE_LENGTH = 50
MAX_CANDIDATES_LIMIT = 10000
MAX_RESULTS_LIMIT = 100

EXIT_NO_DATA = 1
EXIT_REGISTRY_UNAVAILABLE = 2


def _bounded_int(low: int, high: int) -> Callable[[str], int]:
    def parse(raw: str) -> int:
        try:
            value = int(raw)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"'{raw}' is not an integer") from exc
        if not low <= value <= high:
            raise argparse.ArgumentTypeError(f"must be between {low} and {high}")
        return value

    return parse


def parse_args(argv: list[str] | None, settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jurisprudence-analyzer",
        description="Find TCU decisions relevant to a concrete case.",
    )
    parser.add_argument("case", nargs="?", help="Case description text")
    parser.add_argument("--case-file", type=Path, help="Read the case description from a file")
    parser.add_argument(
        "--max-candidates",
        type=_bounded_int(1, MAX_CANDIDATES_LIMIT),
        default=settings.default_max_candidates,
    )
    parser.add_argument(
        "--max-results",
        type=_bounded_int(1, MAX_RESULTS_LIMIT),
        default=settings.default_max_results,
    )
    args = parser.parse_args(argv)

    if args.case_file is not None:
        try:
            args.case = args.case_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            parser.error(f"cannot read case file {args.case_file}: {exc}")
    if not args.case or len(args.case.strip()) < MIN_CASE_LENGTH:
        parser.error(f"case description must have at least {MIN_CASE_LENGTH} characters")
    args.case = args.case.strip()
    return args


async def analyze(settings: Settings, args: argparse.Namespace) -> AnalysisOutcome:
    async with httpx.AsyncClient() as http_client:
        service = build_analysis_service(settings, http_client)
        return await service.run(args.case, args.max_candidates, args.max_results)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> run one analysis -> print JSON outcome."""
    settings = Settings()
    Log.configure(settings.log_level)
    args = parse_args(argv, settings)

    try:
        outcome = asyncio.run(analyze(settings, args))
    except RegistryError as exc:
        Log.error(f"Candidate registry unavailable: {exc}")
        return EXIT_REGISTRY_UNAVAILABLE

    payload = asdict(outcome)
    payload["total_relevant"] = outcome.total_relevant
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return EXIT_NO_DATA if outcome.no_data else 0


if __name__ == "__main__":
    sys.exit(main())
