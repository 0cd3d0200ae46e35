"""Minimal CLI demo for the analysis pipeline.

Not production-facing: runs one document through the full pipeline and
prints the headline results, or the whole wire-format result with --json.

    python -m docinsightbot.cli_demo offer.txt [--type offer_letter] [--json]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

from .analysis.doc_types import DOCUMENT_TYPES
from .analysis.schemas import AnalysisOutcome
from .pipeline import DocumentAnalysisPipeline, PipelineConfig


def _print_outcome(outcome: AnalysisOutcome) -> None:
    result, metrics = outcome.result, outcome.metrics

    print(f"\n--- {result.institution.name} ---")
    print(f"Program: {result.institution.program}")
    print(f"Location: {result.institution.location}")
    print("\nSummary:")
    print(result.summary)

    if result.opportunities:
        print("\nFunding Opportunities:")
        for i, o in enumerate(result.opportunities, 1):
            print(f"{i}. {o.name} ({o.match_type}, {o.profile_match.overall_match}%) - {o.amount}")

    if result.recommendations:
        print("\nRecommendations:")
        for i, r in enumerate(result.recommendations, 1):
            print(f"{i}. [{r.priority}] {r.recommendation}")

    if result.next_steps:
        print("\nNext Steps:")
        for i, s in enumerate(result.next_steps, 1):
            print(f"{i}. {s.step} (deadline: {s.deadline})")

    print(
        f"\ntier={metrics.degradation_tier.value} tokens={metrics.tokens_used} "
        f"time={metrics.processing_time_ms}ms"
    )


def run_cli(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a document's text.")
    parser.add_argument("path", type=Path, help="Plain-text file with the document contents")
    parser.add_argument("--type", dest="document_type", default="offer_letter", choices=sorted(DOCUMENT_TYPES))
    parser.add_argument("--verify-links", action="store_true", help="Check official scholarship pages")
    parser.add_argument("--json", action="store_true", help="Print the full camelCase result")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    text = args.path.read_text(encoding="utf-8")
    pipeline = DocumentAnalysisPipeline(config=PipelineConfig(verify_links=args.verify_links))
    outcome = asyncio.run(pipeline.analyze(text, file_name=args.path.name, document_type=args.document_type))

    if args.json:
        print(json.dumps(outcome.to_wire(), ensure_ascii=False, indent=2))
    else:
        _print_outcome(outcome)


if __name__ == "__main__":
    run_cli()
