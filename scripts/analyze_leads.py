#!/usr/bin/env python3
"""
Analyze businesses: resolve each query on Google Places, benchmark it against
local competitors, and score it A/B/C.

Usage:
    python scripts/analyze_leads.py "Joe's Pizza, Austin TX" "Ace Pest Control, Waco, TX"
    python scripts/analyze_leads.py "https://maps.google.com/..." --category "pest control"
    python scripts/analyze_leads.py "Joe's Pizza, Austin TX" --competitor "Tony's Pizza, Austin TX"
    python scripts/analyze_leads.py ... --workers 4 --output output/analysis.json --no-save

Environment Variables:
    GOOGLE_PLACES_API_KEY: Required. Your Google Places API key.
    PROSPECTOR_DB_PATH: Optional. SQLite file (default data/prospector.db).
"""

import os
import sys
import json
import argparse
import logging
from datetime import datetime, timezone

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.services.analysis_service import analyze_batch

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def save_results(result: dict, filepath: str) -> str:
    """Save analysis results to JSON file."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    output_data = {
        "metadata": {
            "analyzed_at": datetime.now(timezone.utc).isoformat(),
            "total_leads": len(result["leads"]),
        },
        **result,
    }
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(output_data, f, indent=2, ensure_ascii=False)

    logger.info(f"Results saved to: {filepath}")
    return filepath


def print_report(result: dict) -> None:
    logger.info("=" * 60)
    logger.info("ANALYSIS SUMMARY")
    logger.info("=" * 60)
    for lead in result["leads"]:
        flag = " (incomplete data)" if lead.get("incomplete_data") else ""
        logger.info(
            f"[{lead['tier']}] {lead['name']} - {lead.get('rating')} rating, "
            f"{lead.get('review_count')} reviews{flag}"
        )
        logger.info(f"    {lead['gap_analysis']}")
        competitors = result["competitors"].get(lead["id"], [])
        logger.info(f"    Competitors: {len(competitors)}")
        for line in lead.get("scoring", {}).get("benchmarks", []):
            logger.info(f"    - {line}")
    if result["not_found"]:
        logger.info(f"Not found: {result['not_found']}")
    if result["unavailable"]:
        logger.info(f"Provider unavailable: {result['unavailable']}")
    if result["failed"]:
        logger.info(f"Failed: {result['failed']}")
    if result.get("run_id"):
        logger.info(f"Run id: {result['run_id']}")


def main():
    parser = argparse.ArgumentParser(description="Resolve and score businesses against local competitors")
    parser.add_argument("queries", nargs="+", help="Business name with location, or a Google Maps URL")
    parser.add_argument("--category", help="Competitor search term, e.g. 'pest control'")
    parser.add_argument("--competitor", action="append", default=[], help="Named competitor (repeatable)")
    parser.add_argument("--workers", type=int, default=1, help="Concurrent queries (default 1)")
    parser.add_argument("--output", help="Write JSON results to this file")
    parser.add_argument("--no-save", action="store_true", help="Do not persist the run to SQLite")
    args = parser.parse_args()

    try:
        result = analyze_batch(
            queries=args.queries,
            competitors=args.competitor,
            business_category=args.category,
            max_workers=args.workers,
            save=not args.no_save,
        )
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    print_report(result)
    if args.output:
        save_results(result, args.output)


if __name__ == "__main__":
    main()
