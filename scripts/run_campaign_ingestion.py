"""
Run competitor campaign ingestion from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from app.services.campaign_ingestion_service import CampaignIngestionService
from llm_extraction.adapter import ConfigurationMissing


def main() -> int:
    parser = argparse.ArgumentParser(description="Run competitor campaign ingestion once.")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        help="Root log level (default: INFO).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = CampaignIngestionService()
    try:
        summary = service.ingest()
    except ConfigurationMissing as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))
    return 1 if summary.skipped else 0


if __name__ == "__main__":
    raise SystemExit(main())
