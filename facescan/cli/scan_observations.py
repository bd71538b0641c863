#!/usr/bin/env python
"""
Scan Observations

Scans a batch of images, described by their detector output, against the people
in a profile store file and prints one row per image plus a summary.

The observations file has the same shape as the /scan request body:

    {"images": [{"image_id": "stage.jpg", "width": 1200, "height": 800,
                 "observations": [{"bounding_box": {...}, "detector_score": 0.9,
                                   "embedding": [...], "detection_scale": 1.125}]}]}

Usage:
    python -m facescan.cli.scan_observations --profiles profiles.json --observations batch.json
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from tqdm import tqdm

from facescan.api.models.scan import ScanRequest
from facescan.core.config import MatchingConfig, settings
from facescan.core.exceptions import ProfileStoreError, ScanPreconditionError
from facescan.core.logging import get_logger, scan_context, setup_logging
from facescan.domain.value_objects.scanning import ImageScanResult, ImageScanStatus, ScanReport
from facescan.infrastructure.detection import PrecomputedDetector
from facescan.infrastructure.storage import JsonFileProfileStore
from facescan.services.face_scanning import FaceScanningService

logger = get_logger(__name__)


def format_row(result: ImageScanResult, top_n: int = 3) -> str:
    """One result row: name, face count, matches and tier tag."""
    if result.status == ImageScanStatus.FAILED or result.verdict is None:
        return f"{result.image_id}: error • {result.error}  [FAILED]"
    verdict = result.verdict
    label = "No matches" if verdict.describe(top_n) == "—" else verdict.describe(top_n)
    row = f"{result.image_id}: {verdict.face_count} face(s) detected • {label}  [{verdict.tier.value.upper()}]"
    if result.status == ImageScanStatus.DETECTOR_FAILED:
        row += f" (detector failed: {result.error})"
    return row


async def scan_file(
    profiles_path: Path,
    observations_path: Path,
    threshold: Optional[float] = None,
    possible_band: Optional[float] = None,
) -> ScanReport:
    """Load both files, scan and return the report.

    Raises:
        ProfileStoreError: If the profile file cannot be read
        ValidationError: If the observations file is malformed
        ScanPreconditionError: If no selected person has samples
    """
    store = JsonFileProfileStore(profiles_path)
    with observations_path.open("r", encoding="utf-8") as fh:
        request = ScanRequest.model_validate(json.load(fh))
    overrides = {"threshold": threshold, "possible_band": possible_band}
    request = request.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    scanner = FaceScanningService(PrecomputedDetector(), store)
    config: MatchingConfig = request.apply_to(scanner.config)
    images = [image.to_scan_image() for image in request.images]

    results: List[ImageScanResult] = []
    progress = tqdm(total=len(images), desc="Scanning", unit="image", file=sys.stderr)
    try:
        with scan_context(observations_path.stem):
            async for result in scanner.iter_scan(images, config=config):
                results.append(result)
                progress.update(1)
    finally:
        progress.close()

    return ScanReport(
        results=results,
        threshold=config.threshold,
        possible_cutoff=config.possible_cutoff,
        cancelled=len(results) < len(images),
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Scan detector observations against enrolled people")
    parser.add_argument("--profiles", required=True, type=Path, help="Profile store JSON file")
    parser.add_argument("--observations", required=True, type=Path, help="Observations JSON file")
    parser.add_argument("--threshold", type=float, help=f"FLAGGED distance cutoff (default {settings.THRESHOLD})")
    parser.add_argument("--possible-band", type=float, help=f"POSSIBLE band (default {settings.POSSIBLE_BAND})")
    parser.add_argument("--top", type=int, default=settings.SUMMARY_TOP_N, help="Matches shown per row")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress details to stderr")
    args = parser.parse_args(argv)

    setup_logging(stream=sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    try:
        report = asyncio.run(scan_file(args.profiles, args.observations, args.threshold, args.possible_band))
    except ScanPreconditionError as e:
        print(f"{e}. Check filters and enroll samples first.", file=sys.stderr)
        return 2
    except (ProfileStoreError, ValidationError, OSError, json.JSONDecodeError) as e:
        logger.error("Scan failed", error=str(e))
        print(f"Scan failed: {e}", file=sys.stderr)
        return 1

    for result in report.results:
        print(format_row(result, args.top))
    print(report.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
