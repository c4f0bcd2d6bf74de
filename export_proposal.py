#!/usr/bin/env python3
"""
Proposal Export Script.

Usage:
    python export_proposal.py request.json                  # PDF into ./exports
    python export_proposal.py request.json --format both    # PDF and DOCX
    python export_proposal.py request.json --out build/ -v  # Custom dir, debug logs
"""
import sys
import argparse
import logging
from pathlib import Path

from proposal_studio.config import Config
from services.export_service import export_proposal, load_proposal_file, save_artifact

logger = logging.getLogger("ProposalStudio.CLI")

FORMAT_CHOICES = {
    "pdf": ("pdf",),
    "docx": ("docx",),
    "both": ("pdf", "docx"),
}


def run_export(request_path: Path, fmt: str, out_dir: Path) -> int:
    proposal, company = load_proposal_file(request_path)
    logger.info("Loaded '%s' with %d sections", proposal.display_title, len(proposal.sections))

    for target in FORMAT_CHOICES[fmt]:
        artifact = export_proposal(proposal, company, target)
        path = save_artifact(artifact, out_dir)
        print(f"✅ {target.upper()} written to {path} ({artifact.size} bytes)")
        for notice in artifact.notices:
            print(f"   ⚠️  {notice}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Export a proposal to PDF and/or DOCX")
    parser.add_argument("request", type=Path, help="JSON export request (proposal + company)")
    parser.add_argument("--format", dest="fmt", choices=sorted(FORMAT_CHOICES), default="pdf",
                        help="Output format (default: pdf)")
    parser.add_argument("--out", type=Path, default=Config.EXPORT_DIR,
                        help=f"Output directory (default: {Config.EXPORT_DIR})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        return run_export(args.request, args.fmt, args.out)
    except Exception as e:
        logger.error("Export failed: %s", e, exc_info=args.verbose)
        print(f"❌ Export failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
