#!/usr/bin/env python3
"""
Privacy Guard - Demo Runner

This script demonstrates the full analysis pipeline:
1. Load a privacy policy or terms of service text file
2. Run the LangGraph analysis workflow
3. Output the risk assessment, detected clauses and summary

Usage:
    python run_demo.py                      # Run with the bundled sample policy
    python run_demo.py --file policy.txt    # Run with a custom document
    python run_demo.py --json               # Print the full report as JSON
    python run_demo.py --verbose            # Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

from config.settings import settings

# ASCII art banner
BANNER = """
╔═════════════════════════════════════════════════════════╗
║   🛡️  Privacy Guard                                      ║
║   Privacy Policy & Terms Risk Analyzer                  ║
╚═════════════════════════════════════════════════════════╝
"""

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Privacy Guard - Analyze privacy policies and terms for risky clauses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_demo.py                          Run with sample policy
  python run_demo.py -f terms.txt -t "Terms"  Analyze a custom document
  python run_demo.py --json                   Full JSON report
        """
    )
    parser.add_argument(
        "-f", "--file",
        type=Path,
        default=Path("data/sample_policy.txt"),
        help="Path to document file (default: data/sample_policy.txt)"
    )
    parser.add_argument(
        "-t", "--title",
        default="Privacy Policy",
        help="Page title used to infer the document type"
    )
    parser.add_argument(
        "-u", "--url",
        default=None,
        help="Page URL recorded in the report"
    )
    parser.add_argument(
        "--contact-info",
        action="store_true",
        help="The page lists contact information"
    )
    parser.add_argument(
        "--easy-to-find",
        action="store_true",
        help="The policy link is prominently displayed"
    )
    parser.add_argument(
        "--last-updated",
        default=None,
        help="Last update date (ISO format)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )
    return parser.parse_args()


def load_document(file_path: Path) -> str:
    """
    Load document text from file.
    
    Args:
        file_path: Path to the document.
    
    Returns:
        Document text content.
    
    Raises:
        SystemExit: If file cannot be read.
    """
    try:
        content = file_path.read_text(encoding="utf-8")
        logger.info(f"✅ Loaded document: {file_path} ({len(content):,} characters)")
        return content
    except FileNotFoundError:
        logger.error(f"❌ File not found: {file_path}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"❌ Permission denied: {file_path}")
        sys.exit(1)


def print_report(report) -> None:
    """Print the analysis report with formatting."""
    assessment = report.risk_assessment
    level = assessment.risk_level
    
    print("\n" + "═" * 60)
    print(f"{level.icon}  Score: {assessment.score}/100  |  Risk: {level.label}")
    print(f"   {level.description} (confidence {assessment.confidence:.0%})")
    print("─" * 60)
    
    detections = report.clause_detection.detections
    if detections:
        print("Detected clauses:")
        for clause_id, detection in detections.items():
            print(f"  • {clause_id} ({detection.confidence:.0%}): {detection.summary_text}")
    else:
        print("No sensitive clauses detected.")
    
    print("─" * 60)
    print("Recommendations:")
    for recommendation in assessment.recommendations:
        print(f"  - {recommendation}")
    
    if report.summary:
        print("─" * 60)
        print("Key points:")
        for sentence in report.summary:
            print(f"  > {sentence}")
    print("═" * 60 + "\n")


def main() -> NoReturn | None:
    """
    Main entry point for the demo script.
    
    Orchestrates the full demo pipeline:
    1. Parse CLI arguments
    2. Load document text
    3. Run analysis workflow
    4. Display report
    """
    args = parse_args()
    setup_logging(args.verbose)
    
    from privacy_guard.workflow import run_analysis
    
    print(BANNER)
    
    text = load_document(args.file)
    
    logger.info("🚀 Starting analysis workflow...")
    report = run_analysis(text, {
        "title": args.title,
        "url": args.url,
        "has_contact_info": args.contact_info,
        "easy_to_find": args.easy_to_find,
        "last_updated": args.last_updated,
    })
    
    if not report.success:
        for err in report.errors:
            logger.error(f"❌ {err}")
        sys.exit(1)
    
    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_report(report)
    
    logger.info("✅ Analysis completed successfully!")
    return None


if __name__ == "__main__":
    main()
