"""
================================================================================
Allure Report Utilities
================================================================================

Attachment helpers for UI failure diagnostics and post-run report processing.

Features:
- Screenshot, trace, video and text attachments
- Result summary from allure-results
- HTML report generation with history carry-over

================================================================================
"""

import json
import shutil
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_png(png_bytes: bytes, name: str = "Screenshot"):
    """Attach an in-memory PNG screenshot."""
    allure.attach(
        png_bytes,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


# Playwright artifacts by extension; anything else is attached as plain text.
_FILE_ATTACHMENT_TYPES = {
    ".png": allure.attachment_type.PNG,
    ".webm": allure.attachment_type.WEBM,
    ".json": allure.attachment_type.JSON,
}


def attach_artifact(path: Path, name: Optional[str] = None) -> bool:
    """
    Attach a file produced by Playwright (trace zip, video, storage state).

    Args:
        path: File to attach
        name: Attachment name (defaults to file name)

    Returns:
        True if the file existed and was attached
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"Artifact not found, nothing to attach: {path}")
        return False

    suffix = path.suffix.lower()
    if suffix == ".zip":
        allure.attach.file(str(path), name=name or path.name, extension="zip")
    else:
        allure.attach.file(
            str(path),
            name=name or path.name,
            attachment_type=_FILE_ATTACHMENT_TYPES.get(suffix, allure.attachment_type.TEXT),
        )
    logger.debug(f"Attached artifact: {path}")
    return True


# ================================================================================
# Report Processing
# ================================================================================

@dataclass
class TestResultSummary:
    """Summary of test execution results."""
    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "broken": self.broken,
            "skipped": self.skipped,
            "unknown": self.unknown,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
        }


class AllureReportProcessor:
    """
    Processes Allure results and generates reports.
    """

    def __init__(
        self,
        results_dir: Path,
        report_dir: Optional[Path] = None,
    ):
        """
        Initialize processor.

        Args:
            results_dir: Allure results directory
            report_dir: Output report directory
        """
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")

    def parse_results(self) -> List[Dict[str, Any]]:
        """
        Parse Allure result files.

        Returns:
            List of test result dictionaries
        """
        results = []

        for result_file in sorted(self.results_dir.glob("*-result.json")):
            try:
                with open(result_file, encoding="utf-8") as f:
                    results.append(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to parse {result_file}: {e}")

        return results

    def generate_summary(self) -> TestResultSummary:
        """
        Generate summary from results.

        Re-run attempts share a historyId; only the last attempt counts.
        """
        latest: Dict[str, Dict[str, Any]] = {}
        for index, result in enumerate(self.parse_results()):
            key = result.get("historyId") or result.get("uuid") or str(index)
            previous = latest.get(key)
            if previous is None or result.get("stop", 0) >= previous.get("stop", 0):
                latest[key] = result

        summary = TestResultSummary()
        summary.total = len(latest)

        for result in latest.values():
            status = result.get("status", "unknown")
            if status == "passed":
                summary.passed += 1
            elif status == "failed":
                summary.failed += 1
            elif status == "broken":
                summary.broken += 1
            elif status == "skipped":
                summary.skipped += 1
            else:
                summary.unknown += 1

            summary.duration_ms += result.get("stop", 0) - result.get("start", 0)

        return summary

    def copy_history(self) -> None:
        """Copy history from previous report to results."""
        history_source = self.report_dir / "history"
        history_dest = self.results_dir / "history"

        if history_source.exists():
            if history_dest.exists():
                shutil.rmtree(history_dest)
            shutil.copytree(history_source, history_dest)
            logger.info("Copied history from previous report")

    def generate_report(self) -> bool:
        """
        Generate Allure HTML report.

        Returns:
            True if successful
        """
        self.copy_history()
        cmd = [
            "allure", "generate",
            str(self.results_dir),
            "-o", str(self.report_dir),
            "--clean"
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.warning("Allure CLI not found. Install allure-commandline to generate reports.")
            return False

        if result.returncode != 0:
            logger.error(f"Report generation failed: {result.stderr}")
            return False

        logger.info(f"Report generated at {self.report_dir}")
        return True

    def log_summary(self) -> TestResultSummary:
        """Log the summary and return it."""
        summary = self.generate_summary()
        logger.info("=" * 60)
        logger.info("TEST EXECUTION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Total Tests:    {summary.total}")
        logger.info(f"Passed:         {summary.passed}")
        logger.info(f"Failed:         {summary.failed}")
        logger.info(f"Broken:         {summary.broken}")
        logger.info(f"Skipped:        {summary.skipped}")
        logger.info(f"Pass Rate:      {summary.pass_rate:.2f}%")
        logger.info(f"Duration:       {summary.duration_ms / 1000:.2f}s")
        logger.info("=" * 60)
        return summary


__all__ = [
    "attach_json",
    "attach_text",
    "attach_png",
    "attach_artifact",
    "TestResultSummary",
    "AllureReportProcessor",
]
