"""
Console entry point.

    $ portal-sync
    Paste the company URL here: https://www.annualreports.com/Company/acme-corp

Exit status is 0 when the run succeeded, skipped a known page, or got no
input, and 1 when it aborted.
"""

import asyncio
import logging
import sys

from . import config
from .ledger import Ledger
from .orchestrator import Orchestrator, RunReport
from .scraper import Extractor
from .submitter import Submitter

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s | %(levelname)s | %(message)s')
logger = logging.getLogger(__name__)


def ask_user(question: str) -> str:
    """Prompt once on the terminal; EOF counts as no input."""
    try:
        return input(question).strip()
    except EOFError:
        return ""


def build_orchestrator() -> Orchestrator:
    return Orchestrator(
        ledger=Ledger(config.LEDGER_FILE),
        extractor=Extractor(config.DATA_DIR),
        submitter=Submitter(upload_url=config.UPLOAD_URL),
        prompt=ask_user,
    )


def main() -> int:
    """CLI entry"""
    try:
        report: RunReport = asyncio.run(build_orchestrator().run())
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 1
    except Exception as e:
        logger.exception(f"❌ Unexpected error: {e}")
        return 1

    logger.info(f"Run finished: {report.outcome.value} ({' → '.join(s.value for s in report.path)})")
    return 1 if report.outcome.aborted else 0


if __name__ == "__main__":
    sys.exit(main())
