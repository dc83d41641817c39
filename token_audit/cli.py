"""Run a single token audit from the command line.

Usage:
    python -m token_audit.cli 0xTokenAddress
    python -m token_audit.cli 0xTokenAddress --json --output results.json
"""

import argparse
import asyncio
import json
import sys

from loguru import logger

from config.settings import settings
from token_audit.db.redis import close_redis
from token_audit.parsers.auditor import create_auditor
from token_audit.parsers.errors import InvalidAddressError, TokenAuditError
from token_audit.parsers.report import format_report_text, save_report
from token_audit.utils.logger import setup_logger


async def run(address: str, *, as_json: bool, output: str | None) -> int:
    auditor = await create_auditor()
    try:
        report = await auditor.audit(address)
    except InvalidAddressError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except TokenAuditError as e:
        logger.error(f"Audit failed: {e}")
        return 1
    finally:
        await auditor.close()
        await close_redis()

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report_text(report))

    if output:
        save_report(report, output)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Audit an ERC-20 token contract")
    parser.add_argument("address", help="Token contract address (0x...)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--output", "-o", help="Also save the JSON report to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logger(
        json_logs=settings.json_logs,
        level="DEBUG" if args.verbose else "WARNING",
        log_dir=None,
        respect_env=False,
    )
    sys.exit(asyncio.run(run(args.address, as_json=args.json, output=args.output)))


if __name__ == "__main__":
    main()
