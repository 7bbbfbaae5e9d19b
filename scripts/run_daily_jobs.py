import asyncio
import argparse
import logging
from payguard.config import settings
from payguard.pipeline import pipeline

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

async def run_daily_jobs(stage: str) -> bool:
    """
    Runs the scheduled stages once, outside the cron scheduler.
    """
    results = []
    if stage in ("all", "bill-checker"):
        results.append(await pipeline.run_bill_checker())
    if stage in ("all", "daily-summary"):
        results.append(await pipeline.run_daily_summary())

    for result in results:
        status = "OK" if result.success else f"FAILED ({result.error})"
        logger.info(f"{result.stage}: {status} after {result.attempts} attempt(s) {result.stats}")
    return all(result.success for result in results)

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run PayGuard daily jobs once")
    parser.add_argument("--stage", choices=["all", "bill-checker", "daily-summary"], default="all")
    args = parser.parse_args()

    pipeline.connect()
    try:
        ok = asyncio.run(run_daily_jobs(args.stage))
    finally:
        pipeline.close()
    raise SystemExit(0 if ok else 1)
