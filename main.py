"""
Rotation Watch — Entry point.
Serves the ranked rotation snapshot over HTTP, or prints one snapshot with --once.
"""

from __future__ import annotations
import asyncio
import json
import sys
from typing import Optional
import logging

# Load .env file before anything else
from dotenv import load_dotenv
load_dotenv()

from config import RotationConfig
from core.pipeline import RotationPipeline
from server import SnapshotServer

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


async def run_once(config: RotationConfig, pipeline: Optional[RotationPipeline] = None) -> int:
    """Compute one snapshot and print it to stdout. Returns the process exit code."""
    pipeline = pipeline or RotationPipeline(config)
    try:
        snapshot = await pipeline.run()
    except Exception as e:
        logger.critical(f"Snapshot failed: {e}", exc_info=True)
        print(json.dumps({"error": True, "message": str(e) or "Unknown error"}))
        return 1
    finally:
        await pipeline.close()

    print(json.dumps(snapshot.to_dict(), indent=2))
    return 0


def main():
    config = RotationConfig.from_env()
    setup_logging(config.log_level)

    if "--once" in sys.argv[1:]:
        sys.exit(asyncio.run(run_once(config)))

    logger.info(
        f"[BOOT] Rotation Watch: cap={config.universe.symbol_limit}, "
        f"hosts={config.exchange.hosts}, concurrency={config.market_data.fetch_concurrency}"
    )
    SnapshotServer(RotationPipeline(config), config.server).run()


if __name__ == "__main__":
    main()
