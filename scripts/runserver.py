#!/usr/bin/env python
"""Start the Shiftboard API under Uvicorn.

Migrations are applied first unless ``--skip-migrations`` is given or
RUN_MIGRATIONS_ON_STARTUP is false; the app then skips its own startup run.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import uvicorn  # noqa: E402

from shiftboard.config import get_settings  # noqa: E402
from shiftboard.migration_runner import run_migrations_once  # noqa: E402

logger = logging.getLogger("shiftboard.runserver")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Shiftboard API server.")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only).")
    parser.add_argument("--skip-migrations", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="[runserver] %(levelname)s %(message)s")

    if settings.run_migrations_on_startup and not args.skip_migrations:
        try:
            run_migrations_once()
        except Exception:
            logger.exception("Migrations failed; not starting the server")
            return 1
        # The worker process would otherwise upgrade again on startup.
        os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

    logger.info("Starting %s on %s:%s (%s)", settings.app_name, args.host, args.port, settings.environment)
    uvicorn.run(
        "shiftboard.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
