from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import List, Optional

from .logging_config import configure_logging
from .monitor_factory import build_scheduler
from .settings import load_config


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Periodically check proxies and email on state changes.")
    parser.add_argument("--checknow", action="store_true", help="run one check before waiting for the schedule")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    config = load_config()
    configure_logging(config.log_level)
    scheduler = build_scheduler(config)
    logger.info(
        "monitoring %d proxies, schedule=%s, mail=%s",
        len(scheduler.monitor.tracker.endpoints),
        config.schedule,
        "on" if config.smtp_addr else "off",
    )

    def _cleanup(signum, frame):  # noqa: ARG001
        logger.info("received signal %d, exiting", signum)
        sys.exit(0)

    signal.signal(signal.SIGTERM, _cleanup)
    signal.signal(signal.SIGINT, _cleanup)

    scheduler.run(check_now=args.checknow or config.check_now)


if __name__ == "__main__":
    main()
