"""
Host loop example of SecurityClient.

This example shows how a host application with a per-frame loop constructs
the client once, polls it every frame and sends the shutdown notice at exit.
"""

import logging
import sys
import time
from pathlib import Path

# Add the project root to the path to import pulseguard
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pulseguard import SecurityClient, StartupError


class DemoHost:
    """Stand-in for the instrumented application."""

    def __init__(self) -> None:
        self.frame = 0

    def runtime_version(self) -> int:
        return 3

    def is_in_open_space(self) -> bool:
        # Pretend the subject undocks every other minute.
        return (self.frame // 600) % 2 == 1


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    host = DemoHost()
    try:
        client = SecurityClient(host, log_level=logging.INFO)
    except StartupError as e:
        logger.error("Cannot start (%s): %s", e.reason, e)
        sys.exit(1)

    with client:
        for frame in range(3000):
            host.frame = frame
            if not client.poll():
                logger.warning("Liveness lost while in open space, stopping")
                break
            time.sleep(0.1)

    logger.info("Host loop example completed")


if __name__ == "__main__":
    main()
