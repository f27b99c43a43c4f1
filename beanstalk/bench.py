"""Producer throughput benchmark.

Run ``python -m beanstalk.bench --count 100000`` against a live server.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
import typing as t

from .client import Client
from .config import ClientConfig
from .errors import TransportError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Measure beanstalkd put throughput")
    parser.add_argument("--host", help="Server host (default: $BEANSTALK_HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Server port (default: 11300)")
    parser.add_argument("--count", type=int, default=100000, help="Jobs to put")
    parser.add_argument("--priority", type=int, default=1024, help="Job priority")
    parser.add_argument("--ttr", type=int, default=60, help="Job time-to-run")
    parser.add_argument("--tube", default="default", help="Tube to put into")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def run(
    client: Client, *, count: int, priority: int, ttr: int
) -> tuple[float, int]:
    """Put *count* jobs whose bodies are their index.

    Returns the elapsed seconds and the number of rejected puts.
    """
    failed = 0
    start = time.perf_counter()
    for index in range(count):
        if not client.put(priority, 0, ttr, str(index)):
            failed += 1
    return time.perf_counter() - start, failed


def main(argv: t.Sequence[str] | None = None) -> int:
    """Run the benchmark from the command line and return the exit status.

    Returns 1 when the server cannot be reached, otherwise 0.
    """
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    overrides: dict[str, t.Any] = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    config = ClientConfig.from_env(**overrides)

    client = Client(config)
    try:
        client.connect()
    except TransportError as exc:
        logger.error("cannot connect to %s:%d: %s", config.host, config.port, exc)  # noqa: TRY400
        return 1

    try:
        client.use(args.tube)
        elapsed, failed = run(
            client, count=args.count, priority=args.priority, ttr=args.ttr
        )
    finally:
        client.disconnect()

    rate = args.count / elapsed if elapsed else float("inf")
    logger.info("put %d jobs in %.3fs (%.0f jobs/s)", args.count, elapsed, rate)
    if failed:
        logger.warning("%d puts failed, last error: %s", failed, client.errors()[-1])
    return 0


if __name__ == "__main__":
    sys.exit(main())
