import argparse
import asyncio
import logging
import os

from engine.models import ServiceConfig
from .server import OddsServer

logging.basicConfig(level=logging.INFO)


def main() -> None:
    parser = argparse.ArgumentParser(description="Hold'em odds WebSocket service")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=int(os.environ.get("ODDS_PORT", "8080")))
    parser.add_argument("--max-samples", type=int, default=100_000, help="Upper bound on iterations per request")
    parser.add_argument("--max-opponents", type=int, default=8, help="Upper bound on unknown opponents per request")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker processes per simulation (0 uses every CPU)",
    )
    parser.add_argument("--seed", type=int, default=1)
    args = parser.parse_args()

    config = ServiceConfig(
        host=args.host,
        port=args.port,
        max_samples=args.max_samples,
        max_opponents=args.max_opponents,
        workers=args.workers or None,
        seed=args.seed,
    )

    server = OddsServer(config)
    asyncio.run(server.start())


if __name__ == "__main__":
    main()
