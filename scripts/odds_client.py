#!/usr/bin/env python3
"""Send one evaluate request to a running odds service and print the reply.

Example:
    python scripts/odds_client.py --url ws://localhost:8080 \
        --player As Kd --player 7h 7c --board 2s 3h 4c --opponents 1
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from websockets.asyncio.client import connect

LOGGER = logging.getLogger("odds_client")


def build_request(
    players: List[List[str]],
    board: List[str],
    iterations: Optional[int],
    opponents: int,
    folded: int,
) -> Dict[str, Any]:
    message: Dict[str, Any] = {
        "type": "evaluate",
        "players": players,
        "board": board,
        "opponents": opponents,
        "folded": folded,
    }
    if iterations is not None:
        message["iterations"] = iterations
    return message


def print_reply(reply: Dict[str, Any]) -> None:
    if reply.get("type") == "error":
        print(f"error {reply.get('code')}: {reply.get('msg')}")
        return
    print(f"{reply['cards_remaining']} cards remain.")
    for result in reply.get("outcomes", []):
        print(f"  {result['outcome']:5} {result['description']}")
    for odds in reply.get("odds", []):
        who = f"player {odds['player']}" if "player" in odds else f"{odds['opponents']} opponents"
        print(f"  {who:12} win {odds['win']:>7} tie {odds['tie']:>7} loss {odds['loss']:>7}")


async def request_odds(url: str, message: Dict[str, Any]) -> Dict[str, Any]:
    async with connect(url) as ws:
        await ws.send(json.dumps(message))
        raw = await ws.recv()
        return json.loads(raw)


def main() -> None:
    parser = argparse.ArgumentParser(description="Odds service client")
    parser.add_argument("--url", default="ws://localhost:8080")
    parser.add_argument("--player", nargs=2, action="append", required=True, metavar="CARD")
    parser.add_argument("--board", nargs="*", default=[])
    parser.add_argument("--iterations", type=int, default=None)
    parser.add_argument("--opponents", type=int, default=0)
    parser.add_argument("--folded", type=int, default=0)
    args = parser.parse_args()

    message = build_request(args.player, args.board, args.iterations, args.opponents, args.folded)
    LOGGER.info("Sending %s", message)
    reply = asyncio.run(request_odds(args.url, message))
    print_reply(reply)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
