from __future__ import annotations

import asyncio
import functools
import json
import logging
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from engine.cards import HOLE_CARDS_PER_PLAYER, Card, cards_to_labels, parse_label
from engine.deck import DuplicateCardError
from engine.display import describe_hand, format_percent
from engine.game import Game, GameOutcome
from engine.models import ServiceConfig, SimulationConfig

LOGGER = logging.getLogger("odds_service")

# OddsServer translates JSON requests into Game runs. Every network concern
# lives here; the engine never sees raw text.

HEALTH_PATHS = {"/", "/health", "/healthz"}


class RequestError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def _error_payload(code: str, msg: str) -> Dict[str, Any]:
    return {"type": "error", "code": code, "msg": msg}


def _parse_card_list(raw: Any, what: str) -> List[Card]:
    if not isinstance(raw, list) or not all(isinstance(label, str) for label in raw):
        raise RequestError("BAD_SCHEMA", f"{what} must be a list of card labels")
    try:
        return [parse_label(label) for label in raw]
    except ValueError as exc:
        raise RequestError("BAD_CARD", str(exc)) from exc


def _optional_count(message: Dict[str, Any], key: str) -> Optional[int]:
    value = message.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise RequestError("BAD_SCHEMA", f"{key} must be a non-negative integer")
    return value


def parse_request(message: Dict[str, Any], config: ServiceConfig) -> Tuple[Game, int]:
    """Validate an ``evaluate`` message and clamp it to the service limits."""
    players_raw = message.get("players")
    if not isinstance(players_raw, list) or not players_raw:
        raise RequestError("BAD_SCHEMA", "players must be a non-empty list of hole card pairs")
    players = []
    for hole_raw in players_raw:
        hole = _parse_card_list(hole_raw, "hole cards")
        if len(hole) != HOLE_CARDS_PER_PLAYER:
            raise RequestError("BAD_SCHEMA", f"each player needs {HOLE_CARDS_PER_PLAYER} hole cards")
        players.append(hole)
    board = _parse_card_list(message.get("board", []), "board")

    iterations = _optional_count(message, "iterations")
    samples = min(iterations or config.max_samples, config.max_samples)
    opponents = min(_optional_count(message, "opponents") or 0, config.max_opponents)
    folded = _optional_count(message, "folded") or 0

    try:
        game = Game(players, board, opponents=opponents, folded=folded)
    except ValueError as exc:
        raise RequestError("BAD_SCHEMA", str(exc)) from exc
    return game, samples


def result_payload(outcome: GameOutcome, known_players: int) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"cards_remaining": outcome.cards_remaining}
    if outcome.outcomes is not None:
        payload["outcomes"] = [
            {
                "outcome": result.outcome.value,
                "hand_type": result.hand.hand_type.display_name,
                "description": describe_hand(result.hand),
                "cards": cards_to_labels(result.hand.cards),
            }
            for result in outcome.outcomes
        ]
        return payload

    assert outcome.odds is not None
    entries = []
    for odds in outcome.odds.merge_unknown_players(known_players):
        entry: Dict[str, Any] = {}
        if odds.is_field:
            entry["opponents"] = len(odds.seats)
        else:
            entry["player"] = odds.seat
        entry.update(
            {
                "win": format_percent(odds.win_percent),
                "tie": format_percent(odds.tie_percent),
                "loss": format_percent(odds.loss_percent),
                "distribution": {
                    hand_type.display_name: format_percent(percent)
                    for hand_type, percent in odds.distribution()
                },
            }
        )
        entries.append(entry)
    payload["odds"] = entries
    return payload


def process_request(connection: ServerConnection, request: Any) -> Any:
    """Answer plain HTTP health checks; let WebSocket upgrades through."""
    upgrade_header = request.headers.get("Upgrade", "").lower()
    if upgrade_header == "websocket":
        return None
    if request.path in HEALTH_PATHS:
        return connection.respond(HTTPStatus.OK, "odds service running\n")
    return connection.respond(HTTPStatus.NOT_FOUND, "not found\n")


class OddsServer:
    def __init__(self, config: ServiceConfig) -> None:
        self.config = config

    async def start(self) -> None:
        async with serve(
            self._handle_connection,
            self.config.host,
            self.config.port,
            process_request=process_request,
        ):
            LOGGER.info("Odds service listening on %s:%s", self.config.host, self.config.port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        try:
            async for raw in websocket:
                reply = await self.handle_message(raw)
                await websocket.send(json.dumps(reply))
        except ConnectionClosed:
            LOGGER.info("Client disconnected mid-request")

    async def handle_message(self, raw: Any) -> Dict[str, Any]:
        try:
            message = json.loads(raw)
        except (TypeError, ValueError):
            return _error_payload("BAD_JSON", "Message is not valid JSON")
        if not isinstance(message, dict) or message.get("type") != "evaluate":
            return _error_payload("BAD_SCHEMA", "Expected evaluate")

        try:
            game, samples = parse_request(message, self.config)
        except RequestError as exc:
            LOGGER.warning("Rejected request (%s): %s", exc.code, exc.msg)
            return _error_payload(exc.code, exc.msg)

        loop = asyncio.get_running_loop()
        try:
            # Simulations are CPU bound; keep the event loop free for other clients.
            outcome = await loop.run_in_executor(None, functools.partial(self.evaluate, game, samples))
        except DuplicateCardError as exc:
            LOGGER.warning("Rejected request (%s): %s", exc.code, exc)
            return _error_payload(exc.code, str(exc))
        except ValueError as exc:
            LOGGER.warning("Rejected request: %s", exc)
            return _error_payload("BAD_SCHEMA", str(exc))
        return {"type": "result", **result_payload(outcome, len(game.players))}

    def evaluate(self, game: Game, samples: int) -> GameOutcome:
        config = SimulationConfig(samples=samples, seed=self.config.seed, workers=self.config.workers)
        return game.play(config)
