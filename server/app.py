"""Minimal Flask API exposing the Spider engine to a browser front end."""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict

from flask import Flask, jsonify, request

from spider.game import SpiderGame
from spider.moves import EMPTY_PILE, ActionResult
from spider.rules import PROFILES

LOGGER = logging.getLogger("server")

EMPTY_PILE_WARNING = "Cannot deal while a tableau pile is empty"

MOVE_FIELDS = {"source": int, "start": int, "target": int}
REVEAL_FIELDS = {"pile": int, "card": int}

app = Flask(__name__)

# One game per process; the lock serialises calls into the engine.
_lock = threading.Lock()
_state: Dict[str, Any] = {"game": None}


def _validate_payload(payload: Dict[str, Any], fields: Dict[str, type]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for field, expected in fields.items():
        if field not in payload:
            raise ValueError(f"Missing field: {field}")
        value = payload[field]
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValueError(f"{field} has invalid type: {type(value).__name__}")
        cleaned[field] = value
    return cleaned


def _game_payload(game: SpiderGame) -> Dict[str, Any]:
    payload = game.board.to_dict()
    payload.update(
        {
            "level": game.profile.name,
            "level_name": game.level_name,
            "can_undo": game.can_undo,
            "stock_deals_remaining": game.stock_deals_remaining,
        }
    )
    return payload


def _result_payload(result: ActionResult) -> Dict[str, Any]:
    payload = result.to_dict()
    if result.reason == EMPTY_PILE:
        payload["warning"] = EMPTY_PILE_WARNING
    return payload


def _current_game():
    game = _state["game"]
    if game is None:
        return None, (jsonify({"error": "no game in progress"}), 409)
    return game, None


@app.post("/api/game")
def start_game():
    payload = request.get_json(silent=True) or {}
    difficulty = payload.get("difficulty")
    seed = payload.get("seed")
    if difficulty is not None and (
        not isinstance(difficulty, str) or difficulty.strip().lower() not in PROFILES
    ):
        return jsonify({"error": f"unknown difficulty: {difficulty!r}"}), 400
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        return jsonify({"error": "seed must be an integer"}), 400

    with _lock:
        game = SpiderGame(difficulty, seed=seed)
        _state["game"] = game
        LOGGER.info("Started %s game", game.profile.name)
        return jsonify(_game_payload(game)), 201


@app.get("/api/game")
def get_game():
    with _lock:
        game, error = _current_game()
        if error:
            return error
        return jsonify(_game_payload(game))


@app.post("/api/game/restart")
def restart_game():
    with _lock:
        game, error = _current_game()
        if error:
            return error
        game.restart_current_level()
        return jsonify(_game_payload(game))


@app.get("/api/piles/<int:pile_index>/run")
def get_draggable_run(pile_index: int):
    with _lock:
        game, error = _current_game()
        if error:
            return error
        return jsonify({"pile": pile_index, "indices": game.draggable_run(pile_index)})


@app.post("/api/move")
def move_cards():
    payload = request.get_json(silent=True) or {}
    try:
        fields = _validate_payload(payload, MOVE_FIELDS)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    with _lock:
        game, error = _current_game()
        if error:
            return error
        result = game.apply_move(fields["source"], fields["start"], fields["target"])
        return jsonify(_result_payload(result))


@app.post("/api/reveal")
def reveal_card():
    payload = request.get_json(silent=True) or {}
    try:
        fields = _validate_payload(payload, REVEAL_FIELDS)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    with _lock:
        game, error = _current_game()
        if error:
            return error
        result = game.reveal_card(fields["pile"], fields["card"])
        return jsonify(_result_payload(result))


@app.post("/api/deal")
def deal_cards():
    with _lock:
        game, error = _current_game()
        if error:
            return error
        return jsonify(_result_payload(game.deal_from_stock()))


@app.post("/api/undo")
def undo_action():
    with _lock:
        game, error = _current_game()
        if error:
            return error
        return jsonify(_result_payload(game.undo()))


@app.get("/api/hint")
def get_hint():
    with _lock:
        game, error = _current_game()
        if error:
            return error
        return jsonify(game.compute_hint().to_dict())


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    logging.basicConfig(level=logging.INFO)
    app.run(host="127.0.0.1", port=5000, debug=True)
