"""
main.py — Play Rock-Paper-Scissors with a simple bot
====================================================

Connects to a game server, joins the lobby and plays random hands
until the first game ends.

    python main.py

The client will:
  1. Open the WebSocket connection
  2. Join the lobby once connected
  3. Pick a hand every time a round starts
  4. Disconnect after the game is over

Press Ctrl+C to stop.
"""

import logging
import random
import time

from rps_client import (
    Choice,
    Connected,
    ConnectionFailed,
    Disconnected,
    GameClient,
    GameEnded,
    RoundResult,
    RoundStart,
    load_config,
)
from rps_client._shared import setup_logging

# ── Setup logging (so you can see what's happening) ──
setup_logging(log_file_path=None, level=logging.INFO)

# ── Configuration (RPS_SERVER / RPS_SERVER_URL / RPS_PLAYER_NAME) ──
config = load_config()
config["player_name"] = config["player_name"] or "RandomBot"

client = GameClient.from_config(config)
running = True


def on_event(event):
    global running
    if isinstance(event, Connected):
        client.join(config["player_name"])
    elif isinstance(event, RoundStart):
        client.choose(random.choice(list(Choice)))
    elif isinstance(event, RoundResult):
        print(f"Round: you {event.result.value} ({client.session.score})")
    elif isinstance(event, GameEnded):
        print(f"Game over: you {event.result.value}")
        client.disconnect()
        running = False
    elif isinstance(event, (ConnectionFailed, Disconnected)):
        running = False


client.events.subscribe(on_event)

# ── Connect and tick ──
with client:
    client.connect()
    try:
        while running:
            client.tick()
            time.sleep(0.05)
    except KeyboardInterrupt:
        pass
