# Line protocol, one event per line:
#   START <id> <command text>
#   END <id> [exit_code]
# Malformed lines are dropped here and never reach the game.

from __future__ import annotations

import logging
import os
import queue
import re
import socket
import threading
from typing import List, Optional

from command_stack.game.events import CommandEnd, CommandEvent, CommandStart


logger = logging.getLogger(__name__)

ACCEPT_TIMEOUT = 0.2


ID_RE = re.compile(r"\+?[0-9]+")
EXIT_CODE_RE = re.compile(r"[+-]?[0-9]+")
ID_MAX = (1 << 64) - 1
EXIT_CODE_MIN, EXIT_CODE_MAX = -(1 << 31), (1 << 31) - 1


def _parse_int(text: str, pattern: "re.Pattern[str]", low: int, high: int) -> Optional[int]:
    """Strict integer parse: optional sign, ASCII digits only, within [low, high]."""
    if not pattern.fullmatch(text):
        return None
    value = int(text)
    if not low <= value <= high:
        return None
    return value


def _parse_id(text: str) -> Optional[int]:
    return _parse_int(text, ID_RE, 0, ID_MAX)


def _parse_exit_code(text: str) -> int:
    code = _parse_int(text, EXIT_CODE_RE, EXIT_CODE_MIN, EXIT_CODE_MAX)
    return 0 if code is None else code


def parse_command_line(line: str) -> Optional[CommandEvent]:
    line = line.strip()
    if line.startswith("START "):
        id_str, _, command = line[len("START "):].partition(" ")
        run_id = _parse_id(id_str)
        if run_id is None:
            return None
        return CommandStart(id=run_id, command=command.strip())
    if line.startswith("END "):
        parts = line[len("END "):].split()
        if not parts:
            return None
        run_id = _parse_id(parts[0])
        if run_id is None:
            return None
        exit_code = _parse_exit_code(parts[1]) if len(parts) > 1 else 0
        return CommandEnd(id=run_id, exit_code=exit_code)
    return None


def drain_events(events: "queue.Queue[CommandEvent]") -> List[CommandEvent]:
    """Take every pending event without blocking, in arrival order."""
    drained: List[CommandEvent] = []
    while True:
        try:
            drained.append(events.get_nowait())
        except queue.Empty:
            return drained


class CommandListener:
    """Accepts shell-hook connections and forwards parsed events to a queue.

    Runs a single daemon thread; the queue is the only state shared with the
    game loop.
    """

    def __init__(self, path: str, events: "queue.Queue[CommandEvent]") -> None:
        self.path = path
        self.events = events
        self._sock: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._stopping = threading.Event()

    def start(self) -> bool:
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            sock.bind(self.path)
            sock.listen()
            sock.settimeout(ACCEPT_TIMEOUT)
        except OSError as e:
            logger.error(f"Could not listen on {self.path}: {e}")
            return False
        self._sock = sock
        self._thread = threading.Thread(target=self._serve, name="command-listener", daemon=True)
        self._thread.start()
        logger.info(f"Listening for commands on {self.path}")
        return True

    def stop(self) -> None:
        self._stopping.set()
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        logger.info("Command listener stopped.")

    def _serve(self) -> None:
        assert self._sock is not None
        sock = self._sock
        while not self._stopping.is_set():
            try:
                conn, _ = sock.accept()
            except socket.timeout:
                continue
            except OSError:
                # Socket closed by stop()
                break
            conn.settimeout(None)
            with conn:
                self._handle_connection(conn)

    def _handle_connection(self, conn: socket.socket) -> None:
        try:
            with conn.makefile("r", encoding="utf-8", errors="replace") as reader:
                for line in reader:
                    self.feed_line(line)
        except OSError as e:
            logger.warning(f"Connection error while reading commands: {e}")

    def feed_line(self, line: str) -> None:
        event = parse_command_line(line)
        if event is None:
            logger.debug(f"Dropped malformed line: {line.rstrip()!r}")
            return
        self.events.put(event)
