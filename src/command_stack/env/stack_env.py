from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from command_stack.config import BOMB_CAP, GameConfig
from command_stack.game import Action, CommandEnd, CommandStart, Game
from command_stack.visualization.playfield import render_playfield


DEFAULT_SCRIPT: Tuple[Tuple[str, int], ...] = (
    ("ls -la", 0),
    ("git status", 0),
    ("make test", 1),
    ("cat README.md", 0),
)


class CommandStackEnv(gym.Env):
    """Single-player environment over :class:`Game` with a scripted command feed.

    Each scripted ``(command, exit_code)`` pair is replayed as a Start event;
    its End event is delivered once the run's first cycle of pieces has left
    the queue, and the next command starts right after.

    Actions (6 total): left, right, rotate, soft drop, hard drop, none.
    Every step applies the action, one gravity tick and one effects frame.
    """

    metadata = {"render_modes": ["ansi", "rgb_array"], "render_fps": 10}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        max_steps: int = 5000,
    ) -> None:
        super().__init__()
        self.game = Game(config)
        self.render_mode = render_mode
        self.max_steps = int(max_steps)

        h, w = self.game.board.height, self.game.board.width
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-1, high=1, shape=(h, w), dtype=np.int8),
                "bombs": spaces.Discrete(BOMB_CAP + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._script: List[Tuple[str, int]] = []
        self._live_id: Optional[int] = None
        self._live_exit = 0
        self._next_id = 1
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.game.get_state().astype(np.int8),
            "bombs": int(self.game.bombs),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared": self.game.lines_cleared,
            "variety_meter": self.game.variety_meter,
            "pending_commands": len(self._script) + (self._live_id is not None),
        }

    def _start_next_command(self) -> None:
        if not self._script:
            return
        command, exit_code = self._script.pop(0)
        self._live_id, self._live_exit = self._next_id, exit_code
        self._next_id += 1
        self.game.handle_command_event(CommandStart(id=self._live_id, command=command))

    def _advance_script(self) -> None:
        if self._live_id is None:
            return
        first_cycle_left = any(
            q.run_id == self._live_id and q.cycle <= 1 for q in self.game.piece_queue
        )
        if first_cycle_left:
            return
        self.game.handle_command_event(CommandEnd(id=self._live_id, exit_code=self._live_exit))
        self._live_id = None
        self._start_next_command()

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.reset()
        commands: Sequence[Tuple[str, int]] = (options or {}).get("commands", DEFAULT_SCRIPT)
        self._script = [(str(c), int(code)) for c, code in commands]
        self._live_id = None
        self._next_id = 1
        self._steps = 0
        self._start_next_command()
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score
        self.game.step(Action(int(action)))
        self.game.tick_gravity()
        self.game.process_effects()
        self._advance_script()
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        idle = not self.game.is_running() and self._live_id is None and not self._script
        truncated = not terminated and (idle or self._steps >= self.max_steps)
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self):
        if self.render_mode == "ansi":
            return "\n".join(render_playfield(self.game))
        if self.render_mode == "rgb_array":
            state = self.game.get_state()
            cell = 12
            h, w = state.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    v = int(state[y, x])
                    color = (240, 160, 0) if v < 0 else (70, 200, 120) if v > 0 else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None

    def close(self) -> None:
        pass
