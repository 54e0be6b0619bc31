from __future__ import annotations

from dataclasses import dataclass

from command_stack.config import BOMB_CAP, VARIETY_THRESH


@dataclass(frozen=True)
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    # Variety meter economy
    variety_threshold: int = VARIETY_THRESH
    bomb_cap: int = BOMB_CAP
    repeat_penalty: int = 5
    decay: int = 2
    variety_base: int = 10
    streak_bonus: int = 3
    streak_cap: int = 10

    def score_for_lines(self, lines: int) -> int:
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1]
        return 0

    def variety_points(self, streak: int) -> int:
        return self.variety_base + self.streak_bonus * min(streak, self.streak_cap)
