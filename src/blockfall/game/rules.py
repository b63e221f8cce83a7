from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreDelta:
    points: int = 0
    lines: int = 0
    level_up: bool = False


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)
    lines_per_level: int = 10
    base_interval_ms: float = 1000.0
    level_offset: float = 0.5

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        # A four-cell catalog never clears more than four rows at once
        return self.line_clear_scores[min(lines, 4) - 1] * level

    def evaluate(self, lines: int, level: int, total_lines: int) -> ScoreDelta:
        """Score one lock event. `total_lines` is the cumulative count before this lock."""
        if lines <= 0:
            return ScoreDelta()
        new_total = total_lines + lines
        return ScoreDelta(
            points=self.score_for_lines(lines, level),
            lines=lines,
            level_up=new_total >= level * self.lines_per_level,
        )

    def gravity_interval_ms(self, level: int) -> float:
        return self.base_interval_ms / (level + self.level_offset)
