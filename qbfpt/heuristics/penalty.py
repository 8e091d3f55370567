"""Adaptive penalty for strategic oscillation."""

from dataclasses import dataclass


@dataclass
class PenaltySchedule:
    """
    Penalty applied to triple violations while oscillating.

    Every `step` iterations the schedule looks back at the last feasible
    iteration: if the search has been infeasible for at least `step - 1`
    iterations the penalty doubles (capped at `max_penalty`); otherwise, on
    every `relax_every`-th iteration, it halves (floored at `min_penalty`).

    The cadences are heuristic constants, not a tuned schedule.
    """
    value: float = 1.0
    step: int = 25
    relax_every: int = 200
    max_penalty: float = 1e6
    min_penalty: float = 1e-7

    def __post_init__(self):
        if self.value <= 0:
            raise ValueError(f"penalty must be positive, got {self.value}")
        if self.step < 1 or self.relax_every < 1:
            raise ValueError("penalty cadences must be positive")

    def adjust(self, iteration: int, last_feasible_iteration: int) -> float:
        """
        Update the penalty at the start of `iteration` (0-based).

        Returns:
            The (possibly unchanged) penalty value
        """
        if (iteration + 1) % self.step != 0:
            return self.value

        if iteration - last_feasible_iteration >= self.step - 1:
            self.value = min(self.value * 2.0, self.max_penalty)
        elif (iteration + 1) % self.relax_every == 0:
            self.value = max(self.value / 2.0, self.min_penalty)
        return self.value
