"""
Scoring System
==============

Tracks the distance score of the current run and the best score of the
process lifetime.
"""

from __future__ import annotations

from typing import Optional


class ScoreTracker:
    """
    Tracks current and best score.

    The current score gains one point every SCORE_CADENCE ticks. The best score
    is absent until a run ends with a positive score and is never written to
    disk.
    """

    # Ticks per point, independent of difficulty
    SCORE_CADENCE = 3

    def __init__(self):
        self._score: int = 0
        self._best: Optional[int] = None
        self._record_beaten: bool = False

    @property
    def score(self) -> int:
        """Current run score."""
        return self._score

    @property
    def best(self) -> Optional[int]:
        """Best finished-run score, or None if no run has scored yet."""
        return self._best

    @property
    def has_best(self) -> bool:
        return self._best is not None

    @property
    def record_beaten(self) -> bool:
        """True if the last finished run set a new best score."""
        return self._record_beaten

    def accrue(self, tick: int) -> int:
        """
        Add the points earned on this tick.

        Returns:
            Points added (0 or 1).
        """
        if tick % self.SCORE_CADENCE != 0:
            return 0
        self._score += 1
        return 1

    def commit_run(self) -> bool:
        """
        Close the current run, updating the best score if it was beaten.

        Returns:
            True if the current score became the new best.
        """
        best = self._best if self._best is not None else 0
        self._record_beaten = self._score > best
        if self._record_beaten:
            self._best = self._score
        return self._record_beaten

    def reset(self) -> None:
        """Reset the current score. The best score is kept."""
        self._score = 0
        self._record_beaten = False
