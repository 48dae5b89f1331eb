"""Statistics aggregation — reduces history records to a StatisticsSnapshot.

The reducers below are pure functions over a list of GameHistoryRecord.
StatisticsAggregator layers one role-conditional lookup on top: for a
teacher, wins/losses/win rate come from the class-wide average success
across every course the teacher is assigned to, while every other field
still comes from the records passed in. TEACHER_STATS_SOURCE=records
switches that off and counts the records for every role.

Ranking ties are resolved by first appearance: for missed letters, the
letter seen first while scanning records in order; for best/worst word,
the word whose first record comes first.

Tier 2 service module: imports from hangman.hooks.interfaces (Tier 1),
hangman.schemas (Tier 1).

Usage:
    aggregator = StatisticsAggregator(history_store)
    snapshot = await aggregator.build(records, user)
"""

import logging
import math
from collections import Counter
from collections.abc import Awaitable, Callable, Iterable, Sequence
from datetime import date

from hangman.hooks.interfaces import HistoryStore
from hangman.schemas import GameHistoryRecord, StatisticsSnapshot, User

logger = logging.getLogger(__name__)

MOST_MISSED_LIMIT = 3


# ---------------------------------------------------------------------------
# Pure reducers
# ---------------------------------------------------------------------------


def empty_snapshot() -> StatisticsSnapshot:
    """All-zero snapshot: zero counts, empty strings, empty maps."""
    return StatisticsSnapshot()


def win_rate(records: Sequence[GameHistoryRecord]) -> float:
    """Percentage (0-100) of successful records; 0.0 when empty."""
    if not records:
        return 0.0
    wins = sum(1 for r in records if r.success)
    return wins / len(records) * 100


def average_attempts(records: Sequence[GameHistoryRecord]) -> float:
    """Mean wrong-attempt count; 0.0 when empty."""
    if not records:
        return 0.0
    return sum(r.attempts for r in records) / len(records)


def most_missed_letters(
    records: Iterable[GameHistoryRecord], limit: int = MOST_MISSED_LIMIT
) -> str:
    """Top ``limit`` wrong letters by frequency, comma-joined.

    Counter.most_common keeps first-encountered order among equal counts,
    which is the tie-break.
    """
    tally: Counter[str] = Counter()
    for record in records:
        if not record.wrong_letters:
            continue
        for letter in record.wrong_letters.split(","):
            letter = letter.strip()
            if letter:
                tally[letter[0]] += 1
    return ",".join(letter for letter, _ in tally.most_common(limit))


def word_success_ratios(records: Iterable[GameHistoryRecord]) -> dict[str, tuple[str, float]]:
    """Groups records by word id → (word text, wins / plays).

    Insertion order follows each word's first record. Words never played
    don't appear.
    """
    plays: dict[str, list[GameHistoryRecord]] = {}
    for record in records:
        plays.setdefault(record.word.id, []).append(record)
    return {
        word_id: (group[0].word.text, sum(1 for r in group if r.success) / len(group))
        for word_id, group in plays.items()
    }


def best_and_worst_words(records: Iterable[GameHistoryRecord]) -> tuple[str, str]:
    """Returns (best, worst) word text by success ratio; ("", "") if empty."""
    ratios = list(word_success_ratios(records).values())
    if not ratios:
        return "", ""
    # max/min return the first extreme they meet, giving first-encountered ties.
    best = max(ratios, key=lambda item: item[1])
    worst = min(ratios, key=lambda item: item[1])
    return best[0], worst[0]


def time_distribution(records: Iterable[GameHistoryRecord]) -> dict[str, int]:
    """Game counts per hour of day, keyed "HH:00" (24h, zero-padded), sorted."""
    counts = Counter(f"{r.played_at.hour:02d}:00" for r in records)
    return dict(sorted(counts.items()))


def progress_trend(records: Iterable[GameHistoryRecord]) -> dict[str, float]:
    """Win rate per calendar date, ascending, keyed by ISO date."""
    by_day: dict[date, list[GameHistoryRecord]] = {}
    for record in records:
        by_day.setdefault(record.played_at.date(), []).append(record)
    return {day.isoformat(): win_rate(by_day[day]) for day in sorted(by_day)}


def summarize(records: Sequence[GameHistoryRecord]) -> StatisticsSnapshot:
    """Builds a snapshot where every field comes from ``records``."""
    if not records:
        return empty_snapshot()

    total = len(records)
    won = sum(1 for r in records if r.success)
    best, worst = best_and_worst_words(records)
    return StatisticsSnapshot(
        total_games=total,
        games_won=won,
        games_lost=total - won,
        win_rate=win_rate(records),
        average_attempts=average_attempts(records),
        most_missed_letters=most_missed_letters(records),
        best_performing_word=best,
        worst_performing_word=worst,
        time_distribution=time_distribution(records),
        progress_trend=progress_trend(records),
    )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Role-aware aggregator
# ---------------------------------------------------------------------------

OutcomeSource = Callable[
    [Sequence[GameHistoryRecord], User, StatisticsSnapshot],
    Awaitable[StatisticsSnapshot | None],
]


class StatisticsAggregator:
    """Builds snapshots, choosing the win/loss source by the caller's role.

    Roles missing from the source table count the records directly.
    """

    def __init__(
        self, history_store: HistoryStore, teacher_source: str = "class_average"
    ) -> None:
        """Initialises the aggregator.

        Args:
            history_store: Answers the per-teacher average success query.
            teacher_source: "class_average" to take teachers' wins/losses
                from the class-wide average, "records" to count records.
        """
        self._history = history_store
        self._sources: dict[str, OutcomeSource] = {}
        if teacher_source == "class_average":
            self._sources["teacher"] = self._class_average_outcomes

    async def build(
        self, records: Sequence[GameHistoryRecord], user: User
    ) -> StatisticsSnapshot:
        """Reduces ``records`` to a snapshot for ``user``.

        Returns the empty snapshot for no records, or when the role's
        outcome source has nothing to offer.
        """
        snapshot = summarize(records)
        if not records:
            return snapshot

        source = self._sources.get(user.role)
        if source is None:
            return snapshot
        adjusted = await source(records, user, snapshot)
        return adjusted if adjusted is not None else empty_snapshot()

    async def _class_average_outcomes(
        self,
        records: Sequence[GameHistoryRecord],
        user: User,
        snapshot: StatisticsSnapshot,
    ) -> StatisticsSnapshot | None:
        average = await self._history.average_success_for_teacher(user.id)
        if average is None:
            logger.debug("No class average for teacher %s; returning empty statistics.", user.id)
            return None
        total = len(records)
        won = round_half_up(total * average)
        return snapshot.model_copy(
            update={
                "games_won": won,
                "games_lost": total - won,
                "win_rate": average * 100,
            }
        )
