"""
Rhythm mini-game.

The note chart is generated up front from the tier's BPM. Only the
current note can be judged; the caller samples the clock and feeds hit
times (and periodic ``expire_rhythm_notes`` ticks) into the reducers.
Note times are offsets in milliseconds from ``start_time``.
"""

from __future__ import annotations

import random

from ..clock import resolve
from ..state.schema import IntelligenceTier
from ..state.schemas.minigame import NoteJudgement, RhythmNote, RhythmSession
from .attributes import round_half_up


# tier -> (note count, bpm)
RHYTHM_DIFFICULTY: dict[IntelligenceTier, tuple[int, int]] = {
    IntelligenceTier.BABY: (8, 80),
    IntelligenceTier.CHILD: (12, 100),
    IntelligenceTier.TEEN: (20, 120),
    IntelligenceTier.ADULT: (30, 140),
}

RHYTHM_LANES = 4
LEAD_IN_BEATS = 2        # Silent beats before the first note
MISS_WINDOW_MS = 200     # Past target + this, an unhit note is a miss

# (max |diff| in ms, judgement, points), tightest first
HIT_WINDOWS: tuple[tuple[int, NoteJudgement, int], ...] = (
    (30, NoteJudgement.MARVELOUS, 100),
    (60, NoteJudgement.EXCELLENT, 80),
    (100, NoteJudgement.GOOD, 50),
    (150, NoteJudgement.FAIR, 20),
)

COMBO_STEP = 5
COMBO_BONUS = 10


def init_rhythm_game(tier: IntelligenceTier, rng: random.Random | None = None) -> RhythmSession:
    rng = rng or random.Random()
    note_count, bpm = RHYTHM_DIFFICULTY[tier]
    beat_interval = 60000 / bpm

    notes = tuple(
        RhythmNote(
            id=i,
            lane=rng.randrange(RHYTHM_LANES),
            target_time=(i + LEAD_IN_BEATS) * beat_interval,
        )
        for i in range(note_count)
    )
    return RhythmSession(tier=tier, notes=notes, bpm=bpm)


def start_rhythm_game(session: RhythmSession, now: int | None = None) -> RhythmSession:
    if session.is_playing or session.is_complete:
        return session
    return session.model_copy(update={"is_playing": True, "start_time": resolve(now)})


def judge_timing(diff: float) -> tuple[NoteJudgement, int]:
    """Judgement and base points for an absolute timing error in ms."""
    for window, judgement, points in HIT_WINDOWS:
        if diff <= window:
            return judgement, points
    return NoteJudgement.MISS, 0


def combo_bonus(combo: int) -> int:
    return (combo // COMBO_STEP) * COMBO_BONUS


def _record(
    session: RhythmSession,
    judgement: NoteJudgement,
    points: int,
    hit_time: float | None = None,
) -> RhythmSession:
    """Close the current note with ``judgement`` and advance."""
    index = session.current_note_index
    note = session.notes[index].model_copy(update={"hit_time": hit_time, "result": judgement})
    notes = session.notes[:index] + (note,) + session.notes[index + 1:]

    missed = judgement == NoteJudgement.MISS
    combo = 0 if missed else session.combo + 1
    next_index = index + 1
    finished = next_index >= len(session.notes)

    return session.model_copy(update={
        "notes": notes,
        "current_note_index": next_index,
        "hits": session.hits if missed else session.hits + 1,
        "misses": session.misses + 1 if missed else session.misses,
        "combo": combo,
        "max_combo": max(session.max_combo, combo),
        "score": session.score + points + combo_bonus(combo),
        "is_playing": not finished,
        "is_complete": finished,
    })


def hit_rhythm_note(session: RhythmSession, lane: int, hit_time: int) -> RhythmSession:
    """
    Judge a tap on ``lane`` at wall-clock ``hit_time``.

    Ignored unless playing and the lane matches the current note.
    """
    note = session.current_note
    if not session.is_playing or note is None or note.result is not None:
        return session
    if note.lane != lane:
        return session

    elapsed = hit_time - session.start_time
    judgement, points = judge_timing(abs(elapsed - note.target_time))
    return _record(session, judgement, points, hit_time=elapsed)


def miss_rhythm_note(session: RhythmSession) -> RhythmSession:
    """Mark the current note missed."""
    if not session.is_playing or session.current_note is None:
        return session
    return _record(session, NoteJudgement.MISS, 0)


def expire_rhythm_notes(session: RhythmSession, now: int | None = None) -> RhythmSession:
    """Miss every note whose hit window closed before ``now``."""
    now = resolve(now)
    while session.is_playing:
        note = session.current_note
        if note is None or now - session.start_time <= note.target_time + MISS_WINDOW_MS:
            break
        session = miss_rhythm_note(session)
    return session


def max_rhythm_points(note_count: int) -> int:
    """Points for hitting every note marvelous, combo bonuses included."""
    best = HIT_WINDOWS[0][2]
    return sum(best + combo_bonus(combo) for combo in range(1, note_count + 1))


def calculate_rhythm_score(session: RhythmSession) -> int:
    """Accumulated points as a percentage of the best possible run."""
    maximum = max_rhythm_points(len(session.notes))
    if maximum == 0:
        return 0
    return min(100, round_half_up(session.score / maximum * 100))
