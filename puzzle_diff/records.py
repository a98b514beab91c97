"""Score records, ranked slots and the sentinel distances that order them."""
from dataclasses import dataclass

from puzzle_diff.features import MAX_DISTANCE

# empty slots lose to every valid record, failed loads lose to empty slots
EMPTY_DISTANCE = 100.0
INVALID_DISTANCE = 1000.0

if not MAX_DISTANCE < EMPTY_DISTANCE < INVALID_DISTANCE:
    raise RuntimeError("sentinel distances must sort above every valid distance")


@dataclass(frozen=True)
class ScoreRecord:
    id: str
    distance: float
    valid: bool

    @classmethod
    def failed(cls, candidate_id: str) -> "ScoreRecord":
        return cls(id=candidate_id, distance=INVALID_DISTANCE, valid=False)


# A ranked slot holds either a valid ScoreRecord or EMPTY_SLOT.
RankedSlot = ScoreRecord

EMPTY_SLOT = ScoreRecord(id="", distance=EMPTY_DISTANCE, valid=False)


def is_empty(slot: RankedSlot) -> bool:
    return slot.id == ""
