"""Ranker: split scored candidates into identical/similar buckets and keep the top K of each.

排序模块：将评分结果划分为“相同”与“相似”两组，并分别保留前 K 个。
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Tuple

from puzzle_diff.records import EMPTY_SLOT, RankedSlot, ScoreRecord

DEFAULT_THRESHOLD = 0.12
DEFAULT_CAPACITY = 10


def classify(
    records: Iterable[ScoreRecord],
    threshold: float = DEFAULT_THRESHOLD,
) -> Tuple[List[ScoreRecord], List[ScoreRecord]]:
    """Route valid records to (identical, similar); invalid ones are dropped.

    Both buckets keep the order in which records were encountered, which
    decides how exact ties are resolved downstream.
    """
    identical: List[ScoreRecord] = []
    similar: List[ScoreRecord] = []
    for r in records:
        if not r.valid:
            continue
        if r.distance <= threshold:
            identical.append(r)
        else:
            similar.append(r)
    return identical, similar


def select_top_k(
    bucket: Iterable[ScoreRecord],
    capacity: int = DEFAULT_CAPACITY,
    allow_duplicate_distances: bool = True,
) -> List[RankedSlot]:
    """Return exactly ``capacity`` slots holding the smallest distances of ``bucket``.

    Each record is carried through the slots in order; wherever a slot is not
    smaller than the carried record the two are exchanged and the evicted
    value is carried on. With ``allow_duplicate_distances`` off, a record
    meeting a slot of exactly equal distance is discarded, so only the
    earliest-processed of a tie keeps a place. Unfilled slots stay EMPTY_SLOT.
    """
    if capacity < 1:
        raise ValueError(f"capacity must be >= 1, got {capacity}")
    slots: List[RankedSlot] = [EMPTY_SLOT] * capacity
    for record in bucket:
        if not record.valid:
            continue
        carried = record
        for j in range(capacity):
            current = slots[j]
            if current.distance < carried.distance:
                continue
            if not allow_duplicate_distances and current.distance == carried.distance:
                break
            slots[j], carried = carried, current
    return slots


def rank_buckets(
    identical: List[ScoreRecord],
    similar: List[ScoreRecord],
    capacity: int = DEFAULT_CAPACITY,
) -> Tuple[List[RankedSlot], List[RankedSlot]]:
    """Rank both buckets concurrently: duplicates kept for identical, deduped for similar."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        ident_fut = pool.submit(select_top_k, identical, capacity, True)
        sim_fut = pool.submit(select_top_k, similar, capacity, False)
        return ident_fut.result(), sim_fut.result()
