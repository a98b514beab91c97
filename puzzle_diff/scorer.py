"""Parallel scorer: fingerprint every candidate and measure its distance to the reference.

并行评分：为每个候选图计算指纹及其与参考图的距离。
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence

from puzzle_diff.features import (
    MAX_DISTANCE,
    FingerprintError,
    ImageFingerprint,
    load_fingerprint,
    normalized_distance,
)
from puzzle_diff.records import ScoreRecord

logger = logging.getLogger(__name__)

Loader = Callable[[str], ImageFingerprint]
DistanceFn = Callable[[ImageFingerprint, ImageFingerprint, bool], float]
ProgressFn = Callable[[int, int, ScoreRecord], None]


def _score_one(
    index: int,
    candidate: str,
    reference: ImageFingerprint,
    fix_for_texts: bool,
    loader: Loader,
    distance: DistanceFn,
    results: List[Optional[ScoreRecord]],
) -> ScoreRecord:
    try:
        fp = loader(candidate)
        d = float(distance(reference, fp, fix_for_texts))
        if not 0.0 <= d <= MAX_DISTANCE:
            raise ValueError(f"distance {d!r} outside [0, {MAX_DISTANCE}]")
        record = ScoreRecord(id=candidate, distance=d, valid=True)
    except FingerprintError as e:
        logger.warning("Unable to read image [%s]: %s", candidate, e.reason)
        record = ScoreRecord.failed(candidate)
    except (OSError, ValueError) as e:
        logger.warning("Unable to score image [%s]: %s", candidate, e)
        record = ScoreRecord.failed(candidate)
    results[index] = record
    return record


def score_candidates(
    reference: ImageFingerprint,
    candidates: Sequence[str],
    fix_for_texts: bool = True,
    *,
    workers: Optional[int] = None,
    loader: Loader = load_fingerprint,
    distance: DistanceFn = normalized_distance,
    progress: Optional[ProgressFn] = None,
) -> List[ScoreRecord]:
    """Score ``candidates`` against ``reference`` on a thread pool.

    The returned list has one record per candidate, in candidate order.
    Candidates that fail to load become invalid records and are logged;
    they never abort the run. Returns only once every task has finished.
    """
    total = len(candidates)
    results: List[Optional[ScoreRecord]] = [None] * total
    if total == 0:
        return []

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(_score_one, i, c, reference, fix_for_texts, loader, distance, results)
            for i, c in enumerate(candidates)
        ]
        done = 0
        for fut in as_completed(futures):
            record = fut.result()
            done += 1
            if progress is not None:
                progress(done, total, record)

    failed = sum(1 for r in results if not r.valid)
    if failed:
        logger.info("%d of %d candidates could not be scored", failed, total)
    return results
