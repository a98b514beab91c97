"""Wires fingerprinting, scoring, classification and ranking together."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from puzzle_diff import listing, ranker, scorer
from puzzle_diff.features import DEFAULT_HASH_SIZE, ImageFingerprint, load_fingerprint
from puzzle_diff.records import RankedSlot, ScoreRecord
from puzzle_diff.report import Reporter

logger = logging.getLogger(__name__)


@dataclass
class RankConfig:
    threshold: float = ranker.DEFAULT_THRESHOLD
    capacity: int = ranker.DEFAULT_CAPACITY
    fix_for_texts: bool = True
    workers: Optional[int] = None
    hash_size: int = DEFAULT_HASH_SIZE

    def __post_init__(self):
        if self.threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {self.threshold}")
        if self.capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {self.capacity}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.hash_size < 2:
            raise ValueError(f"hash_size must be >= 2, got {self.hash_size}")


@dataclass
class RankResult:
    reference: str
    candidates: List[str]
    records: List[ScoreRecord]
    identical: List[RankedSlot]
    similar: List[RankedSlot]
    config: RankConfig = field(default_factory=RankConfig)

    @property
    def failed(self) -> List[ScoreRecord]:
        return [r for r in self.records if not r.valid]


def rank_candidates(
    reference_path: Union[str, Path],
    candidates: Sequence[str],
    config: Optional[RankConfig] = None,
) -> RankResult:
    """Rank ``candidates`` by distance to the image at ``reference_path``.

    A reference that cannot be fingerprinted raises FingerprintError; a
    candidate that cannot be fingerprinted is logged and left out of both lists.
    """
    config = config or RankConfig()
    reference = load_fingerprint(reference_path, hash_size=config.hash_size)
    return _rank(reference_path, reference, candidates, config)


def _rank(
    reference_path: Union[str, Path],
    reference: ImageFingerprint,
    candidates: Sequence[str],
    config: RankConfig,
) -> RankResult:
    def _load(path: str):
        return load_fingerprint(path, hash_size=config.hash_size)

    records = scorer.score_candidates(
        reference,
        list(candidates),
        config.fix_for_texts,
        workers=config.workers,
        loader=_load,
    )
    identical, similar = ranker.classify(records, config.threshold)
    logger.debug("identical bucket: %d, similar bucket: %d", len(identical), len(similar))
    identical_ranked, similar_ranked = ranker.rank_buckets(identical, similar, config.capacity)
    return RankResult(
        reference=str(reference_path),
        candidates=list(candidates),
        records=records,
        identical=identical_ranked,
        similar=similar_ranked,
        config=config,
    )


def rank_directory(
    reference_path: Union[str, Path],
    directory: Union[str, Path],
    config: Optional[RankConfig] = None,
) -> RankResult:
    """Rank every file in ``directory``; the reference is checked before listing."""
    config = config or RankConfig()
    reference = load_fingerprint(reference_path, hash_size=config.hash_size)
    candidates = listing.list_candidates(directory)
    logger.info("Found %d candidate files in %s", len(candidates), directory)
    return _rank(reference_path, reference, candidates, config)


def report_result(result: RankResult, reporter: Reporter) -> None:
    reporter.write(f"refImage {result.reference}")
    reporter.write(f"Number of file names found in search directory: {len(result.candidates)}")
    reporter.write()
    reporter.write_ranked(f"Identical images (distance <= {result.config.threshold:g}):", result.identical)
    reporter.write()
    reporter.write_ranked(f"Similar images (distance > {result.config.threshold:g}):", result.similar)
