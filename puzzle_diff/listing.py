"""Candidate enumeration for a search directory."""
from pathlib import Path
from typing import List, Union


def list_candidates(directory: Union[str, Path]) -> List[str]:
    """Return paths of the regular files directly inside ``directory``, sorted by name.

    Hidden files are skipped. The sort keeps the order stable between runs,
    which tie resolution in the ranker relies on.
    """
    d = Path(directory)
    if not d.exists():
        raise FileNotFoundError(f"Search directory not found: {d}")
    if not d.is_dir():
        raise NotADirectoryError(f"Not a directory: {d}")
    out: List[str] = []
    for p in sorted(d.iterdir()):
        if not p.is_file() or p.name.startswith("."):
            continue
        out.append(str(p))
    return out
