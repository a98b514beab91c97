"""Fingerprint utilities: pHash + dHash fingerprints and their normalized distance.

This module implements:
- load_fingerprint(image_path, hash_size) -> ImageFingerprint
- hash_distance(a, b) -> fraction of differing bits
- normalized_distance(a, b, fix_for_texts) -> float in [0, MAX_DISTANCE]

Hashing itself is delegated to imagehash; nothing here interprets the bits
beyond counting how many differ.

指纹工具：pHash + dHash 指纹及其归一化距离。

本模块实现：
- load_fingerprint(image_path, hash_size) -> 返回 ImageFingerprint
- hash_distance(a, b) -> 不同比特所占比例
- normalized_distance(a, b, fix_for_texts) -> 返回 [0, MAX_DISTANCE] 内的浮点数
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import imagehash
import numpy as np
from PIL import Image, UnidentifiedImageError

MAX_DISTANCE = 1.0
DEFAULT_HASH_SIZE = 8


class FingerprintError(IOError):
    """Raised when an image file cannot be turned into a fingerprint."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Unable to read image [{path}]: {reason}")
        self.path = str(path)
        self.reason = reason


@dataclass(frozen=True)
class ImageFingerprint:
    phash: imagehash.ImageHash
    dhash: imagehash.ImageHash
    size: Tuple[int, int]

    @property
    def hash_bits(self) -> int:
        return int(self.phash.hash.size)


def _flatten(img: Image.Image) -> Image.Image:
    # transparent regions hash as white
    if img.mode in ("RGBA", "LA", "P"):
        if img.mode == "P":
            img = img.convert("RGBA")
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def load_fingerprint(image_path: Union[str, Path], hash_size: int = DEFAULT_HASH_SIZE) -> ImageFingerprint:
    """Decode the image at ``image_path`` and compute its fingerprint.

    Raises FingerprintError if the file is missing, unreadable or not an image.
    """
    path = Path(image_path)
    try:
        with Image.open(str(path)) as img:
            img.load()
            size = img.size
            rgb = _flatten(img)
            ph = imagehash.phash(rgb, hash_size=hash_size)
            dh = imagehash.dhash(rgb, hash_size=hash_size)
    except FileNotFoundError:
        raise FingerprintError(path, "file not found") from None
    except UnidentifiedImageError:
        raise FingerprintError(path, "unsupported or corrupt image format") from None
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise FingerprintError(path, str(e) or e.__class__.__name__) from e
    return ImageFingerprint(phash=ph, dhash=dh, size=size)


def hash_distance(a: imagehash.ImageHash, b: imagehash.ImageHash) -> float:
    """Fraction of bits that differ between two hashes of equal size."""
    if a.hash.shape != b.hash.shape:
        raise ValueError(f"hash shapes differ: {a.hash.shape} vs {b.hash.shape}")
    bits = a.hash.size
    if bits == 0:
        return 0.0
    return float(np.count_nonzero(a.hash != b.hash)) / bits


def normalized_distance(a: ImageFingerprint, b: ImageFingerprint, fix_for_texts: bool = True) -> float:
    """Fraction of differing hash bits, from 0.0 for identical up to MAX_DISTANCE.

    In text-fix mode the DCT hash distance is averaged with the gradient hash
    distance; sparse text or line-art images otherwise look alike to pHash.
    """
    d = hash_distance(a.phash, b.phash)
    if fix_for_texts:
        d = (d + hash_distance(a.dhash, b.dhash)) / 2.0
    return d
