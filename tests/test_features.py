import pytest
from pathlib import Path
from PIL import Image

from puzzle_diff import features


@pytest.fixture()
def sample_image(tmp_path: Path) -> Path:
    path = tmp_path / "sample.png"
    img = Image.new("RGB", (96, 80), color=(128, 128, 128))
    for x in range(96):
        for y in range(80):
            img.putpixel((x, y), (x % 256, y % 256, (x + y) % 256))
    img.save(path)
    return path


@pytest.fixture()
def other_image(tmp_path: Path) -> Path:
    path = tmp_path / "other.png"
    img = Image.new("RGB", (96, 80), color=(0, 0, 0))
    for x in range(96):
        for y in range(80):
            if (x // 8 + y // 8) % 2 == 0:
                img.putpixel((x, y), (255, 255, 255))
    img.save(path)
    return path


def test_load_fingerprint_records_size(sample_image: Path):
    fp = features.load_fingerprint(sample_image)
    assert fp.size == (96, 80)
    assert fp.hash_bits == features.DEFAULT_HASH_SIZE ** 2


def test_identical_files_have_zero_distance(sample_image: Path, tmp_path: Path):
    copy = tmp_path / "copy.png"
    copy.write_bytes(sample_image.read_bytes())
    a = features.load_fingerprint(sample_image)
    b = features.load_fingerprint(copy)
    assert features.normalized_distance(a, b, True) == 0.0
    assert features.normalized_distance(a, b, False) == 0.0


@pytest.mark.parametrize("fix_for_texts", [True, False], ids=["text-fix", "plain"])
def test_distance_is_bounded_and_symmetric(sample_image: Path, other_image: Path, fix_for_texts):
    a = features.load_fingerprint(sample_image)
    b = features.load_fingerprint(other_image)
    d = features.normalized_distance(a, b, fix_for_texts)
    assert 0.0 < d <= features.MAX_DISTANCE
    assert d == features.normalized_distance(b, a, fix_for_texts)


def test_text_fix_averages_both_hashes(sample_image: Path, other_image: Path):
    a = features.load_fingerprint(sample_image)
    b = features.load_fingerprint(other_image)
    expected = (features.hash_distance(a.phash, b.phash) + features.hash_distance(a.dhash, b.dhash)) / 2
    assert features.normalized_distance(a, b, True) == pytest.approx(expected)
    assert features.normalized_distance(a, b, False) == pytest.approx(features.hash_distance(a.phash, b.phash))


def test_mismatched_hash_sizes_rejected(sample_image: Path):
    a = features.load_fingerprint(sample_image, hash_size=8)
    b = features.load_fingerprint(sample_image, hash_size=16)
    with pytest.raises(ValueError):
        features.normalized_distance(a, b)


def test_transparent_image_is_flattened(tmp_path: Path):
    path = tmp_path / "alpha.png"
    Image.new("RGBA", (40, 40), (10, 20, 30, 0)).save(path)
    white = tmp_path / "white.png"
    Image.new("RGB", (40, 40), (255, 255, 255)).save(white)
    a = features.load_fingerprint(path)
    b = features.load_fingerprint(white)
    assert features.normalized_distance(a, b) == 0.0


def test_missing_file_raises_fingerprint_error(tmp_path: Path):
    missing = tmp_path / "nope.png"
    with pytest.raises(features.FingerprintError) as exc:
        features.load_fingerprint(missing)
    assert exc.value.path == str(missing)
    assert "not found" in exc.value.reason


def test_undecodable_file_raises_fingerprint_error(tmp_path: Path):
    bad = tmp_path / "bad.jpg"
    bad.write_bytes(b"definitely not a jpeg")
    with pytest.raises(features.FingerprintError):
        features.load_fingerprint(bad)
    assert issubclass(features.FingerprintError, IOError)


def test_oversized_image_raises_fingerprint_error(tmp_path: Path, write_oversized_png):
    huge = write_oversized_png(tmp_path / "huge.png")
    with pytest.raises(features.FingerprintError) as exc:
        features.load_fingerprint(huge)
    assert exc.value.path == str(huge)
