"""Generate a synthetic reference image and candidate directory for ranking experiments.

Creates `reference.png` and a `candidates/` folder under the output directory:
exact/recompressed/brightened copies of the reference (near-duplicates),
edited variants (similar), unrelated images and one file that is not an image.

Usage:
  python tools/generate_synthetic.py --out_dir ./data --count 3
"""
import argparse
from pathlib import Path
from typing import Dict

from PIL import Image, ImageDraw, ImageEnhance


def make_reference(size=(400, 300), seed: int = 1) -> Image.Image:
    img = Image.new('RGB', size, (200 + seed * 5, 180 + seed * 3, 160 + seed * 2))
    draw = ImageDraw.Draw(img)
    for x in range(50, size[0] - 50, 6):
        for y in range(60, size[1] - 60, 6):
            if (x * y + seed) % 13 < 4:
                draw.point((x, y), (0, 0, 0))
    draw.ellipse((60, 40, 200, 180), fill=(30, 90, 160))
    draw.rectangle((230, 150, 360, 260), fill=(160, 40, 40))
    return img


def make_unique(index: int, size=(300, 200)) -> Image.Image:
    img = Image.new('RGB', size, (20 * index % 256, 255 - 30 * index % 256, 90))
    draw = ImageDraw.Draw(img)
    for k in range(0, size[0], 10 + index):
        draw.line((k, 0, size[0] - k, size[1]), fill=(255, 255, 255), width=2)
    return img


def generate(out_dir: Path, count: int = 3) -> Dict[str, str]:
    """Write the dataset and return {candidate file name: intended bucket}."""
    out_dir.mkdir(parents=True, exist_ok=True)
    cand = out_dir / 'candidates'
    cand.mkdir(parents=True, exist_ok=True)

    ref = make_reference()
    ref.save(out_dir / 'reference.png')

    labels: Dict[str, str] = {}

    ref.save(cand / 'copy.png')
    labels['copy.png'] = 'identical'

    ref.save(cand / 'jpeg90.jpg', quality=90)
    labels['jpeg90.jpg'] = 'identical'

    ImageEnhance.Brightness(ref).enhance(1.1).save(cand / 'bright.png')
    labels['bright.png'] = 'identical'

    ref.transpose(Image.Transpose.FLIP_LEFT_RIGHT).save(cand / 'flip.png')
    labels['flip.png'] = 'similar'

    ps = ref.copy()
    ImageDraw.Draw(ps).rectangle((40, 30, 260, 200), fill=(255, 255, 255))
    ps.save(cand / 'overlay.png')
    labels['overlay.png'] = 'similar'

    for j in range(1, count + 1):
        name = f'unique_{j}.png'
        make_unique(j).save(cand / name)
        labels[name] = 'similar'

    (cand / 'broken.jpg').write_bytes(b'not an image at all')
    labels['broken.jpg'] = 'failed'

    return labels


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--out_dir', default='./data')
    parser.add_argument('--count', type=int, default=3)
    args = parser.parse_args()
    out = Path(args.out_dir)
    labels = generate(out, count=args.count)
    print('Synthetic dataset created:')
    print(' Reference:', out / 'reference.png')
    print(' Candidates:', out / 'candidates', f'({len(labels)} files)')
