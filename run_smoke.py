"""Run a simple smoke test of the ranking pipeline without pytest.

Creates a temporary synthetic dataset and runs the main flow on it.
"""
import logging
import tempfile
from pathlib import Path

from puzzle_diff import pipeline, report
from tools.generate_synthetic import generate


def run() -> pipeline.RankResult:
    with tempfile.TemporaryDirectory() as data_dir, tempfile.TemporaryDirectory() as out_dir:
        data = Path(data_dir)
        outp = Path(out_dir)
        generate(data)

        config = pipeline.RankConfig(capacity=5)
        result = pipeline.rank_directory(data / "reference.png", data / "candidates", config)
        with report.Reporter(outp / "ranking.txt") as reporter:
            pipeline.report_result(result, reporter)
        csvp = outp / "ranking.csv"
        report.write_csv(result.identical, result.similar, csvp)
        print(f"Smoke run complete. {len(result.failed)} candidate(s) failed to load.")
        return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
