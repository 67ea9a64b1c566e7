#!/usr/bin/env python3
"""
benchmark_words.py
==================

Benchmark word synthesis across property configurations.

For random words over a small alphabet, time :class:`WordSynthesis` under
each configuration and record whether the word was fully separated.

Outputs:
  - 'word_results.csv': one row per word, configuration and repetition
  - 'word_summary.csv': mean/std time and success rate per configuration

Usage:
  python benchmark_words.py [--out_dir OUT_DIR]
                            [--n_words N]
                            [--length L]
                            [--alphabet A]
                            [--repeat R]
                            [--workers W]
                            [--seed S]
"""
import os
import sys
import time
import argparse
import logging
import random
from pathlib import Path
from typing import Dict, List

import pandas as pd

# Ensure project root on sys.path
project_root = os.path.abspath(
    os.path.join(os.path.dirname(__file__), os.pardir, os.pardir, os.pardir)
)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from pnsynth.Synthesis.properties import PNProperties
from pnsynth.Synthesis.word import WordSynthesis

CONFIGURATIONS: Dict[str, List[str]] = {
    "none": [],
    "pure": ["pure"],
    "plain": ["plain"],
    "pure+plain": ["pure", "plain"],
    "safe": ["safe"],
    "k-bounded=2": ["k-bounded=2"],
    "t-net": ["t-net"],
}


def setup_logging():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def random_words(n_words: int, length: int, alphabet: int, seed: int) -> List[List[str]]:
    rng = random.Random(seed)
    letters = [chr(ord("a") + i) for i in range(alphabet)]
    return [[rng.choice(letters) for _ in range(length)] for _ in range(n_words)]


def run_benchmark(
    words: List[List[str]],
    repeat: int,
    workers: int,
    out_dir: Path,
) -> pd.DataFrame:
    """
    Time every word under every configuration and write both CSV files.
    """
    records = []
    logging.info(f"Synthesising {len(words)} words, {repeat} repeats, {workers} worker(s)")
    for name, flags in CONFIGURATIONS.items():
        props = PNProperties.from_strings(flags)
        for idx, word in enumerate(words):
            for _ in range(repeat):
                t0 = time.perf_counter()
                ws = WordSynthesis(word, props, workers=workers)
                elapsed_ms = (time.perf_counter() - t0) * 1000
                records.append(
                    {
                        "config": name,
                        "word": idx,
                        "length": len(word),
                        "success": ws.synthesis.was_successfully_separated(),
                        "regions": len(ws.synthesis.get_separating_regions()),
                        "time_ms": elapsed_ms,
                    }
                )
        logging.info(f"{name}: last run time={elapsed_ms:.1f}ms")

    df = pd.DataFrame(records)
    df.to_csv(out_dir / "word_results.csv", index=False)
    summary = (
        df.groupby("config")
        .agg(
            mean_ms=("time_ms", "mean"),
            std_ms=("time_ms", "std"),
            success_rate=("success", "mean"),
            mean_regions=("regions", "mean"),
        )
        .reset_index()
    )
    summary.to_csv(out_dir / "word_summary.csv", index=False)
    return summary


def main():
    parser = argparse.ArgumentParser(description="Benchmark word synthesis")
    parser.add_argument(
        "--out_dir",
        type=Path,
        default=Path(project_root) / "Data" / "Benchmark" / "synthesis",
        help="Directory for the CSV outputs",
    )
    parser.add_argument("--n_words", type=int, default=20, help="Number of random words")
    parser.add_argument("--length", type=int, default=12, help="Letters per word")
    parser.add_argument("--alphabet", type=int, default=3, help="Alphabet size (<= 26)")
    parser.add_argument("--repeat", type=int, default=1, help="Repetitions per word")
    parser.add_argument("--workers", type=int, default=1, help="Search threads")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    setup_logging()
    args.out_dir.mkdir(parents=True, exist_ok=True)
    words = random_words(args.n_words, args.length, args.alphabet, args.seed)
    summary = run_benchmark(words, args.repeat, args.workers, args.out_dir)
    logging.info("\n" + summary.to_string(index=False))


if __name__ == "__main__":
    main()
