"""
Measure gender inference latency on a synthetic chapter.

Each name of the roster is inferred against the same chapter, first with cold caches and
then again with warm ones. Reports mean and p50/p95/p99 latency in milliseconds.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from novelgender.gender_inference import GenderInferenceEngine

logger = logging.getLogger("novelgender")

ROSTER = {
    "Lin Feng": {"gender": "male", "confidence": 0.9, "appearances": 12},
    "Mei Ling": {"gender": "female", "confidence": 0.9, "appearances": 9},
    "Xiao Yan": {"gender": "male", "confidence": 0.8, "appearances": 6},
    "Yun Xi": {"gender": "unknown", "confidence": 0.0, "appearances": 4},
    "Elder Mo": {"gender": "male", "confidence": 0.75, "appearances": 3},
    "Su Qing": {"gender": "unknown", "confidence": 0.0, "appearances": 2},
}

PARAGRAPHS = [
    '"Lin Feng gege, wait for me!" Mei Ling called, lifting her skirt as she ran.',
    "Lin Feng turned, his sword still humming with qi, and smiled at her.",
    "Young Master Xiao Yan watched from the pavilion. He was Mei Ling's senior brother.",
    '"Junior sister Yun Xi has arrived," Elder Mo said, and he bowed to the sect leader.',
    "Yun Xi adjusted her jade hairpin. Her slender fingers trembled.",
    "Su Qing stood alongside Lin Feng, Xiao Yan and Elder Mo at the gate.",
]


def build_chapter(repeats: int) -> str:
    return " ".join(PARAGRAPHS * repeats)


def time_pass(engine: GenderInferenceEngine, chapter: str) -> np.ndarray:
    timings = []
    for name in ROSTER:
        start = time.perf_counter()
        engine.guess_gender(name, chapter, ROSTER)
        timings.append((time.perf_counter() - start) * 1000.0)
    return np.array(timings)


def report(label: str, timings: np.ndarray) -> None:
    p50, p95, p99 = np.percentile(timings, [50, 95, 99])
    print(
        f"{label:>5}: n={timings.size:4d} mean={timings.mean():8.2f}ms "
        f"p50={p50:8.2f}ms p95={p95:8.2f}ms p99={p99:8.2f}ms"
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Benchmark gender inference latency.")
    parser.add_argument("--rounds", type=int, default=20, help="Number of cold/warm rounds.")
    parser.add_argument("--repeats", type=int, default=10, help="Paragraph repetitions per chapter.")
    parser.add_argument("--verbose", action="store_true", help="Log cache activity.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    chapter = build_chapter(args.repeats)
    engine = GenderInferenceEngine()
    print(f"Chapter: {len(chapter)} characters, roster: {len(ROSTER)} names, rounds: {args.rounds}")

    cold = []
    warm = []
    for _ in range(args.rounds):
        engine.clear_caches()
        cold.append(time_pass(engine, chapter))
        warm.append(time_pass(engine, chapter))

    report("cold", np.concatenate(cold))
    report("warm", np.concatenate(warm))

    metrics = engine.multi_character_analyzer.get_analysis_metrics()
    logger.info(f"Cache sizes after benchmark: {metrics.cache_sizes}")
    for name in ROSTER:
        result = engine.guess_gender(name, chapter, ROSTER)
        print(f"  {name:<10} -> {result.gender:<7} {result.confidence:.3f}")
