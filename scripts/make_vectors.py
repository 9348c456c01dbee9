#!/usr/bin/env python
"""Write random vectors to a binary data file for trying out knn_data."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import argparse

import numpy as np

from knndata.datasets.loader import write_vectors
from knndata.datasets.utils import dataset_stats


def main():
    parser = argparse.ArgumentParser(description="Generate a random vector file")
    parser.add_argument("--n", type=int, default=1000, help="Number of vectors")
    parser.add_argument("--size", type=int, default=3, help="Vector length")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output", default="reference.pts", help="Output file")
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    X = rng.standard_normal((args.n, args.size))
    path = write_vectors(args.output, X)

    stats = dataset_stats(X)
    print(f"Wrote {stats['n']} vectors of length {stats['D']} to {path}")
    print(f"  Mean norm: {stats['mean_norm']:.2f}")
    print(f"  Std norm:  {stats['std_norm']:.2f}")


if __name__ == "__main__":
    main()
