"""Command-line entry point: k nearest neighbors of binary vector files."""

import argparse
import sys

from .config import (
    DEFAULT_DISTANCE_FILE,
    DEFAULT_INDEX_FILE,
    DEFAULT_REFERENCE_FILE,
    DEFAULT_THREADS,
    KnnConfig,
)
from .datasets.loader import load_vector_sets
from .datasets.utils import dataset_stats
from .errors import ConfigurationError, DataFormatError
from .search.exhaustive import RunSummary, run_search
from .search.selection import effective_k
from .utils.timer import timer

PROGRAM_NAME = "knn_data"

EXIT_HELP = 1
EXIT_BAD_OPTIONS = -1
EXIT_FAILED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Computes the k nearest neighbors of all pairs of vectors "
                    "in the given binary data files.",
        add_help=False,
    )
    options = parser.add_argument_group("Program options")
    options.add_argument("-h", "--help", action="store_true",
                         help="show this help message and exit")
    options.add_argument("-t", "--threads", type=int, default=DEFAULT_THREADS,
                         help="Input:  Number of threads to start (int)")
    options.add_argument("-k", "--knn", type=int, default=None,
                         help="Input:  K-nearest neighbors (int)")
    options.add_argument("-s", "--size", type=int, default=None,
                         help="Input:  Data vector length (int)")
    options.add_argument("-r", "--reference-file", default=DEFAULT_REFERENCE_FILE,
                         help="Input:  Reference data file (string:filename)")
    options.add_argument("-f", "--fit-file", default=None,
                         help="Input:  Fitting data file (string:filename)")
    options.add_argument("-d", "--distance-file", default=DEFAULT_DISTANCE_FILE,
                         help="Output: K-nn distances file (string:filename)")
    options.add_argument("-i", "--index-file", default=DEFAULT_INDEX_FILE,
                         help="Output: K-nn indices file (string:filename)")
    options.add_argument("--no-progress", action="store_true",
                         help="Do not show the progress bar")
    return parser


def config_from_args(args: argparse.Namespace) -> KnnConfig:
    return KnnConfig(
        k=args.knn,
        vector_size=args.size,
        threads=args.threads,
        reference_file=args.reference_file,
        fit_file=args.fit_file,
        distance_file=args.distance_file,
        index_file=args.index_file,
        progress=not args.no_progress,
    )


def print_banner() -> None:
    print(f"\n   {PROGRAM_NAME}: brute-force k nearest neighbors")
    print("   Computes the k nearest neighbors of all pairs of")
    print("   vectors in the given binary data files.")
    print()
    print("   Use -h or --help to see the complete list of options.")
    print()


def print_summary(summary: RunSummary) -> None:
    print(f"\n{'='*50}")
    print(f"Reference vectors: {summary.n_reference}")
    print(f"Fitting vectors:   {summary.n_fitting}")
    print(f"Effective k:       {summary.effective_k}")
    print(f"Load time:         {summary.load_time:.3f}s")
    print(f"Search time:       {summary.search_time:.3f}s "
          f"({summary.frames_per_second:.1f} frames/s)")
    print(f"Memory:            {summary.memory_bytes/1024/1024:.1f}MB")
    print(f"{'='*50}")


def run(config: KnnConfig) -> RunSummary:
    """Load, search and write, printing progress messages along the way."""
    print("Running with the following options:")
    for name, value in config.as_rows():
        print(f"{name + ' =':<16}{value}")
    print()

    with timer() as t_load:
        print(f"Reading reference coordinates from file: {config.reference_file} ... ", end="")
        if config.fitting_path != config.reference_file:
            print()
            print(f"Reading fitting coordinates from file: {config.fitting_path} ... ", end="")
        reference, fitting = load_vector_sets(
            config.reference_file, config.vector_size, config.fitting_path
        )
        print("done.")

    stats = dataset_stats(reference)
    print(f"  Reference: {reference.shape}, mean norm {stats['mean_norm']:.3f}")
    print(f"  Fitting:   {fitting.shape}")
    k_eff = effective_k(config.k, reference.shape[0])
    if k_eff < config.k:
        print(f"  Only {reference.shape[0]} reference vectors: using k = {k_eff}")

    return run_search(config, reference, fitting, load_time=t_load.elapsed)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    print_banner()

    if args.help:
        print(f"usage: {PROGRAM_NAME} [options]")
        parser.print_help()
        return EXIT_HELP

    config = config_from_args(args)
    missing = config.missing()
    for name in missing:
        print(f"ERROR: --{name} not supplied.")
        print()
    if missing:
        return EXIT_BAD_OPTIONS

    try:
        config.validate()
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        return EXIT_BAD_OPTIONS

    try:
        summary = run(config)
    except (DataFormatError, OSError) as e:
        print(f"\nERROR: {e}")
        return EXIT_FAILED

    print_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
