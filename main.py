import config
from utils.generator import UniformGenerator, PartitionGenerator
from utils.utils import setup_logger, set_logging_level, timer
from errors import MatroidError
from intersection import Mode, MatroidIntersection
from matroid import get_maximal_base_of
import argparse
import pandas as pd

logger = setup_logger(__name__)


def get_matroids(args):
    """
    Generates a pair of matroids over one random weighted ground set.

    :param args: The object containing arguments parsed from the command line.
    :return: A tuple of two matroids.
    """
    if args.kind == "uniform":
        rank = args.rank if args.rank is not None else max(1, args.n // 2)
        generator = UniformGenerator(args.n, rank, seed=args.seed)
        logger.info(f"Generating uniform matroid pair (n={args.n}, rank={rank})")
    elif args.kind == "partition":
        generator = PartitionGenerator(args.n, args.blocks, capacity=args.capacity, seed=args.seed)
        logger.info(
            f"Generating partition matroid pair (n={args.n}, blocks={args.blocks}, capacity={args.capacity})"
        )
    else:
        raise ValueError(f"Unknown matroid kind: {args.kind}")

    return generator.generate_pair()


def run_algorithms(m1, m2, modes):
    """
    Runs the greedy basis builder on each matroid and the intersection in
    every requested mode.

    :param m1: The first matroid.
    :param m2: The second matroid.
    :param modes: A list of intersection mode names.
    :return: A DataFrame with one row per run.
    """
    results = []

    for label, m in (("GREEDY-M1", m1), ("GREEDY-M2", m2)):
        base, elapsed = timer(get_maximal_base_of)(m)
        results.append(
            {
                "Algorithm": label,
                "Size": base.cardinality(),
                "Weight": base.weight(),
                "Augmentations": 0,
                "Time (s)": round(elapsed, 3),
            }
        )

    for name in modes:
        mode = Mode.parse(name)
        logger.info(f"================ Running {mode.value} ================")
        engine = MatroidIntersection(m1, m2, mode)
        common, elapsed = engine.run()
        logger.info(f"Result: {common.keys()}")
        logger.info(f"Execution time: {elapsed:.3f} seconds")

        results.append(
            {
                "Algorithm": f"MI-{mode.value.upper()}",
                "Size": common.cardinality(),
                "Weight": common.weight(),
                "Augmentations": engine.iterations,
                "Time (s)": round(elapsed, 3),
            }
        )

    return pd.DataFrame(results)


def main(argv=None):
    """
    Main function: parses command-line arguments, runs experiments, and prints results.
    """
    parser = argparse.ArgumentParser(
        description="Run greedy basis and matroid intersection algorithms on random matroids.",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "-n", type=int, default=config.NUM_ELEMENTS_LIST[0], help="Number of ground-set elements."
    )
    parser.add_argument(
        "--kind",
        type=str,
        default="partition",
        choices=["uniform", "partition"],
        help="Kind of random matroids to generate.",
    )
    parser.add_argument(
        "--rank", type=int, default=None, help="Rank of uniform matroids (default n // 2)."
    )
    parser.add_argument(
        "--blocks", type=int, default=4, help="Number of blocks of partition matroids."
    )
    parser.add_argument(
        "--capacity", type=int, default=1, help="Per-block capacity of partition matroids."
    )
    parser.add_argument(
        "--seed", type=int, default=config.RANDOM_SEED, help="Random seed."
    )
    parser.add_argument(
        "--modes",
        nargs="+",
        default=[m.value for m in Mode],
        help="Intersection modes to run.\nAvailable: cardinality, weight, weighted_cardinality.",
    )
    parser.add_argument(
        "--log-level", type=str, default=config.LOGGING_LEVEL, help="Logging level (DEBUG, INFO, ...)."
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help=f"Also write logs to a dated file under {config.LOG_PATH}.",
    )

    args = parser.parse_args(argv)
    set_logging_level(args.log_level)
    if args.log_file:
        for name in (__name__, "matroid", "intersection"):
            setup_logger(name, save_file=True)

    try:
        # 1. Get matroids
        m1, m2 = get_matroids(args)

        # 2. Run algorithms
        results_df = run_algorithms(m1, m2, args.modes)

        # 3. Display results
        print("\n================ Experiment Results ================")
        print(f"Ground set size: {m1.ground_set().cardinality()}")
        print(results_df.to_string(index=False))
        print("=" * 40)
        return results_df

    except (ValueError, MatroidError) as e:
        logger.error(f"An error occurred: {e}")
        return None


if __name__ == "__main__":
    main()
