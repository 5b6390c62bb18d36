#!/usr/bin/env python3


import argparse
import logging
import sys
from dataclasses import replace

from incrlab.config import LabConfig, resolve_config
from incrlab.errors import LabConfigError
from incrlab.registry import all_tests
from incrlab.runner import LabRunner

# Stack size of the worker thread running the batch (deep recursive strategies).
WORKER_STACK_SIZE = 64 * 1024 * 1024


def select_tests(names):
    tests = all_tests()
    if not names:
        return tests
    by_name = {t.name(): t for t in tests}
    unknown = [n for n in names if n not in by_name]
    if unknown:
        raise LabConfigError(f"Unknown experiments: {', '.join(unknown)}")
    return [by_name[n] for n in names]


def run_all_tests(config: LabConfig) -> None:
    logger = logging.getLogger("incrlab")
    tests = select_tests(config.experiments)
    runner = LabRunner(config.results_dir, plots=config.plots)
    outcomes = runner.run(tests, config.params)
    for outcome in outcomes:
        if outcome.results is None:
            logger.info("Test: %s -> %s", outcome.name, outcome.status)
            continue
        logger.info(
            "Test: %s -> %d samples, all_valid=%s",
            outcome.name,
            len(outcome.results.samples),
            outcome.results.all_valid(),
        )
    logger.info("Results in %s", runner.timestamp_dir)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Naive vs incremental lab experiments")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML/JSON config (default: ./config.yaml if present, else built-in defaults)",
    )
    parser.add_argument(
        "--only",
        action="append",
        default=None,
        help="Run only the named experiment (repeatable); overrides config 'experiments'",
    )
    args = parser.parse_args(argv)

    config = resolve_config(args.config)
    if args.only:
        config = replace(config, experiments=tuple(args.only))

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_all_tests(config)


if __name__ == "__main__":
    # Allow deeper recursion for the recursive strategies (process-wide).
    try:
        sys.setrecursionlimit(200000)
    except Exception:
        pass

    # Run the batch in a dedicated thread with a larger stack; experiments
    # still run one after another inside it.
    import threading

    try:
        threading.stack_size(WORKER_STACK_SIZE)
    except (ValueError, RuntimeError):
        pass

    errors = []

    def _worker():
        try:
            main()
        except BaseException as e:  # re-raised in the main thread below
            errors.append(e)

    t = threading.Thread(target=_worker, name="lab_runner")
    t.start()
    t.join()
    if errors:
        raise errors[0]
