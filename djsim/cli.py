import argparse
import sys

from .backend import LocalSimulator
from .classifier import run_deutsch_jozsa_algorithm
from .errors import QuantumSimError
from .logging_utils import configure_logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="djsim",
        description="Run the Deutsch-Jozsa algorithm on f(x) = x1 over two qubits",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("simulate", help="Classify the oracle and print the verdict (default)")
    sub.add_parser("trace", help="Print the operations performed by one run")
    args = parser.parse_args(argv)
    configure_logging()

    try:
        if args.command == "trace":
            for line in LocalSimulator().trace("RunDeutschJozsaAlgorithm"):
                print(line)
        else:
            run_deutsch_jozsa_algorithm()
    except QuantumSimError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
