"""Command-line k-medoids solver."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from medoidtemper.display import show
from medoidtemper.engine import CardinalityEngine
from medoidtemper.model import CardinalityModel
from medoidtemper.params import MissingParameterError, read_params


def _fmt(value: float) -> str:
    return format(float(value), ".15g")


def _error(message: str) -> int:
    print(f"ERROR: {message}", file=sys.stderr)
    print("EXITING . . .")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Solve the k-medoids problem described by a parameter file."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 1:
        print(f"Incorrect number of cmd line args, expected 1 only received {len(args)}")
        return 0

    try:
        params = read_params(args[0])

        print("Building Model...\n")
        model = CardinalityModel.from_params(params)

        print("Building Engine...\n")
        engine = CardinalityEngine.from_params(model, params)
    except MissingParameterError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print("TERMINATING...")
        return 0
    except (OSError, ValueError) as exc:
        return _error(str(exc))

    print("Running Solver...\n")
    engine.solve()
    print(".....Solver Done...\n")

    print("Solver Results:")
    print(">" * 40)
    show("cost_min", _fmt(engine.cost_min()))
    show("solve_time_in_seconds", _fmt(engine.run_time))
    show("rounds_executed", engine.current_round)
    print()

    best_state = engine.cost_min_state()
    print("K Medoid Indices:")
    print("".join(f"{value} " for value in best_state) + "\n")

    assignments = model.generate_assignments(best_state)
    print("Cluster Assignments (from 0 to K-1):")
    print("".join(f"{value} " for value in assignments) + "\n")

    try:
        k_values = model.k_values(assignments)
    except (OSError, ValueError) as exc:
        return _error(str(exc))

    show("k_inter", _fmt(k_values.k_inter))
    show("k", _fmt(k_values.k))
    show("k_intra", _fmt(k_values.k_intra))
    print("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())