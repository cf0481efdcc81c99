import argparse
import sys
from typing import List, Optional

from mosaic_solver.config import PROPAGATORS, load_config, merge_config
from mosaic_solver.lib.s0_grid import InvalidGridError, format_grid, parse_clue_text
from mosaic_solver.lib.s4_solver import Solver, StepSession, TerminationReason

EXIT_SOLVED = 0
EXIT_NO_SOLUTION = 1
EXIT_GOVERNOR_TRIP = 2
EXIT_INVALID = 3

EXIT_CODES = {
    TerminationReason.SOLVED: EXIT_SOLVED,
    TerminationReason.NO_SOLUTION: EXIT_NO_SOLUTION,
    TerminationReason.GOVERNOR_TRIP: EXIT_GOVERNOR_TRIP,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solveur Mosaic : déduction + backtracking borné")

    parser.add_argument("puzzle", help="Fichier texte de la grille d'indices ('.' = pas d'indice)")
    parser.add_argument(
        "--step",
        action="store_true",
        help="Mode pas à pas : une passe de déduction par étape (pas de recherche)",
    )
    parser.add_argument("--config", help="Fichier YAML de configuration")
    parser.add_argument("--time-budget-ms", type=float, help="Budget temps (ms)")
    parser.add_argument("--max-depth", type=int, help="Profondeur de recherche maximale")
    parser.add_argument("--max-operations", type=int, help="Nombre maximal d'opérations")
    parser.add_argument(
        "--propagator",
        choices=PROPAGATORS,
        help="Propagation pendant la recherche (arc-consistance ou règles de comptage)",
    )
    parser.add_argument("--debug", action="store_true", help="Trace détaillée (niveau DEBUG)")
    parser.add_argument("--log-dir", help="Dossier des journaux JSONL")
    return parser


def _build_config(args: argparse.Namespace) -> dict:
    config = load_config(args.config) if args.config else merge_config()
    overrides = {
        "time_budget_ms": args.time_budget_ms,
        "max_depth": args.max_depth,
        "max_operations": args.max_operations,
        "propagator": args.propagator,
        "log_dir": args.log_dir,
    }
    config.update({key: value for key, value in overrides.items() if value is not None})
    if args.debug:
        config["debug"] = True
    return merge_config(config)


def _run_steps(session: StepSession) -> int:
    while True:
        delta = session.advance()
        print(f"[ÉTAPE {delta.iteration}] {delta.message}")
        if delta.cells_newly_filled:
            print(f"  remplies : {delta.cells_newly_filled}")
        if delta.cells_newly_emptied:
            print(f"  vides    : {delta.cells_newly_emptied}")
        if delta.complete:
            break

    print(format_grid(session.grid))
    return EXIT_NO_SOLUTION if session.inconsistent else EXIT_SOLVED


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _build_config(args)
        with open(args.puzzle, "r", encoding="utf-8") as f:
            clue_grid = parse_clue_text(f.read())

        if args.step:
            return _run_steps(StepSession(clue_grid, config))

        result = Solver(config).solve(clue_grid)
    except InvalidGridError as e:
        print(f"[ERREUR] Grille invalide : {e}")
        return EXIT_INVALID
    except ValueError as e:
        print(f"[ERREUR] Configuration invalide : {e}")
        return EXIT_INVALID
    except OSError as e:
        print(f"[ERREUR] Lecture impossible : {e}")
        return EXIT_INVALID

    print(format_grid(result.grid))
    suffix = f" ({result.trip_kind.value})" if result.trip_kind else ""
    print(f"[FIN] {result.reason.value}{suffix}")
    return EXIT_CODES[result.reason]


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nArrêt demandé par l'utilisateur.")
        sys.exit(130)


if __name__ == "__main__":
    run()
