# src/formula_app/__main__.py
"""
Demo driver.

Run with:
    python -m formula_app [--seed N] [--level N] [--chart out.png]
"""
import argparse
import logging
import random
import sys
from typing import Mapping, Optional, Sequence

from .config import APP_NAME, APP_VERSION, LOG_FORMAT, MAX_PROFICIENCY_LEVEL
from .core.formula import Formula
from .core.plan import Plan
from .core.stats import outcome_probabilities


def _print_resources(title: str, resources: Mapping[str, int]) -> None:
    print(f"{title}:")
    for name, qty in resources.items():
        print(f"  {name}: {qty}")


def _print_results(plan: Plan) -> None:
    for formula, result in zip(plan, plan.apply_all()):
        label = " + ".join(formula.inputs) or "-"
        print(f"[{label}]")
        for name, qty in result.items():
            print(f"  {name}: {qty}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="formula_app", description=f"{APP_NAME} demo")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible rolls")
    parser.add_argument("--level", type=int, default=0, choices=range(0, MAX_PROFICIENCY_LEVEL + 2),
                        help="proficiency increases applied to every formula")
    parser.add_argument("--chart", default=None, help="save the outcome chart to this file")
    parser.add_argument("--verbose", action="store_true", help="log every roll")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    seeder = random.Random(args.seed)

    def make(inputs, outputs) -> Formula:
        formula = Formula(inputs, outputs, rng=random.Random(seeder.getrandbits(32)))
        for _ in range(args.level):
            formula.increase_proficiency_level()
        return formula

    iron = make({"iron ore": 2}, {"iron bar": 1})
    water = make({"water": 1000}, {"hydrogen": 999, "deuterium": 1})

    print("Formula 1 initial values:")
    _print_resources("Inputs", iron.inputs)
    _print_resources("Outputs", iron.outputs)
    print("\nFormula 2 initial values:")
    _print_resources("Inputs", water.inputs)
    _print_resources("Outputs", water.outputs)

    plan = Plan([iron])
    plan.add_formula(water)
    print("\nApplying all formulas in the plan:")
    _print_results(plan)

    copied = plan.copy()
    print("\nCopied plan (same random state as the original):")
    _print_results(copied)

    print("\nRemoving the last formula from the copied plan:")
    copied.remove_last_formula()
    _print_results(copied)

    print("\nReplacing the first formula in the copied plan:")
    copied.replace_formula(0, make({"copper ore": 3}, {"copper bar": 1}))
    _print_results(copied)

    print(f"\nOutcome probabilities at level {iron.proficiency_level}:")
    for outcome, p in outcome_probabilities(iron.proficiency_level).items():
        print(f"  {outcome.value:<8} {p:6.1%}")

    if args.chart:
        from .charts import outcome_distribution_figure
        outcome_distribution_figure().savefig(args.chart)
        print(f"\nChart saved to {args.chart}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
