# src/formula_app/charts.py
"""
Matplotlib figures for outcome tables.

Figures are built with matplotlib.figure.Figure directly (no pyplot state), so
callers can embed them in a canvas or save them with `fig.savefig(...)`.
"""

from typing import Iterable, Optional

from matplotlib.figure import Figure
from matplotlib.ticker import PercentFormatter

from formula_app.config import CHART_FIGSIZE
from formula_app.core.outcomes import DEFAULT_RULES, FormulaOutcome, OutcomeRules
from formula_app.core.stats import outcome_probabilities


def outcome_distribution_figure(
    levels: Optional[Iterable[int]] = None,
    rules: Optional[OutcomeRules] = None,
) -> Figure:
    """
    Grouped bar chart: one group per outcome, one bar per proficiency level.

    Args:
        levels: proficiency levels to plot. Defaults to the levels defined in `rules`.
        rules: outcome table. Defaults to DEFAULT_RULES.
    """
    rules = rules or DEFAULT_RULES
    levels = tuple(levels) if levels is not None else rules.levels()
    outcomes = tuple(FormulaOutcome)

    fig = Figure(figsize=CHART_FIGSIZE, layout="tight")
    ax = fig.add_subplot(111)

    width = 0.8 / max(len(levels), 1)
    for i, level in enumerate(levels):
        probs = outcome_probabilities(level, rules)
        xs = [k + i * width for k in range(len(outcomes))]
        ax.bar(xs, [probs[o] for o in outcomes], width=width, label=f"Level {level}")

    ax.set_xticks([k + width * (len(levels) - 1) / 2 for k in range(len(outcomes))])
    ax.set_xticklabels([o.value for o in outcomes])
    ax.set_ylabel("Probability")
    ax.set_title("Outcome distribution by proficiency level")
    ax.yaxis.set_major_formatter(PercentFormatter(xmax=1.0))
    if levels:
        ax.legend()
    return fig
