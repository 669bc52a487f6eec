"""Budget flow Sankey presentation logic for the Streamlit UI.

This module contains pure, testable transformations from an event's
categories to a Sankey model and Plotly figure. No IO happens here.

The Sankey layout is fixed to three columns:
    Budget -> Categories -> Paid / Unpaid / Unallocated
with an ``Over budget`` source node feeding categories whose scheduled
amount exceeds their budget.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal
from typing import TYPE_CHECKING

from src.domain.models import Category

if TYPE_CHECKING:  # pragma: no cover
    import plotly.graph_objects as go


LEFT_PREFIX = "L:"
MIDDLE_PREFIX = "M:"
RIGHT_PREFIX = "R:"

BUDGET_LABEL = "Budget"
OVER_BUDGET_LABEL = "Over budget"
PAID_LABEL = "Paid"
UNPAID_LABEL = "Unpaid"
UNALLOCATED_LABEL = "Unallocated"

BUDGET_KEY = f"{LEFT_PREFIX}BUDGET"
OVER_BUDGET_KEY = f"{LEFT_PREFIX}OVER_BUDGET"
PAID_KEY = f"{RIGHT_PREFIX}PAID"
UNPAID_KEY = f"{RIGHT_PREFIX}UNPAID"
UNALLOCATED_KEY = f"{RIGHT_PREFIX}UNALLOCATED"


@dataclass(frozen=True)
class SankeyLink:
    """Sankey link edge."""

    source: int
    target: int
    value: Decimal


@dataclass(frozen=True)
class SankeyModel:
    """Model used by the UI to render a Sankey with stable indices."""

    node_labels: list[str]
    node_keys: list[str]
    links: list[SankeyLink]
    side_by_key: dict[str, Literal["L", "M", "R"]]


class _ModelBuilder:
    def __init__(self) -> None:
        self.node_labels: list[str] = []
        self.node_keys: list[str] = []
        self.side_by_key: dict[str, Literal["L", "M", "R"]] = {}
        self.links: list[SankeyLink] = []

    def node(self, key: str, label: str, side: Literal["L", "M", "R"]) -> int:
        if key in self.side_by_key:
            return self.node_keys.index(key)
        self.node_keys.append(key)
        self.node_labels.append(label)
        self.side_by_key[key] = side
        return len(self.node_keys) - 1

    def link(self, source: int, target: int, value: Decimal) -> None:
        if value > 0:
            self.links.append(SankeyLink(source=source, target=target, value=value))


def build_budget_flow_model(categories: Sequence[Category]) -> SankeyModel:
    """Build a Sankey model of how an event budget is used.

    Args:
        categories: Categories of the event.

    Returns:
        SankeyModel: Nodes and links; zero-valued flows are left out.
    """
    builder = _ModelBuilder()
    budget_index = builder.node(BUDGET_KEY, BUDGET_LABEL, "L")
    for category in categories:
        middle_index = builder.node(
            f"{MIDDLE_PREFIX}{category.id}", category.name, "M"
        )
        budgeted = category.budgeted_amount
        scheduled = category.scheduled_amount
        spent = category.spent_amount

        builder.link(budget_index, middle_index, budgeted)
        if scheduled > budgeted:
            over_index = builder.node(OVER_BUDGET_KEY, OVER_BUDGET_LABEL, "L")
            builder.link(over_index, middle_index, scheduled - budgeted)
        if spent > 0:
            paid_index = builder.node(PAID_KEY, PAID_LABEL, "R")
            builder.link(middle_index, paid_index, spent)
        if scheduled > spent:
            unpaid_index = builder.node(UNPAID_KEY, UNPAID_LABEL, "R")
            builder.link(middle_index, unpaid_index, scheduled - spent)
        if budgeted > scheduled:
            unallocated_index = builder.node(
                UNALLOCATED_KEY, UNALLOCATED_LABEL, "R"
            )
            builder.link(middle_index, unallocated_index, budgeted - scheduled)

    return SankeyModel(
        node_labels=builder.node_labels,
        node_keys=builder.node_keys,
        links=builder.links,
        side_by_key=builder.side_by_key,
    )


def _column_positions(model: SankeyModel) -> tuple[list[float], list[float]]:
    x_by_side = {"L": 0.02, "M": 0.5, "R": 0.98}
    counts = {"L": 0, "M": 0, "R": 0}
    for key in model.node_keys:
        counts[model.side_by_key.get(key, "M")] += 1

    seen = {"L": 0, "M": 0, "R": 0}
    node_x: list[float] = []
    node_y: list[float] = []
    for key in model.node_keys:
        side = model.side_by_key.get(key, "M")
        seen[side] += 1
        node_x.append(x_by_side[side])
        node_y.append(seen[side] / (counts[side] + 1))
    return node_x, node_y


def build_plotly_figure(model: SankeyModel) -> "go.Figure":
    """Build a Plotly Sankey figure from a Sankey model.

    Args:
        model: Precomputed Sankey model.

    Returns:
        Plotly figure ready to be displayed in Streamlit.
    """
    node_x, node_y = _column_positions(model)
    sources = [link.source for link in model.links]
    targets = [link.target for link in model.links]
    values = [float(link.value) for link in model.links]

    import plotly.graph_objects as go

    fig = go.Figure(
        data=[
            go.Sankey(
                arrangement="snap",
                node=dict(
                    pad=10,
                    thickness=12,
                    label=model.node_labels,
                    x=node_x,
                    y=node_y,
                    line=dict(color="rgba(0,0,0,0.25)", width=0.5),
                ),
                link=dict(
                    source=sources,
                    target=targets,
                    value=values,
                ),
                textfont=dict(size=12),
            )
        ]
    )
    fig.update_layout(
        margin=dict(l=8, r=8, t=8, b=8),
        height=480,
    )
    return fig


__all__ = [
    "BUDGET_LABEL",
    "OVER_BUDGET_LABEL",
    "PAID_LABEL",
    "UNPAID_LABEL",
    "UNALLOCATED_LABEL",
    "SankeyLink",
    "SankeyModel",
    "build_budget_flow_model",
    "build_plotly_figure",
]
