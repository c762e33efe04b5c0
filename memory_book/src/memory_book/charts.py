"""
Chart creation for the memory book scoreboard.
"""
from typing import Any, Dict

import plotly.graph_objects as go

OUTCOME_COLORS = {
    "Correct": "#2E8B57",
    "Not quite": "#DC143C",
    "Remaining": "#B0C4DE"
}


def create_guess_outcome_chart(summary: Dict[str, Any]) -> go.Figure:
    """Create a donut chart of correct, incorrect and remaining memories.

    Args:
        summary: Output of ``summarize_guesses``

    Returns:
        Plotly figure
    """
    if not summary.get("total_memories"):
        fig = go.Figure()
        fig.add_annotation(
            text="No memories yet",
            xref="paper", yref="paper",
            x=0.5, y=0.5, showarrow=False
        )
        return fig

    values = {
        "Correct": summary["correct"],
        "Not quite": summary["incorrect"],
        "Remaining": summary["remaining"],
    }

    fig = go.Figure(data=[
        go.Pie(
            labels=list(values.keys()),
            values=list(values.values()),
            hole=0.5,
            marker_colors=[OUTCOME_COLORS[label] for label in values],
            textinfo="value",
            sort=False
        )
    ])

    fig.update_layout(
        height=260,
        margin=dict(l=10, r=10, t=10, b=10),
        showlegend=True
    )

    return fig
