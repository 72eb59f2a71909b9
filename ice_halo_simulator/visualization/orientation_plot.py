"""Plotly diagnostics for sampled crystal orientations.

These figures show where the sampled crystal main axes point and how the
roll angles are spread, which makes a misconfigured distribution easy to
spot before running a long simulation.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go


def axis_directions(angles: np.ndarray) -> np.ndarray:
    """Unit main-axis direction for each orientation.

    Args:
        angles: Array of shape (n, 3) with columns lon, lat, roll.

    Returns:
        Array of shape (n, 3).
    """
    angles = np.asarray(angles, dtype=np.float64)
    lon = angles[:, 0]
    lat = angles[:, 1]
    return np.column_stack(
        [np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat)]
    )


def create_axis_markers(
    angles: np.ndarray,
    color: str = "steelblue",
    size: int = 2,
    max_points: int = 5000,
) -> go.Scatter3d:
    """Create markers for crystal main axes on the unit sphere.

    Args:
        angles: Orientations, shape (n, 3).
        color: Marker color.
        size: Marker size.
        max_points: Only the first ``max_points`` orientations are drawn.

    Returns:
        Plotly Scatter3d trace.
    """
    points = axis_directions(angles[:max_points])
    return go.Scatter3d(
        x=points[:, 0],
        y=points[:, 1],
        z=points[:, 2],
        mode="markers",
        marker=dict(size=size, color=color, opacity=0.6),
        name=f"Crystal axes ({len(points)})",
        showlegend=True,
    )


def create_incident_ray(
    incident_dir: np.ndarray,
    length: float = 1.5,
    color: str = "gold",
) -> go.Scatter3d:
    """Create a line from the sun toward the origin along the incident direction."""
    start = -length * np.asarray(incident_dir, dtype=np.float64)
    return go.Scatter3d(
        x=[start[0], 0.0],
        y=[start[1], 0.0],
        z=[start[2], 0.0],
        mode="lines+markers",
        line=dict(color=color, width=6),
        marker=dict(size=[10, 0], color=color),
        name="Sunlight",
        showlegend=True,
    )


def create_coordinate_axes(length: float = 1.2) -> list[go.Scatter3d]:
    """Create global coordinate axis indicators (X=red, Y=green, Z=blue)."""
    traces = []
    for label, color, end in (
        ("X", "red", (length, 0, 0)),
        ("Y", "green", (0, length, 0)),
        ("Z", "blue", (0, 0, length)),
    ):
        traces.append(
            go.Scatter3d(
                x=[0, end[0]],
                y=[0, end[1]],
                z=[0, end[2]],
                mode="lines+text",
                line=dict(color=color, width=4),
                text=["", label],
                textposition="top center",
                name=label,
                showlegend=False,
            )
        )
    return traces


def create_roll_histogram(angles: np.ndarray, nbins: int = 72) -> go.Histogram:
    """Histogram of roll angles in degrees."""
    roll_deg = np.degrees(np.asarray(angles, dtype=np.float64)[:, 2])
    return go.Histogram(x=roll_deg, nbinsx=nbins, name="Roll (deg)")


def build_orientation_scene(
    angles: np.ndarray,
    incident_dir: Optional[np.ndarray] = None,
    show_axes: bool = True,
    title: str = "Crystal Orientations",
) -> go.Figure:
    """Build a 3D figure of sampled crystal axes.

    Args:
        angles: Orientations, shape (n, 3).
        incident_dir: Optional sunlight direction to draw.
        show_axes: Whether to show coordinate axes.
        title: Plot title.

    Returns:
        Plotly Figure object.
    """
    fig = go.Figure()

    if show_axes:
        for trace in create_coordinate_axes():
            fig.add_trace(trace)

    fig.add_trace(create_axis_markers(angles))

    if incident_dir is not None:
        fig.add_trace(create_incident_ray(incident_dir))

    fig.update_layout(
        title=dict(text=title, x=0.5),
        scene=dict(
            xaxis_title="X",
            yaxis_title="Y",
            zaxis_title="Z",
            aspectmode="cube",
        ),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def build_roll_figure(angles: np.ndarray, title: str = "Roll Distribution") -> go.Figure:
    """Build a histogram figure of roll angles."""
    fig = go.Figure(create_roll_histogram(angles))
    fig.update_layout(
        title=dict(text=title, x=0.5),
        xaxis_title="Roll (deg)",
        yaxis_title="Count",
        bargap=0.05,
    )
    return fig
