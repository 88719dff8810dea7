from __future__ import annotations
from typing import Dict, List, Optional
import matplotlib.pyplot as plt

from .range_map import Interval

def plot_stage_intervals(
    stage_intervals: Dict[str, List[Interval]],
    title: str = "",
    show: bool = True,
    save_path: Optional[str] = None,
):
    """One row per domain with the covered intervals drawn as bars.
    Note: colors are left to Matplotlib defaults.
    """
    names = list(stage_intervals)
    fig, ax = plt.subplots(figsize=(12, 0.6 * max(1, len(names)) + 1.5))
    for row, name in enumerate(names):
        spans = [(s, e - s) for (s, e) in stage_intervals[name]]
        if spans:
            ax.broken_barh(spans, (row - 0.35, 0.7), alpha=0.6)
    ax.set_yticks(range(len(names)))
    ax.set_yticklabels(names)
    ax.invert_yaxis()
    ax.set_title(title)
    ax.set_xlabel("Value")
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
