"""
Reporting helpers for placement experiments.

- consolidate_bins / fullness_histogram: bin-size histogram (matplotlib PNG)
- earth_movers_distance: how far a load distribution is from uniform
- format_table / print_table: experiment comparison table
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, List, Sequence, Tuple, Union

import numpy as np

from .placement.metadata import Metadata

logger = logging.getLogger(__name__)

TABLE_COLUMNS = [
    "Experiment Name",
    "# Bins",
    "Items Removed",
    "Total Items",
    "Avg Load",
    "Keywords w/Overlap",
    "EMD",
]


@dataclass(frozen=True)
class ExperimentRow:
    """One line of the comparison table"""
    name: str
    metadata: Metadata
    emd: float

    def cells(self) -> List[str]:
        return [
            self.name,
            str(self.metadata.num_bins),
            str(self.metadata.removed_items),
            str(self.metadata.total_items),
            str(self.metadata.average_load_per_bin),
            str(self.metadata.keywords_with_overlap),
            f"{self.emd:.4f}",
        ]


def consolidate_bins(sizes: Sequence[int], granularity: int = 30, sort: bool = False) -> List[Tuple[int, int]]:
    """
    Group bin sizes into at most `granularity` consecutive buckets.

    Args:
        sizes: Size of each bin
        granularity: Maximum number of buckets
        sort: Put the largest bins first before grouping

    Returns:
        (bucket index, summed size) pairs

    Example:
        >>> consolidate_bins([1, 2, 3, 4, 5], granularity=2)
        [(0, 6), (1, 9)]
    """
    if not sizes:
        return []
    if granularity <= 0:
        raise ValueError(f"granularity must be positive, got {granularity}")

    values = sorted(sizes, reverse=True) if sort else list(sizes)
    per_group = math.ceil(len(values) / granularity)
    return [
        (group, sum(values[start:start + per_group]))
        for group, start in enumerate(range(0, len(values), per_group))
    ]


def earth_movers_distance(sizes: Sequence[int]) -> float:
    """
    1-D earth mover's distance between the load distribution and uniform load.

    Bins are ordered largest first, so the value measures skew independent
    of which bins received the load. 0.0 means perfectly balanced.

    Examples:
        >>> earth_movers_distance([5, 5, 5, 5])
        0.0
        >>> earth_movers_distance([4, 0])
        0.5
    """
    values = np.sort(np.asarray(sizes, dtype=float))[::-1]
    total = values.sum()
    if values.size == 0 or total == 0:
        return 0.0

    observed = values / total
    uniform = np.full(values.size, 1.0 / values.size)
    return float(np.abs(np.cumsum(observed - uniform)).sum())


def fullness_histogram(
    bins: Sequence[AbstractSet[int]],
    title: str,
    sorted_bins: bool = True,
    granularity: int = 30,
    output_dir: Union[str, Path] = "."
) -> Path:
    """
    Plot the number of items per (consolidated) bin and save a PNG.

    Returns:
        Path of the written `<title>_histogram.png`
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    groups = consolidate_bins([len(contents) for contents in bins], granularity, sort=sorted_bins)
    output = Path(output_dir) / f"{title}_histogram.png"
    output.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(8, 6))
    try:
        ax.bar([index for index, _ in groups], [count for _, count in groups], width=1.0, align="edge", color="red")
        ax.set_title(title)
        ax.set_xlabel("Bin Number")
        ax.set_ylabel("Count")
        max_count = max((count for _, count in groups), default=0)
        ax.set_ylim(0, max(max_count * 1.1, 1))
        fig.savefig(output)
    finally:
        plt.close(fig)

    logger.info(f"Histogram written to {output}")
    return output


def format_table(rows: Sequence[ExperimentRow]) -> str:
    """Render rows as a fixed-width text table."""
    body = [row.cells() for row in rows]
    widths = [
        max([len(header)] + [len(cells[column]) for cells in body])
        for column, header in enumerate(TABLE_COLUMNS)
    ]

    def line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)) + " |"

    separator = "+-" + "-+-".join("-" * width for width in widths) + "-+"
    lines = [separator, line(TABLE_COLUMNS), separator]
    lines.extend(line(cells) for cells in body)
    lines.append(separator)
    return "\n".join(lines)


def print_table(rows: Sequence[ExperimentRow]):
    print(format_table(rows))
