"""Generate a win-rate-by-seat bar chart from simulation results."""

from __future__ import annotations

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt


def win_rates(counts: dict[int, int]) -> dict[int, float]:
    total = sum(counts.values())
    if total == 0:
        return {}
    return {seat: wins / total for seat, wins in counts.items()}


def make_win_rate_chart(
    counts: dict[int, int],
    output_path: str = "win_rate_by_seat.png",
    title: str = "Snakes & Ladders: Win Rate by Seat",
) -> str:
    """Bar chart of the share of games won from each seat.

    Returns the path to the saved PNG.
    """
    rates = win_rates(counts)
    seats = sorted(rates)
    labels = [f"Seat {seat + 1}" for seat in seats]
    values = [rates[seat] * 100 for seat in seats]

    fig, ax = plt.subplots(figsize=(max(4, len(labels) * 1.2), 5))
    bars = ax.bar(labels, values, color="#4A90D9", edgecolor="white")

    # Annotate bars with percentages and raw counts
    for bar, seat, value in zip(bars, seats, values):
        ax.text(
            bar.get_x() + bar.get_width() / 2, bar.get_height() + 0.5,
            f"{value:.1f}%\n({counts[seat]})",
            ha="center", va="bottom", fontsize=10, fontweight="bold",
        )

    ax.set_ylabel("Games won (%)")
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_ylim(0, max(values, default=0) + 15)

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
