#!/usr/bin/env python3
"""Render a generated board to PNG for inspection."""

import argparse

import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Polygon

from py_clickboard.core.board_generator import BoardConfig, generate_board

REGION_COLORS = {"left": "#cfe3f7", "mid": "#f7e6c4", "right": "#d8f0d2"}


def visualize_board(seed="", piece_count=20, relax_iters=1, board_size=1000.0,
                    output=None, show_sites=True):
    """Generate a board and save a picture of its cells, motifs and labels."""
    board = generate_board(BoardConfig(seed, piece_count, relax_iters, board_size))
    print(f"Generated board: seed={board.seed} cells={len(board.cells)}")

    fig, ax = plt.subplots(figsize=(8, 8))
    for cell in board.cells:
        ax.add_patch(Polygon(cell.polygon, closed=True, facecolor=REGION_COLORS[cell.region],
                             edgecolor="#333333", linewidth=0.8))
        ax.text(cell.centroid[0], cell.centroid[1], str(cell.label),
                ha="center", va="center", fontsize=max(5, 60 / piece_count ** 0.5))
        if show_sites:
            ax.plot(*cell.site, marker="o" if cell.anchored else ".",
                    color="#b03a2e" if cell.anchored else "#555555", markersize=3)

    for motif in board.motifs:
        ax.add_patch(Circle(motif.center, motif.zone_radius, fill=False,
                            linestyle="--", edgecolor="#b03a2e", linewidth=0.8))

    ax.set_xlim(0, board.board_size)
    ax.set_ylim(board.board_size, 0)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(f"seed={board.seed}  N={board.piece_count}  "
                 f"motifs={', '.join(m.kind for m in board.motifs) or 'none'}")

    filename = output or f"board_{board.seed}_{piece_count}.png"
    plt.tight_layout()
    plt.savefig(filename, dpi=200, bbox_inches="tight")
    plt.close(fig)
    print(f"Board visualization saved as: {filename}")
    return filename


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Visualize a generated board")
    parser.add_argument("--seed", default="", help="Seed string (time-based if empty)")
    parser.add_argument("--pieces", type=int, default=20, help="Number of pieces")
    parser.add_argument("--relax", type=int, default=1, help="Lloyd relaxation iterations")
    parser.add_argument("--size", type=float, default=1000.0, help="Board side length")
    parser.add_argument("--output", help="Output PNG path")
    parser.add_argument("--hide-sites", action="store_true", help="Do not draw sites")

    args = parser.parse_args()

    visualize_board(args.seed, args.pieces, args.relax, args.size, args.output,
                    show_sites=not args.hide_sites)


if __name__ == "__main__":
    main()
