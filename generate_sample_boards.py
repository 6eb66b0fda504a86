#!/usr/bin/env python3
"""
Generate sample boards and write them as JSON.

Usage:
    python generate_sample_boards.py [seed] [--pieces 12 20 50 100]

If no seed is provided, defaults to "default_seed"
"""

import argparse
import json
from pathlib import Path

from py_clickboard.config import settings
from py_clickboard.core.board_generator import BoardConfig, generate_board
from py_clickboard.logging_config import configure_logging


def generate_samples(seed, piece_counts, relax_iters, board_size, output_dir):
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for n in piece_counts:
        print(f"\nGenerating board with {n} pieces...")
        board = generate_board(BoardConfig(seed, n, relax_iters, board_size))

        motifs = ", ".join(f"{m.kind}({m.point_count}) in {m.region}" for m in board.motifs)
        print(f"  Seed: {board.seed}")
        print("  Regions: " + ", ".join(f"{r.name}={r.quota}" for r in board.regions))
        print(f"  Motifs: {motifs or 'none'}")
        print(f"  Residual separation violations: {board.separation_violations}")

        path = output_dir / f"board_{board.seed}_{n}.json"
        path.write_text(json.dumps(board.to_dict(), indent=2))
        written.append(path)
        print(f"  Saved to {path}")
    return written


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Generate sample boards as JSON")
    parser.add_argument("seed", nargs="?", default="default_seed", help="Seed string")
    parser.add_argument("--pieces", type=int, nargs="+", default=settings.piece_count_options,
                        help="Piece counts to generate")
    parser.add_argument("--relax", type=int, default=settings.default_relax_iters,
                        help="Lloyd relaxation iterations")
    parser.add_argument("--size", type=float, default=settings.default_board_size,
                        help="Board side length")
    parser.add_argument("--output-dir", default="sample_boards", help="Output directory")

    args = parser.parse_args()

    configure_logging(settings.effective_log_level, "plain")
    generate_samples(args.seed, args.pieces, args.relax, args.size, args.output_dir)


if __name__ == "__main__":
    main()
