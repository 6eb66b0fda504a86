"""
Core board generation functionality.
"""

from .prng import SeededRandom, make_rng
from .regions import Region, partition_square
from .allocation import allocate_quotas
from .motifs import MotifKind, MotifSpec, ExclusionZone, plan_motifs, build_motif
from .cells import Cell
from .board_generator import BoardConfig, Board, generate_board

__all__ = ['SeededRandom', 'make_rng', 'Region', 'partition_square', 'allocate_quotas',
           'MotifKind', 'MotifSpec', 'ExclusionZone', 'plan_motifs', 'build_motif',
           'Cell', 'BoardConfig', 'Board', 'generate_board']
