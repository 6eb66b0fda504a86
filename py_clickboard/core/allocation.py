"""Distribution of the piece count across regions by area."""

import math
from typing import List, Sequence

import structlog

logger = structlog.get_logger()


def _ranked_by_area(areas: Sequence[float]) -> List[int]:
    return sorted(range(len(areas)), key=lambda i: (-areas[i], i))


def allocate_quotas(n: int, areas: Sequence[float]) -> List[int]:
    """
    Allocate n pieces across regions proportionally to area.

    Every region gets at least one piece when n >= number of regions.
    The remainder is split with floor plus largest fractional remainder;
    remainders that tie go to the earlier region.

    Args:
        n: Total piece count
        areas: Region areas

    Returns:
        Quota per region, summing to n
    """
    if n <= 0:
        raise ValueError(f"piece count must be positive, got {n}")

    count = len(areas)
    if n < count:
        # Too few pieces for every region: fill the largest regions first
        quotas = [0] * count
        for i in _ranked_by_area(areas)[:n]:
            quotas[i] = 1
        return quotas

    quotas = [1] * count
    remainder = n - count
    total_area = float(sum(areas))
    if remainder == 0 or total_area <= 0.0:
        quotas[_ranked_by_area(areas)[0]] += remainder
        return quotas

    raw = [remainder * a / total_area for a in areas]
    floors = [math.floor(r) for r in raw]
    for i in range(count):
        quotas[i] += floors[i]

    leftover = remainder - sum(floors)
    by_fraction = sorted(range(count), key=lambda i: (-(raw[i] - floors[i]), i))
    for i in by_fraction[:max(leftover, 0)]:
        quotas[i] += 1

    # Trim any over-allocation from the currently largest region
    while sum(quotas) > n:
        i = max(range(count), key=lambda k: (quotas[k], -k))
        if quotas[i] <= 1:
            break
        quotas[i] -= 1

    logger.debug("Quotas allocated", n=n, quotas=quotas)
    return quotas
