"""
Planar geometry kernel for board generation.

Polygons are ``(k, 2)`` float arrays of ordered vertices. Regions are
intersections of half-planes ``a*x + b*y <= c`` with unit normals, so
``c - a*x - b*y`` is the signed distance of a point to the boundary line.

All operations are pure and bounded; nothing here retries or rejects.
"""

from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .prng import SeededRandom

CLAMP_ITERATIONS = 32
INSIDE_EPSILON = 1e-9
DEGENERATE_AREA = 1e-9


class HalfPlane(NamedTuple):
    """Half-plane ``a*x + b*y <= c``."""
    a: float
    b: float
    c: float

    def value(self, point) -> float:
        """Signed excess ``a*x + b*y - c`` (negative inside)."""
        return self.a * point[0] + self.b * point[1] - self.c

    def flipped(self) -> "HalfPlane":
        """Complementary half-plane ``a*x + b*y >= c``."""
        return HalfPlane(-self.a, -self.b, -self.c)


class TriangleFan(NamedTuple):
    """Triangulated fan of a convex polygon, used for uniform sampling."""
    triangles: np.ndarray       # (m, 3, 2)
    cumulative_areas: np.ndarray  # (m,)

    @property
    def total_area(self) -> float:
        if len(self.cumulative_areas) == 0:
            return 0.0
        return float(self.cumulative_areas[-1])


def as_polygon(points) -> np.ndarray:
    return np.asarray(points, dtype=np.float64).reshape(-1, 2)


def signed_area(polygon) -> float:
    """Shoelace signed area (positive for counter-clockwise)."""
    poly = as_polygon(polygon)
    if len(poly) < 3:
        return 0.0
    x = poly[:, 0]
    y = poly[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def polygon_area(polygon) -> float:
    """Unsigned polygon area."""
    return abs(signed_area(polygon))


def polygon_centroid(polygon) -> np.ndarray:
    """
    Area-weighted centroid of a polygon.

    Near-zero-area polygons fall back to their middle vertex.

    Args:
        polygon: Ordered vertices

    Returns:
        [x, y] centroid coordinates
    """
    poly = as_polygon(polygon)
    if len(poly) == 0:
        return np.zeros(2)

    area = 0.0
    cx = 0.0
    cy = 0.0
    n = len(poly)
    for i in range(n):
        j = (i + 1) % n
        f = poly[i][0] * poly[j][1] - poly[j][0] * poly[i][1]
        area += f
        cx += (poly[i][0] + poly[j][0]) * f
        cy += (poly[i][1] + poly[j][1]) * f

    area *= 0.5
    if abs(area) < DEGENERATE_AREA:
        return poly[n // 2].copy()

    return np.array([cx / (6.0 * area), cy / (6.0 * area)])


def is_inside(point, half_plane: HalfPlane, epsilon: float = INSIDE_EPSILON) -> bool:
    """Whether a point satisfies a half-plane, with tolerance."""
    return half_plane.value(point) <= epsilon


def is_inside_all(point, half_planes: Sequence[HalfPlane],
                  epsilon: float = INSIDE_EPSILON) -> bool:
    return all(is_inside(point, hp, epsilon) for hp in half_planes)


def intersect_segment(p, q, half_plane: HalfPlane) -> np.ndarray:
    """
    Point where segment p->q crosses the boundary line of a half-plane.

    A segment parallel to the line returns ``p``.
    """
    p = np.asarray(p, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    fp = half_plane.value(p)
    fq = half_plane.value(q)
    denom = fp - fq
    if denom == 0.0:
        return p.copy()
    t = fp / denom
    return p + t * (q - p)


def _drop_repeated(vertices: List[np.ndarray]) -> List[np.ndarray]:
    result = []
    for v in vertices:
        if result and np.allclose(v, result[-1], rtol=0.0, atol=1e-12):
            continue
        result.append(v)
    while len(result) > 1 and np.allclose(result[0], result[-1], rtol=0.0, atol=1e-12):
        result.pop()
    return result


def clip_polygon(polygon, half_planes: Sequence[HalfPlane],
                 epsilon: float = INSIDE_EPSILON) -> Optional[np.ndarray]:
    """
    Clip a polygon by a set of half-planes (Sutherland-Hodgman).

    Args:
        polygon: Ordered vertices
        half_planes: Constraints applied in order
        epsilon: Inside tolerance

    Returns:
        Clipped polygon, or None if fewer than 3 vertices survive any step
    """
    vertices = [v for v in as_polygon(polygon)]
    if len(vertices) < 3:
        return None

    for hp in half_planes:
        output = []
        prev = vertices[-1]
        prev_in = is_inside(prev, hp, epsilon)
        for cur in vertices:
            cur_in = is_inside(cur, hp, epsilon)
            if cur_in:
                if not prev_in:
                    output.append(intersect_segment(prev, cur, hp))
                output.append(cur)
            elif prev_in:
                output.append(intersect_segment(prev, cur, hp))
            prev, prev_in = cur, cur_in

        vertices = _drop_repeated(output)
        if len(vertices) < 3:
            return None

    return np.array(vertices)


def strip_closing_vertex(polygon) -> np.ndarray:
    """Remove a duplicated closing vertex, if present."""
    poly = as_polygon(polygon)
    if len(poly) > 1 and poly[0][0] == poly[-1][0] and poly[0][1] == poly[-1][1]:
        return poly[:-1]
    return poly


def build_fan(polygon) -> TriangleFan:
    """Triangulate a convex polygon as a fan rooted at its first vertex."""
    poly = as_polygon(polygon)
    triangles = []
    areas = []
    for i in range(1, len(poly) - 1):
        tri = np.array([poly[0], poly[i], poly[i + 1]])
        triangles.append(tri)
        areas.append(polygon_area(tri))
    if not triangles:
        return TriangleFan(np.zeros((0, 3, 2)), np.zeros(0))
    return TriangleFan(np.array(triangles), np.cumsum(areas))


def sample_uniform_in_convex_polygon(polygon, rng: SeededRandom,
                                     fan: Optional[TriangleFan] = None) -> np.ndarray:
    """
    Uniform random point in a convex polygon.

    Picks a fan triangle weighted by area, then a point in it by folded
    barycentric coordinates. Always consumes exactly three draws.
    """
    if fan is None:
        fan = build_fan(polygon)
    r = rng.random()
    u = rng.random()
    v = rng.random()

    total = fan.total_area
    if total <= 0.0:
        return polygon_centroid(polygon)

    index = int(np.searchsorted(fan.cumulative_areas, r * total, side="right"))
    index = min(index, len(fan.triangles) - 1)
    a, b, c = fan.triangles[index]

    if u + v > 1.0:
        u = 1.0 - u
        v = 1.0 - v
    return a + u * (b - a) + v * (c - a)


def clamp_to_region(point, anchor, half_planes: Sequence[HalfPlane],
                    iterations: int = CLAMP_ITERATIONS) -> np.ndarray:
    """
    Force a point inside a convex region.

    Bisects the segment from a known-interior anchor to the point for a
    fixed number of iterations and returns the last interior midpoint.
    Interior points are returned unchanged.
    """
    point = np.asarray(point, dtype=np.float64)
    if is_inside_all(point, half_planes):
        return point.copy()

    lo = np.asarray(anchor, dtype=np.float64).copy()
    hi = point.copy()
    for _ in range(iterations):
        mid = 0.5 * (lo + hi)
        if is_inside_all(mid, half_planes):
            lo = mid
        else:
            hi = mid
    return lo


def boundary_clearance(point, half_planes: Sequence[HalfPlane]) -> float:
    """Distance from a point to the nearest boundary line (negative outside)."""
    return min(-hp.value(point) for hp in half_planes)


def fallback_triangle(center, size: float, anchor,
                      half_planes: Sequence[HalfPlane]) -> np.ndarray:
    """Tiny triangle around a point, kept inside its region."""
    x, y = float(center[0]), float(center[1])
    corners = [(x - size, y - size), (x + size, y - size), (x, y + size)]
    return np.array([clamp_to_region(c, anchor, half_planes) for c in corners])


def rotate(vector: Tuple[float, float], angle: float) -> np.ndarray:
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([vector[0] * c - vector[1] * s, vector[0] * s + vector[1] * c])
