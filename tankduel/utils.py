"""
Arena geometry for the tank duel

Tanks and projectiles are axis-aligned boxes in a top-left-origin arena;
everything here works on plain floats so the tick never allocates shapes.
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np


def clamp(value: float, lo: float, hi: float) -> float:
    """Pin a coordinate or health value into [lo, hi]"""
    return max(lo, min(hi, value))


def vec_len(dx: float, dy: float) -> float:
    """Distance covered by a (dx, dy) offset"""
    return math.hypot(dx, dy)


def normalize(dx: float, dy: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Unit direction of an offset; a zero offset has no direction"""
    dist = math.hypot(dx, dy)
    if dist < eps:
        return 0.0, 0.0
    return dx / dist, dy / dist


def aabb_overlap(ax, ay, aw, ah, bx, by, bw, bh) -> bool:
    """Check if two axis-aligned boxes overlap (touching edges count)"""
    return not (
        ax + aw < bx
        or bx + bw < ax
        or ay + ah < by
        or by + bh < ay
    )


def out_of_bounds(x: float, y: float, width: float, height: float) -> bool:
    """Check if a point lies outside the [0, width] x [0, height] arena"""
    return x < 0 or x > width or y < 0 or y > height


def seed_everything(seed: Optional[int]):
    """Make bot jitter, respawn points and explosions repeatable"""
    if seed is None:
        return
    random.seed(seed)
    np.random.seed(seed)
