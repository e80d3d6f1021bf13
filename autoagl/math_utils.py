import math
from typing import Tuple

Vec3 = Tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)

def dot(a: Vec3, b: Vec3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]

def norm(a: Vec3) -> float:
    return math.sqrt(dot(a, a))

def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])

def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])

def mul(a: Vec3, k: float) -> Vec3:
    return (a[0]*k, a[1]*k, a[2]*k)

def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )

def unit(a: Vec3) -> Vec3:
    n = norm(a)
    if n <= 0.0:
        return ZERO
    return mul(a, 1.0 / n)

def split_radial(position: Vec3, velocity: Vec3) -> Tuple[float, float]:
    """Split velocity into (horizontal speed, vertical speed) about local up."""
    up = unit(position)
    vertical = dot(velocity, up)
    horizontal = norm(sub(velocity, mul(up, vertical)))
    return horizontal, vertical
