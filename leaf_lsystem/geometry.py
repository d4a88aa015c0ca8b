"""
Minimal geometry kernel built on numpy.

Transforms are 4x4 homogeneous matrices. Points are float arrays of shape
(3,) or (N, 3).
"""

from typing import Optional, Sequence, Tuple

import numpy as np

EPS = 1e-12


def as_point(p) -> np.ndarray:
    arr = np.array(p, dtype=float).reshape(3)
    return arr


def unitize(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm < EPS:
        raise ValueError("Cannot unitize a zero-length vector")
    return v / norm


def translation(vector) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = as_point(vector)
    return m


def _rotate_axis(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation matrix for arbitrary axis using Rodrigues' formula."""
    axis = unitize(as_point(axis))
    K = np.array([
        [0, -axis[2], axis[1]],
        [axis[2], 0, -axis[0]],
        [-axis[1], axis[0], 0]
    ])
    return np.eye(3) + np.sin(angle) * K + (1 - np.cos(angle)) * (K @ K)


def rotation(angle: float, axis, center) -> np.ndarray:
    """Counter-clockwise rotation by ``angle`` radians about ``axis`` through ``center``."""
    center = as_point(center)
    m = np.eye(4)
    m[:3, :3] = _rotate_axis(axis, angle)
    return translation(center) @ m @ translation(-center)


def scale(center, factor: float) -> np.ndarray:
    """Uniform scale about ``center``."""
    center = as_point(center)
    m = np.eye(4)
    m[:3, :3] *= factor
    return translation(center) @ m @ translation(-center)


def apply(matrix: np.ndarray, points) -> np.ndarray:
    """Transform a single point (3,) or an array of points (N, 3)."""
    pts = np.asarray(points, dtype=float)
    single = pts.ndim == 1
    pts = np.atleast_2d(pts)
    homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
    out = (matrix @ homogeneous.T).T[:, :3]
    return out[0] if single else out


class Plane:
    """
    Oriented plane through ``origin``.

    The x axis points at ``x_point``, the y axis is the component of
    ``y_point - origin`` orthogonal to x, and z = x cross y.
    """

    def __init__(self, origin, x_point, y_point):
        self.origin = as_point(origin)
        x_raw = as_point(x_point) - self.origin
        y_raw = as_point(y_point) - self.origin
        self.x_axis = unitize(x_raw)
        y_raw = y_raw - np.dot(y_raw, self.x_axis) * self.x_axis
        self.y_axis = unitize(y_raw)
        self.z_axis = np.cross(self.x_axis, self.y_axis)

    @property
    def frame(self) -> np.ndarray:
        """3x3 matrix with the axes as columns."""
        return np.column_stack([self.x_axis, self.y_axis, self.z_axis])

    def point_at(self, u: float, v: float, w: float = 0.0) -> np.ndarray:
        return self.origin + u * self.x_axis + v * self.y_axis + w * self.z_axis

    def transform(self, matrix: np.ndarray) -> "Plane":
        origin = apply(matrix, self.origin)
        x_point = apply(matrix, self.origin + self.x_axis)
        y_point = apply(matrix, self.origin + self.y_axis)
        return Plane(origin, x_point, y_point)

    def __repr__(self) -> str:
        return f"Plane(origin={self.origin.tolist()}, z_axis={self.z_axis.tolist()})"


def plane_to_plane(source: Plane, target: Plane) -> np.ndarray:
    """Rigid transform mapping ``source`` onto ``target``, axis for axis."""
    m = np.eye(4)
    m[:3, :3] = target.frame @ source.frame.T
    return translation(target.origin) @ m @ translation(-source.origin)


# corner order: bottom face counter-clockwise, then top face
_UNIT_CUBE = np.array([
    [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
    [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
], dtype=float)

_CUBE_FACES = np.array([
    [0, 3, 2, 1], [4, 5, 6, 7],
    [0, 1, 5, 4], [1, 2, 6, 5],
    [2, 3, 7, 6], [3, 0, 4, 7],
])


class Mesh:
    """Polygon mesh used as the template shape of a geometry binding."""

    def __init__(self, vertices, faces: Optional[Sequence[Sequence[int]]] = None):
        self.vertices = np.array(vertices, dtype=float).reshape(-1, 3)
        self.faces = [tuple(int(i) for i in f) for f in faces] if faces is not None else []

    @classmethod
    def box(cls, size: float = 1.0, origin=(0.0, 0.0, 0.0)) -> "Mesh":
        return cls(_UNIT_CUBE * size + as_point(origin), _CUBE_FACES)

    @property
    def is_valid(self) -> bool:
        if len(self.vertices) == 0 or not np.all(np.isfinite(self.vertices)):
            return False
        n = len(self.vertices)
        return all(0 <= i < n for face in self.faces for i in face)

    @property
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def copy(self) -> "Mesh":
        return Mesh(self.vertices.copy(), list(self.faces))

    def transform(self, matrix: np.ndarray) -> "Mesh":
        return Mesh(apply(matrix, self.vertices), list(self.faces))

    def __len__(self) -> int:
        return len(self.vertices)

    def __repr__(self) -> str:
        return f"Mesh(vertices={len(self.vertices)}, faces={len(self.faces)})"


class Box:
    """Box spanning ``[0, size]`` on each axis of ``plane``."""

    def __init__(self, plane: Plane, size: float):
        self.plane = plane
        self.size = float(size)

    def corners(self) -> np.ndarray:
        return np.array([self.plane.point_at(*(c * self.size)) for c in _UNIT_CUBE])

    @property
    def center(self) -> np.ndarray:
        half = self.size / 2
        return self.plane.point_at(half, half, half)

    def to_mesh(self) -> Mesh:
        return Mesh(self.corners(), _CUBE_FACES)

    def transform(self, matrix: np.ndarray) -> "Box":
        """New box on the transformed plane; size is kept, so ``matrix`` must be rigid."""
        return Box(self.plane.transform(matrix), self.size)

    def __repr__(self) -> str:
        return f"Box(origin={self.plane.origin.tolist()}, size={self.size})"


class Line:
    def __init__(self, start, end):
        self.start = as_point(start)
        self.end = as_point(end)

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    def __repr__(self) -> str:
        return f"Line({self.start.tolist()}, {self.end.tolist()})"
