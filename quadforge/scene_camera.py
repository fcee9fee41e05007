"""Scene camera switchable between perspective and orthographic projection."""

from __future__ import annotations

import math
from enum import IntEnum

import numpy as np

from quadforge.camera import _ortho, _perspective

__all__ = ["ProjectionType", "SceneCamera"]


class ProjectionType(IntEnum):
    PERSPECTIVE = 0
    ORTHOGRAPHIC = 1


class SceneCamera:
    """Camera attached to scene entities; any change recalculates the projection."""

    def __init__(self) -> None:
        self._projection_type = ProjectionType.ORTHOGRAPHIC
        self._perspective_fov = math.radians(45.0)
        self._perspective_near = 0.01
        self._perspective_far = 1000.0
        self._orthographic_size = 10.0
        self._orthographic_near = -1.0
        self._orthographic_far = 1.0
        self._aspect_ratio = 1.0
        self.projection = np.eye(4)
        self.recalculate_projection()

    def set_orthographic(self, size: float, near_clip: float, far_clip: float) -> None:
        self._projection_type = ProjectionType.ORTHOGRAPHIC
        self._orthographic_size = float(size)
        self._orthographic_near = float(near_clip)
        self._orthographic_far = float(far_clip)
        self.recalculate_projection()

    def set_perspective(self, fov: float, near_clip: float, far_clip: float) -> None:
        """Switch to perspective; fov is the vertical field of view in radians."""
        self._projection_type = ProjectionType.PERSPECTIVE
        self._perspective_fov = float(fov)
        self._perspective_near = float(near_clip)
        self._perspective_far = float(far_clip)
        self.recalculate_projection()

    def set_viewport_size(self, width: int, height: int) -> None:
        if height == 0:
            raise ValueError("viewport height must be non-zero")
        self._aspect_ratio = float(width) / float(height)
        self.recalculate_projection()

    def recalculate_projection(self) -> None:
        if self._projection_type == ProjectionType.PERSPECTIVE:
            self.projection = _perspective(
                self._perspective_fov, self._aspect_ratio,
                self._perspective_near, self._perspective_far,
            )
        else:
            half_h = self._orthographic_size * 0.5
            half_w = self._orthographic_size * self._aspect_ratio * 0.5
            self.projection = _ortho(
                -half_w, half_w, -half_h, half_h,
                self._orthographic_near, self._orthographic_far,
            )

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    @property
    def projection_type(self) -> ProjectionType:
        return self._projection_type

    @projection_type.setter
    def projection_type(self, value: ProjectionType | int) -> None:
        self._projection_type = ProjectionType(value)
        self.recalculate_projection()

    @property
    def perspective_fov(self) -> float:
        return self._perspective_fov

    @perspective_fov.setter
    def perspective_fov(self, value: float) -> None:
        self._perspective_fov = float(value)
        self.recalculate_projection()

    @property
    def perspective_near(self) -> float:
        return self._perspective_near

    @perspective_near.setter
    def perspective_near(self, value: float) -> None:
        self._perspective_near = float(value)
        self.recalculate_projection()

    @property
    def perspective_far(self) -> float:
        return self._perspective_far

    @perspective_far.setter
    def perspective_far(self, value: float) -> None:
        self._perspective_far = float(value)
        self.recalculate_projection()

    @property
    def orthographic_size(self) -> float:
        return self._orthographic_size

    @orthographic_size.setter
    def orthographic_size(self, value: float) -> None:
        self._orthographic_size = float(value)
        self.recalculate_projection()

    @property
    def orthographic_near(self) -> float:
        return self._orthographic_near

    @orthographic_near.setter
    def orthographic_near(self, value: float) -> None:
        self._orthographic_near = float(value)
        self.recalculate_projection()

    @property
    def orthographic_far(self) -> float:
        return self._orthographic_far

    @orthographic_far.setter
    def orthographic_far(self, value: float) -> None:
        self._orthographic_far = float(value)
        self.recalculate_projection()