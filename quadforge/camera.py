"""Orthographic 2D camera, its keyboard/scroll controller, and the orbiting editor camera."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from quadforge import input as input_poll
from quadforge.events import (
    Event,
    EventDispatcher,
    MouseScrolledEvent,
    WindowResizeEvent,
)
from quadforge.keycodes import KeyCode, MouseCode

__all__ = [
    "OrthographicCamera",
    "OrthographicCameraBounds",
    "OrthographicCameraController",
    "EditorCamera",
]


def _vec3(values: Sequence[float]) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"expected 3 components, got {arr.shape[0]}")
    return arr


def _ortho(left: float, right: float, bottom: float, top: float,
           near: float, far: float) -> np.ndarray:
    """Right-handed orthographic projection with depth mapped to [-1, 1]."""
    m = np.eye(4)
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def _perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection with depth mapped to [-1, 1]; fovy in radians."""
    tan_half = math.tan(fovy / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m


def _translate(offset: Sequence[float]) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = _vec3(offset)
    return m


def _rotate(angle: float, axis: Sequence[float]) -> np.ndarray:
    """Counter-clockwise rotation by angle (radians) around axis."""
    a = _vec3(axis)
    a = a / np.linalg.norm(a)
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array([[0.0, -a[2], a[1]], [a[2], 0.0, -a[0]], [-a[1], a[0], 0.0]])
    m = np.eye(4)
    m[:3, :3] = c * np.eye(3) + (1.0 - c) * np.outer(a, a) + s * cross
    return m


def _quat_from_euler(pitch: float, yaw: float, roll: float) -> np.ndarray:
    """Quaternion (w, x, y, z) from Euler angles in radians."""
    cx, cy, cz = math.cos(pitch / 2), math.cos(yaw / 2), math.cos(roll / 2)
    sx, sy, sz = math.sin(pitch / 2), math.sin(yaw / 2), math.sin(roll / 2)
    return np.array([
        cx * cy * cz + sx * sy * sz,
        sx * cy * cz - cx * sy * sz,
        cx * sy * cz + sx * cy * sz,
        cx * cy * sz - sx * sy * cz,
    ])


def _quat_matrix(q: np.ndarray) -> np.ndarray:
    w, x, y, z = q
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ])


class OrthographicCamera:
    """2D camera with an orthographic projection, a position and a rotation in degrees."""

    def __init__(self, left: float, right: float, bottom: float, top: float) -> None:
        self._projection = _ortho(left, right, bottom, top, -1.0, 1.0)
        self._view = np.eye(4)
        self._position = np.zeros(3)
        self._rotation = 0.0
        self._view_projection = self._projection @ self._view

    def set_projection(self, left: float, right: float, bottom: float, top: float) -> None:
        self._projection = _ortho(left, right, bottom, top, -1.0, 1.0)
        self._view_projection = self._projection @ self._view

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value: Sequence[float]) -> None:
        self._position = _vec3(value)
        self._recalculate_view()

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, degrees: float) -> None:
        self._rotation = float(degrees)
        self._recalculate_view()

    @property
    def projection_matrix(self) -> np.ndarray:
        return self._projection

    @property
    def view_matrix(self) -> np.ndarray:
        return self._view

    @property
    def view_projection_matrix(self) -> np.ndarray:
        return self._view_projection

    def _recalculate_view(self) -> None:
        transform = _translate(self._position) @ _rotate(
            math.radians(self._rotation), (0.0, 0.0, 1.0)
        )
        self._view = np.linalg.inv(transform)
        self._view_projection = self._projection @ self._view


@dataclass
class OrthographicCameraBounds:
    """Extents of an orthographic view."""

    left: float
    right: float
    bottom: float
    top: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


class OrthographicCameraController:
    """Moves an orthographic camera with WASD, rotates it with Q/E and zooms on scroll."""

    def __init__(
        self,
        aspect_ratio: float,
        rotation: bool = False,
        *,
        zoom_level: float = 1.0,
        translation_speed: float = 5.0,
        rotation_speed: float = 180.0,
    ) -> None:
        self.aspect_ratio = float(aspect_ratio)
        self.rotation_enabled = bool(rotation)
        self.zoom_level = float(zoom_level)
        self.translation_speed = float(translation_speed)
        self.rotation_speed = float(rotation_speed)
        self.camera_position = np.zeros(3)
        self.camera_rotation = 0.0
        self.bounds = self._make_bounds()
        self.camera = OrthographicCamera(
            self.bounds.left, self.bounds.right, self.bounds.bottom, self.bounds.top
        )

    def _make_bounds(self) -> OrthographicCameraBounds:
        return OrthographicCameraBounds(
            -self.aspect_ratio * self.zoom_level,
            self.aspect_ratio * self.zoom_level,
            -self.zoom_level,
            self.zoom_level,
        )

    def on_update(self, ts: float) -> None:
        """Advance the camera by ts seconds according to the polled keys."""
        angle = math.radians(self.camera_rotation)
        step = self.translation_speed * ts
        cos_a, sin_a = math.cos(angle), math.sin(angle)

        if input_poll.is_key_pressed(KeyCode.A):
            self.camera_position[0] -= cos_a * step
            self.camera_position[1] -= sin_a * step
        elif input_poll.is_key_pressed(KeyCode.D):
            self.camera_position[0] += cos_a * step
            self.camera_position[1] += sin_a * step
        elif input_poll.is_key_pressed(KeyCode.W):
            self.camera_position[0] += -sin_a * step
            self.camera_position[1] += cos_a * step
        elif input_poll.is_key_pressed(KeyCode.S):
            self.camera_position[0] -= -sin_a * step
            self.camera_position[1] -= cos_a * step

        if self.rotation_enabled:
            if input_poll.is_key_pressed(KeyCode.Q):
                self.camera_rotation -= self.rotation_speed * ts
            if input_poll.is_key_pressed(KeyCode.E):
                self.camera_rotation += self.rotation_speed * ts

            if self.camera_rotation > 180.0:
                self.camera_rotation -= 360.0
            elif self.camera_rotation <= -180.0:
                self.camera_rotation += 360.0

            self.camera.rotation = self.camera_rotation

        self.camera.position = self.camera_position
        self.translation_speed = self.zoom_level

    def on_event(self, event: Event) -> None:
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(MouseScrolledEvent, self.on_mouse_scrolled)
        dispatcher.dispatch(WindowResizeEvent, self.on_window_resized)

    def on_resize(self, width: float, height: float) -> None:
        self.aspect_ratio = float(width) / float(height)
        self._calculate_view()

    def _calculate_view(self) -> None:
        self.bounds = self._make_bounds()
        self.camera.set_projection(
            self.bounds.left, self.bounds.right, self.bounds.bottom, self.bounds.top
        )

    def on_mouse_scrolled(self, event: MouseScrolledEvent) -> bool:
        self.zoom_level -= event.y_offset * 0.25
        self.zoom_level = max(self.zoom_level, 0.25)
        self._calculate_view()
        return False

    def on_window_resized(self, event: WindowResizeEvent) -> bool:
        self.on_resize(float(event.width), float(event.height))
        return False


class EditorCamera:
    """Perspective camera orbiting a focal point, driven by Alt + mouse and scrolling."""

    def __init__(
        self,
        fov: float = 45.0,
        aspect_ratio: float = 1.778,
        near_clip: float = 0.1,
        far_clip: float = 1000.0,
        *,
        distance: float = 10.0,
        viewport_width: float = 1280.0,
        viewport_height: float = 720.0,
    ) -> None:
        self.fov = float(fov)
        self.aspect_ratio = float(aspect_ratio)
        self.near_clip = float(near_clip)
        self.far_clip = float(far_clip)
        self.distance = float(distance)
        self.viewport_width = float(viewport_width)
        self.viewport_height = float(viewport_height)
        self.focal_point = np.zeros(3)
        self.pitch = 0.0
        self.yaw = 0.0
        self.position = np.zeros(3)
        self.view_matrix = np.eye(4)
        self._initial_mouse_position = np.zeros(2)
        self.projection = _perspective(
            math.radians(self.fov), self.aspect_ratio, self.near_clip, self.far_clip
        )
        self._update_view()

    @property
    def view_projection(self) -> np.ndarray:
        return self.projection @ self.view_matrix

    def set_viewport_size(self, width: float, height: float) -> None:
        self.viewport_width = float(width)
        self.viewport_height = float(height)
        self._update_projection()

    def _update_projection(self) -> None:
        self.aspect_ratio = self.viewport_width / self.viewport_height
        self.projection = _perspective(
            math.radians(self.fov), self.aspect_ratio, self.near_clip, self.far_clip
        )
        self._update_view()

    def _update_view(self) -> None:
        self.position = self._calculate_position()
        rotation = np.eye(4)
        rotation[:3, :3] = _quat_matrix(self.orientation())
        self.view_matrix = np.linalg.inv(_translate(self.position) @ rotation)

    def on_update(self, ts: float) -> None:
        if input_poll.is_key_pressed(KeyCode.LEFT_ALT):
            mouse = np.array([input_poll.get_mouse_x(), input_poll.get_mouse_y()])
            delta = (mouse - self._initial_mouse_position) * 0.003
            self._initial_mouse_position = mouse

            if input_poll.is_mouse_button_pressed(MouseCode.BUTTON_MIDDLE):
                self.mouse_pan(delta)
            elif input_poll.is_mouse_button_pressed(MouseCode.BUTTON_LEFT):
                self.mouse_rotate(delta)
            elif input_poll.is_mouse_button_pressed(MouseCode.BUTTON_RIGHT):
                self.mouse_zoom(float(delta[1]))

        self._update_view()

    def on_event(self, event: Event) -> None:
        EventDispatcher(event).dispatch(MouseScrolledEvent, self.on_mouse_scroll)

    def on_mouse_scroll(self, event: MouseScrolledEvent) -> bool:
        self.mouse_zoom(event.y_offset * 0.1)
        self._update_view()
        return False

    def orientation(self) -> np.ndarray:
        """Orientation quaternion as (w, x, y, z)."""
        return _quat_from_euler(-self.pitch, -self.yaw, 0.0)

    def _rotate_vector(self, vector: Sequence[float]) -> np.ndarray:
        return _quat_matrix(self.orientation()) @ _vec3(vector)

    def up_direction(self) -> np.ndarray:
        return self._rotate_vector((0.0, 1.0, 0.0))

    def right_direction(self) -> np.ndarray:
        return self._rotate_vector((1.0, 0.0, 0.0))

    def forward_direction(self) -> np.ndarray:
        return self._rotate_vector((0.0, 0.0, -1.0))

    def _calculate_position(self) -> np.ndarray:
        return self.focal_point - self.forward_direction() * self.distance

    def mouse_pan(self, delta: Sequence[float]) -> None:
        dx, dy = (float(d) for d in delta)
        x_speed, y_speed = self.pan_speed()
        self.focal_point = self.focal_point + (
            -self.right_direction() * dx * x_speed * self.distance
        )
        self.focal_point = self.focal_point + (
            self.up_direction() * dy * y_speed * self.distance
        )

    def mouse_rotate(self, delta: Sequence[float]) -> None:
        dx, dy = (float(d) for d in delta)
        yaw_sign = -1.0 if self.up_direction()[1] < 0 else 1.0
        self.yaw += yaw_sign * dx * self.rotation_speed()
        self.pitch += dy * self.rotation_speed()

    def mouse_zoom(self, delta: float) -> None:
        self.distance -= delta * self.zoom_speed()
        if self.distance < 1.0:
            self.focal_point = self.focal_point + self.forward_direction()
            self.distance = 1.0

    def pan_speed(self) -> tuple[float, float]:
        x = min(self.viewport_width / 1000.0, 2.4)
        x_factor = 0.0366 * (x * x) - 0.1778 * x + 0.3021
        y = min(self.viewport_height / 1000.0, 2.4)
        y_factor = 0.0366 * (y * y) - 0.1778 * y + 0.3021
        return x_factor, y_factor

    def rotation_speed(self) -> float:
        return 0.8

    def zoom_speed(self) -> float:
        distance = max(self.distance * 0.2, 0.0)
        return min(distance * distance, 100.0)