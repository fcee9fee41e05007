"""Batched 2D quad renderer that builds vertex data and submits it to a rendering backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from quadforge.camera import _rotate, _translate
from quadforge.shader import Shader
from quadforge.texture import SubTexture2D, Texture2D

__all__ = [
    "QuadVertex",
    "Statistics",
    "RendererAPI",
    "RecordingRendererAPI",
    "generate_quad_indices",
    "Renderer2D",
]

_QUAD_VERTEX_POSITIONS = (
    np.array([-0.5, -0.5, 0.0, 1.0]),
    np.array([0.5, -0.5, 0.0, 1.0]),
    np.array([0.5, 0.5, 0.0, 1.0]),
    np.array([-0.5, 0.5, 0.0, 1.0]),
)
_DEFAULT_TEX_COORDS = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
_WHITE = (1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class QuadVertex:
    """One corner of a quad as laid out in the vertex buffer."""

    position: tuple[float, float, float]
    color: tuple[float, float, float, float]
    tex_coord: tuple[float, float]
    tex_index: float
    tiling_factor: float
    entity_id: int = 0


@dataclass
class Statistics:
    """Counters collected while rendering."""

    draw_calls: int = 0
    quad_count: int = 0

    @property
    def total_vertex_count(self) -> int:
        return self.quad_count * 4

    @property
    def total_index_count(self) -> int:
        return self.quad_count * 6


class RendererAPI(ABC):
    """Backend that carries out the renderer's draw commands."""

    @abstractmethod
    def init(self) -> None:
        """Prepare the backend (blending, depth testing)."""

    @abstractmethod
    def set_clear_color(self, color: Sequence[float]) -> None:
        """Set the colour used when clearing."""

    @abstractmethod
    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        """Set the drawing viewport."""

    @abstractmethod
    def clear(self) -> None:
        """Clear the colour and depth buffers."""

    @abstractmethod
    def draw_indexed(self, vertices: Sequence[QuadVertex], index_count: int) -> None:
        """Draw index_count indices of triangles over the given vertices."""


@dataclass
class RecordingRendererAPI(RendererAPI):
    """Backend that records every command it receives, for headless use."""

    initialized: bool = False
    blending: bool = False
    depth_test: bool = False
    clear_color: tuple[float, ...] = (0.0, 0.0, 0.0, 0.0)
    viewport: tuple[int, int, int, int] = (0, 0, 0, 0)
    clear_count: int = 0
    draws: list[tuple[list[QuadVertex], int]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    def init(self) -> None:
        self.initialized = True
        self.blending = True
        self.depth_test = True
        self.calls.append("init")

    def set_clear_color(self, color: Sequence[float]) -> None:
        self.clear_color = _float_tuple(color, 4)
        self.calls.append("set_clear_color")

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        self.viewport = (int(x), int(y), int(width), int(height))
        self.calls.append("set_viewport")

    def clear(self) -> None:
        self.clear_count += 1
        self.calls.append("clear")

    def draw_indexed(self, vertices: Sequence[QuadVertex], index_count: int) -> None:
        self.draws.append((list(vertices), int(index_count)))
        self.calls.append("draw_indexed")


def generate_quad_indices(max_indices: int) -> list[int]:
    """Indices for consecutive quads: two triangles (0, 1, 2) and (2, 3, 0) per quad."""
    if max_indices < 0 or max_indices % 6:
        raise ValueError(f"index count must be a non-negative multiple of 6, got {max_indices}")
    indices: list[int] = []
    for offset in range(0, (max_indices // 6) * 4, 4):
        indices.extend((offset, offset + 1, offset + 2, offset + 2, offset + 3, offset))
    return indices


def _float_tuple(values: Sequence[float], size: int) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != size:
        raise ValueError(f"expected {size} components, got {len(result)}")
    return result


def _position3(position: Sequence[float]) -> tuple[float, float, float]:
    coords = tuple(float(v) for v in position)
    if len(coords) == 2:
        return coords[0], coords[1], 0.0
    if len(coords) == 3:
        return coords  # type: ignore[return-value]
    raise ValueError(f"position needs 2 or 3 components, got {len(coords)}")


def _scale(size: Sequence[float]) -> np.ndarray:
    sx, sy = _float_tuple(size, 2)
    return np.diag([sx, sy, 1.0, 1.0])


def _matrix4(value: Any) -> np.ndarray:
    matrix = np.array(value, dtype=float)
    if matrix.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
    return matrix


class Renderer2D:
    """Collects quads into batches and draws each batch with a single indexed call."""

    MAX_QUADS = 10000
    MAX_TEXTURE_SLOTS = 16

    def __init__(
        self,
        api: RendererAPI | None = None,
        *,
        shader: Shader | None = None,
        max_quads: int = MAX_QUADS,
        max_texture_slots: int = MAX_TEXTURE_SLOTS,
    ) -> None:
        if max_quads < 1:
            raise ValueError("max_quads must be at least 1")
        if max_texture_slots < 2:
            raise ValueError("max_texture_slots must be at least 2")
        self.api = api if api is not None else RecordingRendererAPI()
        self.max_quads = int(max_quads)
        self.max_vertices = self.max_quads * 4
        self.max_indices = self.max_quads * 6
        self.max_texture_slots = int(max_texture_slots)
        self.indices = generate_quad_indices(self.max_indices)

        self.api.init()

        self.white_texture = Texture2D(1, 1)
        self.white_texture.set_data(b"\xff\xff\xff\xff")

        self.shader = shader if shader is not None else Shader("texture", "", "")
        self.shader.set_int_array("u_Textures", range(self.max_texture_slots))

        self._slots: list[Texture2D | None] = [None] * self.max_texture_slots
        self._slots[0] = self.white_texture
        self._slot_index = 1
        self._vertices: list[QuadVertex] = []
        self._index_count = 0
        self._in_scene = False
        self._stats = Statistics()
        self.bound_textures: tuple[Texture2D, ...] = ()

    @property
    def stats(self) -> Statistics:
        return Statistics(self._stats.draw_calls, self._stats.quad_count)

    @property
    def index_count(self) -> int:
        return self._index_count

    @property
    def vertices(self) -> list[QuadVertex]:
        return list(self._vertices)

    @property
    def texture_slots(self) -> tuple[Texture2D, ...]:
        return tuple(t for t in self._slots[: self._slot_index] if t is not None)

    def begin_scene(self, view_projection: Any) -> None:
        """Start a batch; accepts a 4x4 matrix or a camera exposing its view-projection."""
        for attribute in ("view_projection_matrix", "view_projection"):
            if hasattr(view_projection, attribute):
                view_projection = getattr(view_projection, attribute)
                break
        matrix = _matrix4(view_projection)
        self.shader.set_mat4("u_ViewProjection", matrix)
        self._reset_batch()
        self._in_scene = True

    def end_scene(self) -> None:
        if not self._in_scene:
            raise RuntimeError("end_scene called without begin_scene")
        self.flush()
        self._in_scene = False

    def flush(self) -> None:
        """Bind the used texture slots and draw the current batch."""
        self.bound_textures = self.texture_slots
        self.api.draw_indexed(list(self._vertices), self._index_count)
        self._stats.draw_calls += 1

    def _reset_batch(self) -> None:
        self._vertices = []
        self._index_count = 0
        self._slot_index = 1
        for slot in range(1, self.max_texture_slots):
            self._slots[slot] = None

    def _flush_and_reset(self) -> None:
        self.flush()
        self._reset_batch()

    def set_clear_color(self, color: Sequence[float]) -> None:
        """Reset the statistics and clear the screen with color."""
        self.reset_stats()
        self.api.set_clear_color(_float_tuple(color, 4))
        self.api.clear()

    def on_window_resize(self, width: int, height: int) -> None:
        self.api.set_viewport(0, 0, width, height)

    def reset_stats(self) -> None:
        self._stats = Statistics()

    def _ensure_capacity(self) -> None:
        if not self._in_scene:
            raise RuntimeError("quads can only be drawn between begin_scene and end_scene")
        if self._index_count >= self.max_indices:
            self._flush_and_reset()

    def _texture_index(self, texture: Texture2D) -> float:
        for slot in range(1, self._slot_index):
            if self._slots[slot] is texture:
                return float(slot)
        if self._slot_index >= self.max_texture_slots:
            self._flush_and_reset()
        slot = self._slot_index
        self._slots[slot] = texture
        self._slot_index += 1
        return float(slot)

    @staticmethod
    def _resolve(texture: Texture2D | SubTexture2D) -> tuple[Texture2D, Sequence[Sequence[float]]]:
        if isinstance(texture, SubTexture2D):
            return texture.texture, texture.tex_coords
        if isinstance(texture, Texture2D):
            return texture, _DEFAULT_TEX_COORDS
        raise TypeError(f"expected a Texture2D or SubTexture2D, got {type(texture).__name__}")

    def _submit(
        self,
        transform: np.ndarray,
        color: Sequence[float],
        tex_coords: Sequence[Sequence[float]],
        tex_index: float,
        tiling_factor: float,
        entity_id: int,
    ) -> None:
        color4 = _float_tuple(color, 4)
        for corner, coord in zip(_QUAD_VERTEX_POSITIONS, tex_coords):
            x, y, z, _ = transform @ corner
            self._vertices.append(
                QuadVertex(
                    position=(float(x), float(y), float(z)),
                    color=color4,
                    tex_coord=(float(coord[0]), float(coord[1])),
                    tex_index=float(tex_index),
                    tiling_factor=float(tiling_factor),
                    entity_id=int(entity_id),
                )
            )
        self._index_count += 6
        self._stats.quad_count += 1

    def _textured(
        self,
        transform: np.ndarray,
        texture: Texture2D | SubTexture2D,
        tiling_factor: float,
        entity_id: int,
    ) -> None:
        self._ensure_capacity()
        base, coords = self._resolve(texture)
        index = self._texture_index(base)
        self._submit(transform, _WHITE, coords, index, tiling_factor, entity_id)

    def draw_quad(
        self, position: Sequence[float], size: Sequence[float], color: Sequence[float]
    ) -> None:
        transform = _translate(_position3(position)) @ _scale(size)
        self.draw_transformed_quad(transform, color)

    def draw_textured_quad(
        self,
        position: Sequence[float],
        size: Sequence[float],
        texture: Texture2D | SubTexture2D,
        tiling_factor: float = 1.0,
    ) -> None:
        transform = _translate(_position3(position)) @ _scale(size)
        self._textured(transform, texture, tiling_factor, 0)

    def draw_transformed_quad(
        self, transform: Any, color: Sequence[float], entity_id: int = 0
    ) -> None:
        self._ensure_capacity()
        self._submit(_matrix4(transform), color, _DEFAULT_TEX_COORDS, 0.0, 1.0, entity_id)

    def draw_transformed_textured_quad(
        self,
        transform: Any,
        texture: Texture2D | SubTexture2D,
        tiling_factor: float = 1.0,
        entity_id: int = 0,
    ) -> None:
        self._textured(_matrix4(transform), texture, tiling_factor, entity_id)

    def draw_rotated_quad(
        self,
        position: Sequence[float],
        size: Sequence[float],
        rotation: float,
        color: Sequence[float],
    ) -> None:
        """Draw a quad rotated by rotation radians around the z axis."""
        self._ensure_capacity()
        transform = (
            _translate(_position3(position))
            @ _rotate(float(rotation), (0.0, 0.0, 1.0))
            @ _scale(size)
        )
        self._submit(transform, color, _DEFAULT_TEX_COORDS, 0.0, 1.0, 0)

    def draw_rotated_textured_quad(
        self,
        position: Sequence[float],
        size: Sequence[float],
        rotation: float,
        texture: Texture2D | SubTexture2D,
        tiling_factor: float = 1.0,
    ) -> None:
        transform = (
            _translate(_position3(position))
            @ _rotate(float(rotation), (0.0, 0.0, 1.0))
            @ _scale(size)
        )
        self._textured(transform, texture, tiling_factor, 0)

    def draw_sprite(self, transform: Any, sprite: Any, entity_id: int = 0) -> None:
        """Draw a sprite component: textured when it has a texture, else in its colour."""
        texture = getattr(sprite, "texture", None)
        if texture is not None:
            self.draw_transformed_textured_quad(
                transform, texture, getattr(sprite, "tiling_factor", 1.0), entity_id
            )
        else:
            self.draw_transformed_quad(transform, sprite.color, entity_id)