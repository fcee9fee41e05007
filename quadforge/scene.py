"""Entities, their components, and the scene that owns and renders them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence, TypeVar

import numpy as np

from quadforge.camera import _quat_from_euler, _quat_matrix, _translate
from quadforge.renderer2d import Renderer2D
from quadforge.scene_camera import SceneCamera
from quadforge.texture import SubTexture2D, Texture2D

__all__ = [
    "TagComponent",
    "TransformComponent",
    "CameraComponent",
    "SpriteRendererComponent",
    "Entity",
    "Scene",
]

C = TypeVar("C")


def _vector(values: Sequence[float], size: int) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    if arr.shape != (size,):
        raise ValueError(f"expected {size} components, got {arr.shape[0]}")
    return arr


@dataclass
class TagComponent:
    """Human-readable name of an entity."""

    tag: str = ""


@dataclass
class TransformComponent:
    """Translation, Euler rotation in radians, and scale of an entity."""

    translation: Any = field(default_factory=lambda: np.zeros(3))
    rotation: Any = field(default_factory=lambda: np.zeros(3))
    scale: Any = field(default_factory=lambda: np.ones(3))

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("translation", "rotation", "scale"):
            value = _vector(value, 3)
        super().__setattr__(name, value)

    def get_transform(self) -> np.ndarray:
        """Model matrix: translation, then rotation, then scale."""
        rotation = np.eye(4)
        rotation[:3, :3] = _quat_matrix(_quat_from_euler(*(float(r) for r in self.rotation)))
        return _translate(self.translation) @ rotation @ np.diag([*self.scale, 1.0])


@dataclass
class CameraComponent:
    """A scene camera attached to an entity."""

    camera: SceneCamera = field(default_factory=SceneCamera)
    is_primary: bool = True
    fixed_aspect_ratio: bool = False


@dataclass
class SpriteRendererComponent:
    """Colour, and optionally texture, with which an entity is drawn."""

    color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    texture: Texture2D | SubTexture2D | None = None
    tiling_factor: float = 1.0

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "color":
            value = tuple(float(v) for v in _vector(value, 4))
        super().__setattr__(name, value)


class Entity:
    """Handle to an entity inside a scene."""

    def __init__(self, handle: int, scene: Scene) -> None:
        self.handle = int(handle)
        self.scene = scene

    def __int__(self) -> int:
        return self.handle

    def __bool__(self) -> bool:
        return self.scene._contains(self.handle)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.handle == other.handle and self.scene is other.scene

    def __hash__(self) -> int:
        return hash((self.handle, id(self.scene)))

    def __repr__(self) -> str:
        return f"Entity({self.handle})"

    def add_component(self, component: C) -> C:
        """Attach a component; an entity holds at most one of each type."""
        components = self.scene._components_of(self.handle)
        kind = type(component)
        if kind in components:
            raise ValueError(f"entity {self.handle} already has a {kind.__name__}")
        components[kind] = component
        self.scene._on_component_added(self, component)
        return component

    def get_component(self, component_type: type[C]) -> C:
        components = self.scene._components_of(self.handle)
        try:
            return components[component_type]  # type: ignore[return-value]
        except KeyError:
            raise KeyError(
                f"entity {self.handle} has no {component_type.__name__}"
            ) from None

    def has_component(self, component_type: type) -> bool:
        return component_type in self.scene._components_of(self.handle)


class Scene:
    """Registry of entities and their components."""

    def __init__(self) -> None:
        self._registry: dict[int, dict[type, Any]] = {}
        self._next_handle = 0
        self.viewport_width = 0
        self.viewport_height = 0

    def _contains(self, handle: int) -> bool:
        return handle in self._registry

    def _components_of(self, handle: int) -> dict[type, Any]:
        try:
            return self._registry[handle]
        except KeyError:
            raise KeyError(f"entity {handle} does not exist in this scene") from None

    def _on_component_added(self, entity: Entity, component: Any) -> None:
        if isinstance(component, CameraComponent):
            if self.viewport_width > 0 and self.viewport_height > 0:
                component.camera.set_viewport_size(self.viewport_width, self.viewport_height)

    def create_entity(self, name: str = "") -> Entity:
        """New entity with a transform and a tag, named 'Entity' when no name is given."""
        handle = self._next_handle
        self._next_handle += 1
        self._registry[handle] = {}
        entity = Entity(handle, self)
        entity.add_component(TransformComponent())
        entity.add_component(TagComponent(name if name else "Entity"))
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        if entity.scene is not self or not self._contains(entity.handle):
            raise KeyError(f"entity {entity.handle} does not exist in this scene")
        del self._registry[entity.handle]

    def entities(self) -> Iterator[Entity]:
        """Live entities in creation order."""
        for handle in list(self._registry):
            yield Entity(handle, self)

    def _with(self, *component_types: type) -> Iterator[tuple[Entity, ...]]:
        for entity in self.entities():
            components = self._registry[entity.handle]
            if all(t in components for t in component_types):
                yield (entity, *(components[t] for t in component_types))

    def on_viewport_resize(self, width: int, height: int) -> None:
        """Record the viewport and resize every camera whose aspect ratio is not fixed."""
        self.viewport_width = int(width)
        self.viewport_height = int(height)
        for _, camera_component in self._with(CameraComponent):
            if not camera_component.fixed_aspect_ratio:
                camera_component.camera.set_viewport_size(
                    self.viewport_width, self.viewport_height
                )

    def get_primary_camera(self) -> Entity | None:
        for entity, camera_component in self._with(CameraComponent):
            if camera_component.is_primary:
                return entity
        return None

    def on_update_runtime(self, renderer: Renderer2D) -> bool:
        """Draw all sprites through the primary camera; return whether one was found."""
        for _, transform, camera_component in self._with(TransformComponent, CameraComponent):
            if camera_component.is_primary:
                view_projection = camera_component.camera.projection @ np.linalg.inv(
                    transform.get_transform()
                )
                break
        else:
            return False

        renderer.begin_scene(view_projection)
        for _, transform, sprite in self._with(TransformComponent, SpriteRendererComponent):
            renderer.draw_transformed_quad(transform.get_transform(), sprite.color)
        renderer.end_scene()
        return True

    def on_update_editor(self, renderer: Renderer2D, camera: Any) -> None:
        """Draw all sprites through an editor camera, tagging vertices with entity ids."""
        renderer.begin_scene(camera)
        for entity, transform, sprite in self._with(TransformComponent, SpriteRendererComponent):
            renderer.draw_sprite(transform.get_transform(), sprite, entity.handle)
        renderer.end_scene()