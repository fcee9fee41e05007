"""Saving scenes to YAML files and loading them back."""

from __future__ import annotations

import logging
from os import PathLike
from typing import Any, Sequence

import yaml

from quadforge.scene import (
    CameraComponent,
    Entity,
    Scene,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
)
from quadforge.scene_camera import ProjectionType

__all__ = ["SceneSerializer"]

_log = logging.getLogger(__name__)

_ENTITY_ID = 12837192831273


class _FlowList(list):
    """A sequence written on one line, e.g. [1, 2, 3]."""


class _Dumper(yaml.SafeDumper):
    pass


_Dumper.add_representer(
    _FlowList,
    lambda dumper, value: dumper.represent_sequence(
        "tag:yaml.org,2002:seq", value, flow_style=True
    ),
)


def _flow(values: Sequence[float]) -> _FlowList:
    return _FlowList(float(v) for v in values)


def _decode_vector(node: Any, size: int) -> tuple[float, ...]:
    if not isinstance(node, list) or len(node) != size:
        raise ValueError(f"expected a sequence of {size} numbers, got {node!r}")
    return tuple(float(v) for v in node)


def _serialize_entity(entity: Entity) -> dict[str, Any]:
    out: dict[str, Any] = {"Entity": _ENTITY_ID}

    if entity.has_component(TagComponent):
        out["Tag Component"] = {"Tag": entity.get_component(TagComponent).tag}

    if entity.has_component(TransformComponent):
        tc = entity.get_component(TransformComponent)
        out["TransformComponent"] = {
            "Translation": _flow(tc.translation),
            "Rotation": _flow(tc.rotation),
            "Scale": _flow(tc.scale),
        }

    if entity.has_component(CameraComponent):
        cc = entity.get_component(CameraComponent)
        camera = cc.camera
        out["CameraComponent"] = {
            "Camera": {
                "ProjectionType": int(camera.projection_type),
                "PerspectiveFOV": camera.perspective_fov,
                "PerspectiveNear": camera.perspective_near,
                "PerspectiveFar": camera.perspective_far,
                "OrthographicSize": camera.orthographic_size,
                "OrthographicNear": camera.orthographic_near,
                "OrthographicFar": camera.orthographic_far,
            },
            "Primary": bool(cc.is_primary),
            "FixedAspectRatio": bool(cc.fixed_aspect_ratio),
        }

    if entity.has_component(SpriteRendererComponent):
        src = entity.get_component(SpriteRendererComponent)
        out["SpriteRendererComponent"] = {"Color": _flow(src.color)}

    return out


class SceneSerializer:
    """Writes a scene's entities and components to YAML and reads them back."""

    def __init__(self, scene: Scene) -> None:
        self.scene = scene

    def serialize(self, filepath: str | PathLike[str]) -> None:
        document = {
            "Scene": "Untitled",
            "Entities": [_serialize_entity(e) for e in self.scene.entities() if e],
        }
        with open(filepath, "w", encoding="utf-8") as handle:
            yaml.dump(document, handle, Dumper=_Dumper, sort_keys=False)

    def deserialize(self, filepath: str | PathLike[str]) -> bool:
        """Add the file's entities to the scene; False when the file holds no scene."""
        with open(filepath, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)

        if not isinstance(data, dict) or not data.get("Scene"):
            _log.warning("Expecting a scene for deserializer. Scene Node Required.")
            return False

        for node in data.get("Entities") or []:
            uuid = int(node["Entity"])
            name = ""
            tag_node = node.get("Tag Component")
            if tag_node:
                name = str(tag_node["Tag"])
            _log.debug("Deserializing entity with ID = %d, name = %s", uuid, name)

            entity = self.scene.create_entity(name)

            transform_node = node.get("TransformComponent")
            if transform_node:
                tc = entity.get_component(TransformComponent)
                tc.translation = _decode_vector(transform_node["Translation"], 3)
                tc.rotation = _decode_vector(transform_node["Rotation"], 3)
                tc.scale = _decode_vector(transform_node["Scale"], 3)

            camera_node = node.get("CameraComponent")
            if camera_node:
                cc = entity.add_component(CameraComponent())
                props = camera_node["Camera"]
                camera = cc.camera
                camera.projection_type = ProjectionType(int(props["ProjectionType"]))
                camera.perspective_fov = float(props["PerspectiveFOV"])
                camera.perspective_near = float(props["PerspectiveNear"])
                camera.perspective_far = float(props["PerspectiveFar"])
                camera.orthographic_size = float(props["OrthographicSize"])
                camera.orthographic_near = float(props["OrthographicNear"])
                camera.orthographic_far = float(props["OrthographicFar"])
                cc.is_primary = bool(camera_node["Primary"])
                cc.fixed_aspect_ratio = bool(camera_node["FixedAspectRatio"])

            sprite_node = node.get("SpriteRendererComponent")
            if sprite_node:
                src = entity.add_component(SpriteRendererComponent())
                src.color = _decode_vector(sprite_node["Color"], 4)

        return True