import numpy as np
import pytest
import yaml

from quadforge.scene import (
    CameraComponent,
    Scene,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
)
from quadforge.scene_camera import ProjectionType
from quadforge.serializer import SceneSerializer


def _sample_scene():
    scene = Scene()
    cam = scene.create_entity("Camera")
    cc = cam.add_component(CameraComponent(is_primary=True, fixed_aspect_ratio=True))
    cc.camera.set_perspective(0.8, 0.5, 500.0)

    square = scene.create_entity("Square")
    tc = square.get_component(TransformComponent)
    tc.translation = (1.0, 2.0, 3.0)
    tc.rotation = (0.0, 0.5, 0.25)
    tc.scale = (2.0, 2.0, 1.0)
    square.add_component(SpriteRendererComponent(color=(0.25, 0.5, 0.75, 1.0)))
    return scene


def test_serialize_writes_scene_header(tmp_path):
    path = tmp_path / "scene.yaml"
    SceneSerializer(_sample_scene()).serialize(path)
    data = yaml.safe_load(path.read_text())
    assert data["Scene"] == "Untitled"
    assert len(data["Entities"]) == 2
    assert data["Entities"][0]["Tag Component"]["Tag"] == "Camera"


def test_vectors_written_in_flow_style(tmp_path):
    path = tmp_path / "scene.yaml"
    SceneSerializer(_sample_scene()).serialize(path)
    assert "Translation: [1.0, 2.0, 3.0]" in path.read_text()


def test_round_trip(tmp_path):
    path = tmp_path / "scene.yaml"
    original = _sample_scene()
    SceneSerializer(original).serialize(path)

    loaded = Scene()
    assert SceneSerializer(loaded).deserialize(path) is True
    entities = list(loaded.entities())
    assert [e.get_component(TagComponent).tag for e in entities] == ["Camera", "Square"]

    cam, square = entities
    orig_cam, orig_square = list(original.entities())

    cc = cam.get_component(CameraComponent)
    occ = orig_cam.get_component(CameraComponent)
    assert cc.camera.projection_type == ProjectionType.PERSPECTIVE
    assert cc.camera.perspective_fov == pytest.approx(occ.camera.perspective_fov)
    assert cc.camera.perspective_far == pytest.approx(occ.camera.perspective_far)
    assert cc.is_primary is True
    assert cc.fixed_aspect_ratio is True
    assert np.allclose(cc.camera.projection, occ.camera.projection)

    tc = square.get_component(TransformComponent)
    otc = orig_square.get_component(TransformComponent)
    assert np.allclose(tc.get_transform(), otc.get_transform())
    assert square.get_component(SpriteRendererComponent).color == (0.25, 0.5, 0.75, 1.0)
    assert not square.has_component(CameraComponent)


def test_deserialize_without_scene_key(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("Entities: []\n")
    scene = Scene()
    assert SceneSerializer(scene).deserialize(path) is False
    assert list(scene.entities()) == []


def test_deserialize_entity_without_tag_gets_default_name(tmp_path):
    path = tmp_path / "scene.yaml"
    path.write_text("Scene: Untitled\nEntities:\n  - Entity: 1\n")
    scene = Scene()
    assert SceneSerializer(scene).deserialize(path) is True
    (entity,) = scene.entities()
    assert entity.get_component(TagComponent).tag == "Entity"


def test_deserialize_rejects_bad_vector(tmp_path):
    path = tmp_path / "scene.yaml"
    path.write_text(
        "Scene: Untitled\n"
        "Entities:\n"
        "  - Entity: 1\n"
        "    SpriteRendererComponent:\n"
        "      Color: [1.0, 0.0]\n"
    )
    with pytest.raises(ValueError):
        SceneSerializer(Scene()).deserialize(path)


def test_deserialize_missing_file(tmp_path):
    with pytest.raises(OSError):
        SceneSerializer(Scene()).deserialize(tmp_path / "missing.yaml")