import numpy as np
import pytest

from quadforge import input as input_poll
from quadforge.camera import (
    EditorCamera,
    OrthographicCamera,
    OrthographicCameraBounds,
    OrthographicCameraController,
)
from quadforge.events import MouseScrolledEvent, WindowResizeEvent
from quadforge.input import StateInput
from quadforge.keycodes import KeyCode, MouseCode


@pytest.fixture
def state():
    backend = StateInput()
    previous = input_poll.set_backend(backend)
    yield backend
    input_poll.set_backend(previous)


def _project(matrix, point):
    v = matrix @ np.array([*point, 1.0])
    return v[:3] / v[3]


def test_orthographic_maps_corners_to_ndc():
    cam = OrthographicCamera(-2.0, 2.0, -1.0, 1.0)
    assert np.allclose(_project(cam.view_projection_matrix, (2.0, 1.0, 0.0)), [1, 1, 0])
    assert np.allclose(_project(cam.view_projection_matrix, (-2.0, -1.0, 0.0)), [-1, -1, 0])


def test_orthographic_position_moves_view():
    cam = OrthographicCamera(-1.0, 1.0, -1.0, 1.0)
    cam.position = (0.5, 0.25, 0.0)
    assert np.allclose(_project(cam.view_projection_matrix, (0.5, 0.25, 0.0)), [0, 0, 0])
    assert np.allclose(cam.view_projection_matrix, cam.projection_matrix @ cam.view_matrix)


def test_orthographic_rotation_inverse():
    cam = OrthographicCamera(-1.0, 1.0, -1.0, 1.0)
    cam.rotation = 90.0
    # a point on the camera's rotated x-axis ends up on the screen x-axis
    assert np.allclose(cam.view_matrix @ np.array([0.0, 1.0, 0.0, 1.0]), [1, 0, 0, 1])


def test_set_projection_keeps_view():
    cam = OrthographicCamera(-1.0, 1.0, -1.0, 1.0)
    cam.position = (1.0, 0.0, 0.0)
    cam.set_projection(-4.0, 4.0, -2.0, 2.0)
    assert np.allclose(_project(cam.view_projection_matrix, (5.0, 2.0, 0.0)), [1, 1, 0])


def test_bounds_size():
    b = OrthographicCameraBounds(-3.0, 3.0, -1.0, 1.0)
    assert b.width == 6.0
    assert b.height == 2.0


def test_controller_bounds_follow_aspect():
    ctrl = OrthographicCameraController(1.5)
    assert ctrl.bounds.right == pytest.approx(1.5)
    assert ctrl.bounds.left == pytest.approx(-1.5)
    assert ctrl.bounds.top == pytest.approx(ctrl.zoom_level)


def test_controller_moves_right_with_d(state):
    ctrl = OrthographicCameraController(1.0, translation_speed=2.0)
    state.press_key(KeyCode.D)
    ctrl.on_update(1.0)
    assert np.allclose(ctrl.camera.position, [2.0, 0.0, 0.0])
    assert ctrl.translation_speed == ctrl.zoom_level


def test_controller_moves_up_with_w(state):
    ctrl = OrthographicCameraController(1.0, translation_speed=3.0)
    state.press_key(KeyCode.W)
    ctrl.on_update(0.5)
    assert np.allclose(ctrl.camera_position, [0.0, 1.5, 0.0])


def test_controller_rotation_wraps(state):
    ctrl = OrthographicCameraController(1.0, rotation=True, rotation_speed=100.0)
    state.press_key(KeyCode.E)
    ctrl.on_update(2.0)
    assert ctrl.camera_rotation == pytest.approx(200.0 - 360.0)
    assert ctrl.camera.rotation == ctrl.camera_rotation


def test_controller_rotation_disabled_ignores_keys(state):
    ctrl = OrthographicCameraController(1.0, rotation=False)
    state.press_key(KeyCode.Q)
    ctrl.on_update(1.0)
    assert ctrl.camera_rotation == 0.0


def test_scroll_zoom_clamped():
    ctrl = OrthographicCameraController(2.0)
    event = MouseScrolledEvent(0.0, 100.0)
    ctrl.on_event(event)
    assert ctrl.zoom_level == 0.25
    assert ctrl.bounds.right == pytest.approx(2.0 * 0.25)
    assert event.handled is False


def test_window_resize_updates_aspect():
    ctrl = OrthographicCameraController(1.0)
    ctrl.on_event(WindowResizeEvent(200, 100))
    assert ctrl.aspect_ratio == 2.0
    assert ctrl.bounds.right == pytest.approx(2.0 * ctrl.zoom_level)


def test_editor_default_forward_and_position():
    cam = EditorCamera(distance=10.0)
    assert np.allclose(cam.forward_direction(), [0.0, 0.0, -1.0])
    assert np.allclose(cam.up_direction(), [0.0, 1.0, 0.0])
    assert np.allclose(cam.position, cam.focal_point - cam.forward_direction() * cam.distance)


def test_editor_directions_orthonormal_after_rotate():
    cam = EditorCamera()
    cam.mouse_rotate((0.4, 0.3))
    f, u, r = cam.forward_direction(), cam.up_direction(), cam.right_direction()
    for v in (f, u, r):
        assert np.linalg.norm(v) == pytest.approx(1.0)
    assert np.dot(f, u) == pytest.approx(0.0, abs=1e-9)
    assert np.dot(f, r) == pytest.approx(0.0, abs=1e-9)


def test_editor_view_places_focal_point_ahead():
    cam = EditorCamera(distance=5.0)
    cam.mouse_rotate((0.2, -0.1))
    cam.on_update(0.016)
    eye_space = cam.view_matrix @ np.array([*cam.focal_point, 1.0])
    assert np.allclose(eye_space[:3], [0.0, 0.0, -cam.distance])


def test_editor_zoom_clamps_distance():
    cam = EditorCamera(distance=2.0)
    cam.mouse_zoom(1000.0)
    assert cam.distance == 1.0
    assert np.allclose(cam.focal_point, cam.forward_direction())


def test_editor_zoom_speed_capped():
    cam = EditorCamera(distance=10_000.0)
    assert cam.zoom_speed() == 100.0
    assert cam.rotation_speed() == 0.8


def test_editor_pan_speed_symmetric():
    cam = EditorCamera()
    cam.set_viewport_size(800, 800)
    x, y = cam.pan_speed()
    assert x == pytest.approx(y)
    assert cam.aspect_ratio == 1.0


def test_editor_scroll_event_zooms_in():
    cam = EditorCamera(distance=10.0)
    cam.on_event(MouseScrolledEvent(0.0, 1.0))
    assert cam.distance < 10.0
    assert np.allclose(cam.position, cam.focal_point - cam.forward_direction() * cam.distance)


def test_editor_update_rotates_with_alt_and_left(state):
    cam = EditorCamera()
    state.press_key(KeyCode.LEFT_ALT)
    state.press_button(MouseCode.BUTTON_LEFT)
    state.move_mouse(30.0, 0.0)
    cam.on_update(0.016)
    assert cam.yaw == pytest.approx(30.0 * 0.003 * cam.rotation_speed())
    assert cam.pitch == 0.0


def test_editor_update_without_alt_does_nothing(state):
    cam = EditorCamera()
    state.press_button(MouseCode.BUTTON_LEFT)
    state.move_mouse(30.0, 40.0)
    cam.on_update(0.016)
    assert cam.yaw == 0.0
    assert cam.pitch == 0.0


def test_editor_pan_moves_focal_point(state):
    cam = EditorCamera()
    state.press_key(KeyCode.LEFT_ALT)
    state.press_button(MouseCode.BUTTON_MIDDLE)
    state.move_mouse(100.0, 0.0)
    cam.on_update(0.016)
    assert cam.focal_point[0] < 0.0
    assert cam.focal_point[1] == pytest.approx(0.0)