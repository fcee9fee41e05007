# quadforge

quadforge is the core of a small 2D scene engine, written in plain Python with numpy,
Pillow and PyYAML. It builds everything a frame needs: events, input state, camera
matrices, shader sources and uniforms, texture pixels, batched quad vertices and scene
data. It does not open a window and does not talk to a GPU.

## What is in it

- `quadforge.keycodes`: the `KeyCode` and `MouseCode` enums. Their values are the GLFW
  key and button numbers. `MouseCode.BUTTON_LEFT`, `BUTTON_RIGHT`, `BUTTON_MIDDLE` and
  `BUTTON_LAST` are aliases of numbered buttons.
- `quadforge.input`: input polling.
  - The polling functions are `is_key_pressed`, `is_mouse_button_pressed`,
    `get_mouse_position`, `get_mouse_x` and `get_mouse_y`. They read the `InputBackend`
    installed with `set_backend`, which returns the backend it replaced.
  - `StateInput` is an in-memory backend that you feed yourself through `press_key`,
    `release_key`, `press_button`, `release_button` and `move_mouse`.
- `quadforge.events`: events and dispatch.
  - The events are `WindowResizeEvent`, `WindowCloseEvent`, `AppTickEvent`,
    `AppUpdateEvent`, `AppRenderEvent`, `KeyPressedEvent`, `KeyReleasedEvent`,
    `KeyTypedEvent`, `MouseMovedEvent`, `MouseScrolledEvent`,
    `MouseButtonPressedEvent` and `MouseButtonReleasedEvent`.
  - Each event has an `EventType` and `EventCategory` flags, checked with
    `is_in_category`.
  - `EventDispatcher.dispatch(event_class, func)` calls `func` only when the event has
    that class's type, and stores the result in `event.handled`.
- `quadforge.camera`: cameras.
  - `OrthographicCamera` has settable `position` and `rotation` (degrees), and exposes
    its projection, view and view-projection matrices.
  - `OrthographicCameraController` does three things:
    - moves the camera with W/A/S/D and rotates it with Q/E when rotation is enabled;
    - zooms on `MouseScrolledEvent`, never below 0.25;
    - adapts the aspect ratio on `WindowResizeEvent`.
  - `EditorCamera` is a perspective camera that orbits a focal point. Holding Left Alt
    with the middle, left or right mouse button pans, rotates or zooms it. Scrolling
    also zooms.
- `quadforge.scene_camera`: `SceneCamera`, which switches between `ProjectionType.ORTHOGRAPHIC`
  and `ProjectionType.PERSPECTIVE`. Every change recalculates its `projection` matrix.
- `quadforge.shader`: shader sources and uniforms.
  - `preprocess_shader_source` splits a combined source on `#type vertex`,
    `#type fragment` and `#type pixel` lines.
  - `shader_name_from_path` gives a file name without its directory or extension.
  - `Shader` holds stage sources and the uniform values set on it with `set_int`,
    `set_int_array`, `set_float`, `set_float3`, `set_float4` and `set_mat4`.
  - `ShaderLibrary` stores shaders by name.
  - Errors raise `ShaderError`.
- `quadforge.texture`: textures and sprite-sheet regions.
  - `Texture2D` stores RGB or RGBA pixel bytes. It can be loaded with `from_file`
    (flipped so that the first row is the bottom), or filled with `set_data`, which must
    cover the whole texture.
  - `SubTexture2D.create_from_coords` cuts a sprite-sheet cell.
  - Errors raise `TextureError`.
- `quadforge.renderer2d`: the batching renderer.
  - `Renderer2D` collects quads between `begin_scene` and `end_scene` as `QuadVertex`
    records.
  - It gives each texture a slot. Slot 0 is a 1×1 white texture.
  - It flushes when the batch or the texture slots are full, and keeps `Statistics`.
  - Draw commands go to a `RendererAPI`. `RecordingRendererAPI` keeps every command it
    receives.
  - `generate_quad_indices` builds the index list, two triangles per quad.
- `quadforge.scene`: scenes, entities and components.
  - A `Scene` holds entities. Each `Entity` carries at most one component of each type:
    `TagComponent`, `TransformComponent`, `CameraComponent` or
    `SpriteRendererComponent`.
  - `on_update_runtime` draws the sprites through the primary camera.
  - `on_update_editor` draws them through an editor camera, tagging vertices with
    entity ids.
- `quadforge.serializer`: `SceneSerializer`, which writes a scene to a YAML file and adds
  a file's entities to a scene. `deserialize` returns `False` when the file has no
  `Scene` key.

## Install

```
pip install quadforge
```

## A quick tour

### Events

```python
from quadforge.events import EventCategory, EventDispatcher, MouseScrolledEvent

event = MouseScrolledEvent(0.0, 1.5)
print(event)                                          # MouseScrolledEvent: (0, 1.5)
print(event.is_in_category(EventCategory.MOUSE))      # True

EventDispatcher(event).dispatch(MouseScrolledEvent, lambda e: True)
print(event.handled)                                  # True
```

### Input

```python
from quadforge import input as engine_input
from quadforge.input import StateInput
from quadforge.keycodes import KeyCode

state = StateInput()
engine_input.set_backend(state)
state.press_key(KeyCode.A)
state.move_mouse(120.0, 45.0)

print(engine_input.is_key_pressed(KeyCode.A))   # True
print(engine_input.get_mouse_x())               # 120.0
```

### Cameras

```python
from quadforge.camera import OrthographicCameraController
from quadforge.events import MouseScrolledEvent

controller = OrthographicCameraController(16 / 9, True)
controller.on_event(MouseScrolledEvent(0.0, 1.0))   # zoom in
controller.on_update(0.016)                         # apply the polled keys
print(controller.camera.view_projection_matrix)
```

### Shaders

```python
from quadforge.shader import preprocess_shader_source, shader_name_from_path

source = "#type vertex\nvoid main() {}\n#type fragment\nvoid main() {}\n"
stages = preprocess_shader_source(source)   # {ShaderType.VERTEX: ..., ShaderType.FRAGMENT: ...}
print(shader_name_from_path("assets/shaders/Texture.glsl"))   # Texture
```

### Rendering a batch

```python
import numpy as np
from quadforge.renderer2d import RecordingRendererAPI, Renderer2D

api = RecordingRendererAPI()
renderer = Renderer2D(api)

renderer.begin_scene(np.identity(4))
renderer.draw_quad((0.0, 0.0), (1.0, 1.0), (1.0, 0.2, 0.2, 1.0))
renderer.draw_rotated_quad((2.0, 0.0), (1.0, 1.0), 0.5, (0.2, 1.0, 0.2, 1.0))
renderer.end_scene()

print(renderer.stats.quad_count, renderer.stats.draw_calls)   # 2 1
vertices, index_count = api.draws[-1]
print(len(vertices), index_count)                             # 8 12
```

### Scenes and YAML

```python
from quadforge.scene import Scene, SpriteRendererComponent
from quadforge.serializer import SceneSerializer

scene = Scene()
player = scene.create_entity("Player")
player.add_component(SpriteRendererComponent(color=(0.2, 0.4, 1.0, 1.0)))

SceneSerializer(scene).serialize("level.yaml")

restored = Scene()
SceneSerializer(restored).deserialize("level.yaml")
print([e.get_component(type(player.get_component(SpriteRendererComponent))).color
       for e in restored.entities()])
```

## What it does not do

- **No window and no GPU.** `RendererAPI` is only an interface, and the one backend
  provided is `RecordingRendererAPI`. It records clear colours, viewports and the
  vertex lists passed to `draw_indexed`, and nothing more. Putting pixels on a screen
  needs a `RendererAPI` of your own.
- **No shader compilation.** `Shader` keeps sources and uniform values. It does not
  compile or link anything.
- **No live input.** Input comes from whatever `InputBackend` is installed. `StateInput`
  only knows what you tell it.
- **Partial scene files.** `SceneSerializer` writes tags, transforms, camera settings
  and sprite colours, but not sprite textures. Every entity is written with the same
  fixed `Entity` number. Loading adds new entities to the scene and does not replace
  existing ones.
- **No physics or scripting.** Scenes have no physics simulation and no per-entity
  scripts.

## Running the tests

```
pip install "quadforge[test]"
pytest
```