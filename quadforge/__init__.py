"""Core of a small 2D scene engine: key codes, input polling, events, cameras, shaders, textures, a batching quad renderer, scenes and YAML scene files."""

__version__ = "0.1.0"