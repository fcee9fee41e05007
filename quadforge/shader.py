"""Shader sources split by stage, uniform values, and a named shader library."""

from __future__ import annotations

import re
from enum import Enum
from os import PathLike
from typing import Iterable, Sequence

import numpy as np

__all__ = [
    "ShaderError",
    "ShaderType",
    "shader_type_from_string",
    "preprocess_shader_source",
    "shader_name_from_path",
    "Shader",
    "ShaderLibrary",
]

_TYPE_TOKEN = "#type"
_LINE_BREAK = re.compile(r"[\r\n]")
_NOT_LINE_BREAK = re.compile(r"[^\r\n]")


class ShaderError(Exception):
    """Raised for malformed shader sources and shader library misuse."""


class ShaderType(Enum):
    """Pipeline stage a shader source belongs to."""

    VERTEX = "vertex"
    FRAGMENT = "fragment"


def shader_type_from_string(name: str) -> ShaderType:
    """Map a '#type' specifier to its stage; 'pixel' is an alias for fragment."""
    if name == "vertex":
        return ShaderType.VERTEX
    if name in ("fragment", "pixel"):
        return ShaderType.FRAGMENT
    raise ShaderError(f"Unknown shader type: {name!r}")


def preprocess_shader_source(source: str) -> dict[ShaderType, str]:
    """Split a combined source into stages marked by '#type <stage>' lines."""
    sources: dict[ShaderType, str] = {}
    pos = source.find(_TYPE_TOKEN)
    while pos != -1:
        eol_match = _LINE_BREAK.search(source, pos)
        if eol_match is None:
            raise ShaderError("Syntax Error! '#type' line is not terminated")
        eol = eol_match.start()
        begin = pos + len(_TYPE_TOKEN) + 1
        stage = shader_type_from_string(source[begin:eol])

        body_match = _NOT_LINE_BREAK.search(source, eol)
        if body_match is None:
            raise ShaderError(f"no source follows the {stage.value} type specifier")
        body_start = body_match.start()
        pos = source.find(_TYPE_TOKEN, body_start)
        sources[stage] = source[body_start:] if pos == -1 else source[body_start:pos]
    return sources


def shader_name_from_path(filepath: str | PathLike[str]) -> str:
    """File name without directory and last extension, e.g. 'a/Texture.glsl' -> 'Texture'."""
    path = str(filepath)
    last_slash = max(path.rfind("/"), path.rfind("\\"))
    start = last_slash + 1 if last_slash != -1 else 0
    last_dot = path.rfind(".")
    if last_dot == -1 or last_dot < start:
        return path[start:]
    return path[start:last_dot]


class Shader:
    """A shader program's stage sources and the uniform values set on it."""

    def __init__(self, name: str, vertex_src: str, fragment_src: str) -> None:
        self.name = name
        self.filepath: str | None = None
        self.sources: dict[ShaderType, str] = {
            ShaderType.VERTEX: vertex_src,
            ShaderType.FRAGMENT: fragment_src,
        }
        self.uniforms: dict[str, object] = {}

    @classmethod
    def from_file(cls, filepath: str | PathLike[str]) -> Shader:
        """Load a combined '#type'-sectioned source file; the name comes from the path."""
        try:
            with open(filepath, "rb") as handle:
                text = handle.read().decode("utf-8")
        except OSError as exc:
            raise ShaderError(f"Could not open filepath: {filepath}") from exc
        sources = preprocess_shader_source(text)
        shader = cls(
            shader_name_from_path(filepath),
            sources.get(ShaderType.VERTEX, ""),
            sources.get(ShaderType.FRAGMENT, ""),
        )
        shader.sources = dict(sources)
        shader.filepath = str(filepath)
        return shader

    def set_int(self, name: str, value: int) -> None:
        self.uniforms[name] = int(value)

    def set_int_array(self, name: str, values: Iterable[int]) -> None:
        self.uniforms[name] = tuple(int(v) for v in values)

    def set_float(self, name: str, value: float) -> None:
        self.uniforms[name] = float(value)

    def set_float3(self, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = _float_tuple(value, 3)

    def set_float4(self, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = _float_tuple(value, 4)

    def set_mat4(self, name: str, value: Sequence[Sequence[float]] | np.ndarray) -> None:
        matrix = np.array(value, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
        self.uniforms[name] = matrix


def _float_tuple(value: Sequence[float], size: int) -> tuple[float, ...]:
    result = tuple(float(v) for v in value)
    if len(result) != size:
        raise ValueError(f"expected {size} components, got {len(result)}")
    return result


class ShaderLibrary:
    """Shaders stored by name."""

    def __init__(self) -> None:
        self._shaders: dict[str, Shader] = {}

    def add(self, shader: Shader, name: str | None = None) -> None:
        """Store shader under name, or under its own name when none is given."""
        key = shader.name if name is None else name
        if self.exists(key):
            raise ShaderError(f"Shader already exists: {key!r}")
        self._shaders[key] = shader

    def load(self, filepath: str | PathLike[str], name: str | None = None) -> Shader:
        shader = Shader.from_file(filepath)
        self.add(shader, name)
        return shader

    def get(self, name: str) -> Shader:
        try:
            return self._shaders[name]
        except KeyError:
            raise ShaderError(f"Shader not found: {name!r}") from None

    def exists(self, name: str) -> bool:
        return name in self._shaders

    def __contains__(self, name: object) -> bool:
        return name in self._shaders

    def __len__(self) -> int:
        return len(self._shaders)