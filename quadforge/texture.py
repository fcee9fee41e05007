"""CPU-side 2D textures loaded with Pillow, and sub-textures of sprite sheets."""

from __future__ import annotations

from os import PathLike
from typing import Sequence

from PIL import Image, ImageOps

__all__ = ["TextureError", "Texture2D", "SubTexture2D"]


class TextureError(Exception):
    """Raised when an image cannot be loaded or texture data does not fit."""


class Texture2D:
    """Pixel storage of a 2D texture; rows run bottom to top."""

    def __init__(self, width: int, height: int, channels: int = 4) -> None:
        if channels not in (3, 4):
            raise TextureError(f"unsupported channel count: {channels}")
        self.width = int(width)
        self.height = int(height)
        self.channels = channels
        self.filepath: str | None = None
        self.data = bytes(self.width * self.height * channels)

    @property
    def format(self) -> str:
        return "RGBA" if self.channels == 4 else "RGB"

    @classmethod
    def from_file(cls, filepath: str | PathLike[str]) -> Texture2D:
        """Load an RGB or RGBA image, flipped vertically so the first row is the bottom."""
        try:
            with Image.open(filepath) as image:
                image.load()
                if image.mode == "P":
                    has_alpha = "transparency" in image.info
                    image = image.convert("RGBA" if has_alpha else "RGB")
                if image.mode not in ("RGB", "RGBA"):
                    raise TextureError(f"unsupported image mode: {image.mode}")
                flipped = ImageOps.flip(image)
        except OSError as exc:
            raise TextureError(f"Failed to load image: {filepath}") from exc

        texture = cls(flipped.width, flipped.height, len(flipped.mode))
        texture.data = flipped.tobytes()
        texture.filepath = str(filepath)
        return texture

    def set_data(self, data: bytes | bytearray | memoryview) -> None:
        """Replace the whole pixel data; its size must match the texture exactly."""
        payload = bytes(data)
        expected = self.width * self.height * self.channels
        if len(payload) != expected:
            raise TextureError(
                f"Data must be an entire texture: expected {expected} bytes, got {len(payload)}"
            )
        self.data = payload


class SubTexture2D:
    """A rectangular region of a texture, given by its four texture coordinates."""

    def __init__(
        self,
        texture: Texture2D,
        min_coord: Sequence[float],
        max_coord: Sequence[float],
    ) -> None:
        self.texture = texture
        min_x, min_y = (float(v) for v in min_coord)
        max_x, max_y = (float(v) for v in max_coord)
        self.tex_coords: tuple[tuple[float, float], ...] = (
            (min_x, min_y),
            (max_x, min_y),
            (max_x, max_y),
            (min_x, max_y),
        )

    @classmethod
    def create_from_coords(
        cls,
        texture: Texture2D,
        coords: Sequence[float],
        sprite_size: Sequence[float],
        sprite_size_offset: Sequence[float] = (1.0, 1.0),
    ) -> SubTexture2D:
        """Region of a sprite sheet from cell coordinates, cell size and size in cells."""
        cx, cy = (float(v) for v in coords)
        sw, sh = (float(v) for v in sprite_size)
        ox, oy = (float(v) for v in sprite_size_offset)
        min_coord = ((cx * sw) / texture.width, (cy * sh) / texture.height)
        max_coord = (((cx + ox) * sw) / texture.width, ((cy + oy) * sh) / texture.height)
        return cls(texture, min_coord, max_coord)