"""Shared type definitions for the colorization pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Sequence, Tuple, Type, TypeVar

import numpy as np

from bw_colorization.errors import DecodeError

T = TypeVar("T", bound="ChannelTensor")


@dataclass(frozen=True, eq=False)
class ChannelTensor:
    """Read-only float32 tensor with logical shape ``[1, C, H, W]``.

    The buffer is copied on construction, so callers keep ownership of the
    array they passed in and no stage can write through a tensor.
    """

    data: np.ndarray
    channels: ClassVar[int] = 1

    def __post_init__(self) -> None:
        data = np.array(self.data, dtype=np.float32, copy=True)
        if data.ndim == 3:
            data = data[None]
        elif data.ndim == 2 and self.channels == 1:
            data = data[None, None]
        if data.ndim != 4:
            raise ValueError(
                f"{type(self).__name__} expects a rank-4 [1, C, H, W] array, got shape {data.shape}."
            )
        batch, channels, height, width = data.shape
        if batch != 1:
            raise ValueError(f"Batch size must be 1, got {batch}.")
        if channels != self.channels:
            raise ValueError(
                f"{type(self).__name__} expects {self.channels} channel(s), got {channels}."
            )
        if height <= 0 or width <= 0:
            raise ValueError(f"Spatial dimensions must be positive, got {height}x{width}.")
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    @classmethod
    def from_flat(cls: Type[T], values: Sequence[float], height: int, width: int) -> T:
        """Build a tensor from a flat channel-major buffer."""

        flat = np.asarray(values, dtype=np.float32).ravel()
        expected = cls.channels * height * width
        if height <= 0 or width <= 0 or flat.size != expected:
            raise ValueError(
                f"Flat buffer of {flat.size} values does not fit [1, {cls.channels}, {height}, {width}]."
            )
        return cls(flat.reshape(1, cls.channels, height, width))

    @property
    def shape(self) -> Tuple[int, int, int, int]:
        return self.data.shape

    @property
    def height(self) -> int:
        return self.data.shape[2]

    @property
    def width(self) -> int:
        return self.data.shape[3]

    @property
    def spatial_shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def at(self, channel: int, y: int, x: int) -> float:
        """Return one element, rejecting out-of-range coordinates."""

        for name, index, bound in (
            ("channel", channel, self.channels),
            ("y", y, self.height),
            ("x", x, self.width),
        ):
            if not 0 <= index < bound:
                raise IndexError(f"{name}={index} is outside [0, {bound}).")
        return float(self.data[0, channel, y, x])

    def channel(self, index: int) -> np.ndarray:
        """Return a read-only ``(H, W)`` view of one channel."""

        if not 0 <= index < self.channels:
            raise IndexError(f"channel={index} is outside [0, {self.channels}).")
        return self.data[0, index]

    def numpy(self) -> np.ndarray:
        """Return the read-only ``[1, C, H, W]`` buffer."""

        return self.data

    def flat(self) -> np.ndarray:
        return self.data.ravel().copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChannelTensor) or type(other) is not type(self):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.data, other.data))


class LuminanceTensor(ChannelTensor):
    """CIE L channel, logical shape ``[1, 1, H, W]``, values in [0, 100]."""

    channels: ClassVar[int] = 1


class ChrominanceTensor(ChannelTensor):
    """CIE a/b channels, logical shape ``[1, 2, H, W]``."""

    channels: ClassVar[int] = 2

    @property
    def a(self) -> np.ndarray:
        return self.channel(0)

    @property
    def b(self) -> np.ndarray:
        return self.channel(1)


@dataclass(frozen=True, eq=False)
class RGBABitmap:
    """8-bit RGBA raster stored as an ``(H, W, 4)`` uint8 array."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray) or pixels.dtype != np.uint8:
            raise ValueError("RGBABitmap pixels must be a uint8 numpy array.")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"RGBABitmap expects shape (H, W, 4), got {pixels.shape}.")
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise ValueError(f"RGBABitmap must be non-empty, got {pixels.shape[:2]}.")

    @classmethod
    def from_array(cls, image: np.ndarray) -> "RGBABitmap":
        """Rasterize a grayscale, RGB or RGBA uint8 array into RGBA.

        Raises:
            DecodeError: If ``image`` cannot be interpreted as 8-bit pixels.
        """

        if isinstance(image, RGBABitmap):
            return image
        if not isinstance(image, np.ndarray):
            raise DecodeError(f"Expected a numpy array, got {type(image).__name__}.")
        if image.dtype != np.uint8:
            raise DecodeError(f"Expected uint8 pixels, got {image.dtype}.")
        if image.size == 0:
            raise DecodeError("Image has no pixels.")
        if image.ndim == 2:
            image = image[..., None]
        if image.ndim != 3 or image.shape[2] not in (1, 3, 4):
            raise DecodeError(f"Unsupported image shape {image.shape}.")

        height, width, channels = image.shape
        pixels = np.full((height, width, 4), 255, dtype=np.uint8)
        if channels == 1:
            pixels[..., :3] = image
        else:
            pixels[..., :channels] = image
        return cls(pixels)

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def size(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def row_bytes(self) -> int:
        return self.width * 4

    def rgb(self) -> np.ndarray:
        """Return the RGB channels as an ``(H, W, 3)`` view."""

        return self.pixels[..., :3]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RGBABitmap):
            return NotImplemented
        return bool(np.array_equal(self.pixels, other.pixels))
