"""
scene_bitmap.py - typed scene frame buffer and its four precomputed rotations

WHAT THIS MODULE PROVIDES
-------------------------
- SceneBitmap
    A flat uint8 buffer laid out as
        [ 54-byte BMP-style header | height x width x 3 interleaved B,G,R ]
    with structured views (header, pixels, stride) on top, so sampling,
    rotation and raw overwrite all work on the same storage.
- SceneRotationTable
    0 / 90 / 180 / 270 degree copies of the canonical bitmap, built once.
    The rotated copies are read-only permutations of the canonical samples.
- scene_rotation_degrees()
    Combines screen rotation and sensor mounting into the scene rotation to
    read from (front-facing optics mirror the sensor orientation).

LEARNING NOTES
--------------
- All four buffers have the same byte length: a 90 degree rotation swaps
  width and height but keeps width*height*3.
- np.rot90 rotates counter-clockwise in array (row, col) coordinates; seen on
  a screen whose y axis points down this is the sensor's clockwise turn.
- rot90 applied twice equals rot180; rot90 followed by rot270 is identity.
"""

from __future__ import annotations
import logging
from pathlib import Path
import struct
from typing import Dict, Tuple

import numpy as np

logger = logging.getLogger(__name__)

HEADER_SIZE = 54         # BMP file + info header
BYTES_PER_PIXEL = 3      # B, G, R
SUPPORTED_ROTATIONS = (0, 90, 180, 270)


# -----------------------------------------------------------------------------
# Typed image buffer
# -----------------------------------------------------------------------------
class SceneBitmap:
    """
    One orientation of the scene.

    Parameters
    ----------
    width, height : int
        Geometry in pixels.
    data : ndarray | None
        Flat uint8 buffer of ``HEADER_SIZE + width*height*3`` bytes. A zeroed
        buffer is allocated when omitted.
    """

    def __init__(self, width: int, height: int, data: np.ndarray | None = None) -> None:
        self.width = int(width)
        self.height = int(height)
        size = HEADER_SIZE + self.width * self.height * BYTES_PER_PIXEL
        if data is None:
            data = np.zeros(size, dtype=np.uint8)
        data = np.asarray(data, dtype=np.uint8).reshape(-1)
        if data.size != size:
            raise ValueError(
                f"scene buffer holds {data.size} bytes, expected {size} for {self.width}x{self.height}"
            )
        self.data = data

    # --- constructors --------------------------------------------------------
    @classmethod
    def blank(cls, width: int, height: int) -> "SceneBitmap":
        return cls(width, height)

    @classmethod
    def from_bytes(cls, raw: bytes, width: int, height: int) -> "SceneBitmap":
        """Wrap a complete raw buffer (header included). Size must match exactly."""
        return cls(width, height, np.frombuffer(bytes(raw), dtype=np.uint8).copy())

    @classmethod
    def from_pixels(cls, pixels: np.ndarray, header: bytes | None = None) -> "SceneBitmap":
        """
        Build from an (H, W, 3) uint8 array of B, G, R samples.

        When no header is given a minimal 24-bit BMP header is written.
        """
        pixels = np.asarray(pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] != BYTES_PER_PIXEL:
            raise ValueError(f"expected (H, W, 3) pixels, got shape {pixels.shape}")
        h, w = pixels.shape[:2]
        bmp = cls(w, h)
        bmp.header[:] = np.frombuffer(header if header is not None else _bmp_header(w, h),
                                      dtype=np.uint8, count=HEADER_SIZE)
        bmp.pixels[:] = pixels
        return bmp

    @classmethod
    def from_bmp_file(cls, path: str | Path) -> "SceneBitmap":
        """
        Load an uncompressed 24-bit BMP whose rows need no padding.

        Rows are kept in file order (raw passthrough, no vertical flip).
        """
        raw = Path(path).read_bytes()
        if len(raw) < HEADER_SIZE or raw[:2] != b"BM":
            raise ValueError(f"{path}: not a BMP file")
        offset, = struct.unpack_from("<I", raw, 10)
        width, height = struct.unpack_from("<ii", raw, 18)
        bpp, = struct.unpack_from("<H", raw, 28)
        if bpp != 24 or offset != HEADER_SIZE:
            raise ValueError(f"{path}: only 24-bit BMPs with a {HEADER_SIZE}-byte header are supported")
        height = abs(height)
        if (width * BYTES_PER_PIXEL) % 4:
            raise ValueError(f"{path}: padded BMP rows are not supported (width={width})")
        return cls.from_bytes(raw[:HEADER_SIZE + width * height * BYTES_PER_PIXEL], width, height)

    # --- structured views ----------------------------------------------------
    @property
    def nbytes(self) -> int:
        return int(self.data.size)

    @property
    def stride(self) -> int:
        """Bytes per pixel row."""
        return self.width * BYTES_PER_PIXEL

    @property
    def header(self) -> np.ndarray:
        return self.data[:HEADER_SIZE]

    @property
    def pixels(self) -> np.ndarray:
        """(height, width, 3) view of the B, G, R samples."""
        return self.data[HEADER_SIZE:].reshape(self.height, self.width, BYTES_PER_PIXEL)

    @property
    def writeable(self) -> bool:
        return bool(self.data.flags.writeable)

    def freeze(self) -> "SceneBitmap":
        self.data.setflags(write=False)
        return self

    def copy(self) -> "SceneBitmap":
        return SceneBitmap(self.width, self.height, self.data.copy())

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    # --- sampling / overwrite ------------------------------------------------
    def sample(self, x: int, y: int) -> Tuple[int, int, int]:
        """Return the (B, G, R) bytes at column ``x``, row ``y``. No bounds check beyond numpy's."""
        b, g, r = self.pixels[y, x]
        return int(b), int(g), int(r)

    def overwrite(self, raw: bytes) -> int:
        """
        Copy raw bytes over the buffer, starting at the header.

        Only ``min(len(raw), nbytes)`` bytes are written; the rest of the
        buffer keeps its previous contents.

        Returns
        -------
        count : number of bytes written
        """
        count = min(len(raw), self.nbytes)
        if count:
            self.data[:count] = np.frombuffer(raw, dtype=np.uint8, count=count)
        return count

    def rotated(self, quarter_turns: int) -> "SceneBitmap":
        """New read-only bitmap rotated by ``quarter_turns`` x 90 degrees (np.rot90 sense)."""
        pixels = np.ascontiguousarray(np.rot90(self.pixels, k=quarter_turns))
        header = bytearray(self.header.tobytes())
        # BMP info header: width, height at byte 18
        struct.pack_into("<ii", header, 18, pixels.shape[1], pixels.shape[0])
        return SceneBitmap.from_pixels(pixels, header=bytes(header)).freeze()

    def __repr__(self) -> str:
        return f"SceneBitmap(width={self.width}, height={self.height}, nbytes={self.nbytes})"


def _bmp_header(width: int, height: int) -> bytes:
    image_size = width * height * BYTES_PER_PIXEL
    file_header = struct.pack("<2sIHHI", b"BM", HEADER_SIZE + image_size, 0, 0, HEADER_SIZE)
    info_header = struct.pack("<IiiHHIIiiII", 40, width, height, 1, 24, 0, image_size, 2835, 2835, 0, 0)
    return file_header + info_header


# -----------------------------------------------------------------------------
# Rotation table
# -----------------------------------------------------------------------------
def scene_rotation_degrees(screen_rotation: int, sensor_orientation: int, is_front_facing: bool) -> int:
    """
    Scene rotation to read from.

    Front-facing cameras look through mirrored optics, so their sensor
    orientation enters with the opposite sign.
    """
    orientation = -sensor_orientation if is_front_facing else sensor_orientation
    return ((int(screen_rotation) + 360) + int(orientation)) % 360


class SceneRotationTable:
    """
    Four orientations of one canonical bitmap, precomputed at construction.

    Parameters
    ----------
    canonical : SceneBitmap
        0 degree scene. A read-only snapshot is kept for the 0 degree entry.
    clockwise : bool
        Direction of the 90 degree turn (back-facing cameras turn clockwise).
    """

    def __init__(self, canonical: SceneBitmap, clockwise: bool = True) -> None:
        self.clockwise = bool(clockwise)
        quarter = 1 if self.clockwise else -1
        self._tables: Dict[int, SceneBitmap] = {
            0: canonical.copy().freeze(),
            90: canonical.rotated(quarter),
            180: canonical.rotated(2),
            270: canonical.rotated(-quarter),
        }
        logger.debug("Scene rotation tables built (%dx%d, clockwise=%s)",
                     canonical.width, canonical.height, self.clockwise)

    def __getitem__(self, degrees: int) -> SceneBitmap:
        return self._tables[degrees]

    def select(self, degrees: int) -> SceneBitmap:
        """Bitmap for ``degrees``; anything but 0/90/180/270 falls back to 0."""
        return self._tables.get(int(degrees), self._tables[0])
