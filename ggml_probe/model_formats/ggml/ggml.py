# ggml_probe/model_formats/ggml/ggml.py
"""
GGML shared structures, exceptions and little-endian read helpers.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Optional

from ggml_probe.model_formats.ggml.ggml_filetype import file_type_label

if TYPE_CHECKING:
    from ggml_probe.model_formats.ggml.ggml_containers import Container
    from ggml_probe.model_formats.ggml.ggml_hparams import HyperparameterRecord

# Magic constants (u32, little-endian on disk)
FILE_MAGIC_GGML = 0x67676D6C  # unversioned
FILE_MAGIC_GGMF = 0x67676D66  # versioned, ggmf
FILE_MAGIC_GGJT = 0x67676A74  # versioned, ggjt (mmap-able)
FILE_MAGIC_GGLA = 0x67676C61  # LoRA adapter

_U32 = struct.Struct("<I")


class GGMLError(Exception):
    """Base class for GGML header decode failures."""

    stage = "decode"


class FormatError(GGMLError):
    """Raised when the file magic is not a known GGML container."""

    stage = "magic"


class TruncatedHeaderError(FormatError):
    """Raised when the stream ends inside a header field."""

    stage = "read"

    def __init__(self, wanted: int, got: int):
        super().__init__(f"unexpected end of header: wanted {wanted} bytes, got {got}")
        self.wanted = wanted
        self.got = got


class VersionError(GGMLError):
    """Raised when a container version is outside its accepted set."""

    stage = "container"

    def __init__(self, message: str, *, version: int, container: Optional[str] = None):
        super().__init__(message)
        self.version = version
        self.container = container

    def __str__(self) -> str:
        where = f" for {self.container}" if self.container else ""
        return f"{self.args[0]}{where}: {self.version}"


class DispatchError(GGMLError):
    """Raised for an unsupported architecture hint or model type."""

    stage = "dispatch"


def read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read exactly ``n`` bytes or raise :class:`TruncatedHeaderError`.

    Raw and unbuffered streams may return fewer bytes than asked for before
    EOF, so reads repeat until ``n`` bytes arrive or ``read`` returns ``b""``.

    Raises:
        TruncatedHeaderError: The stream hit EOF first.
        BlockingIOError: A non-blocking stream had no data ready.
    """
    buf = bytearray()
    while len(buf) < n:
        chunk = stream.read(n - len(buf))
        if chunk is None:
            raise BlockingIOError(f"stream not ready after {len(buf)} of {n} header bytes")
        if not chunk:
            raise TruncatedHeaderError(n, len(buf))
        buf += chunk
    return bytes(buf)


def read_u32(stream: BinaryIO) -> int:
    (v,) = _U32.unpack(read_exact(stream, _U32.size))
    return v


@dataclass(frozen=True)
class ModelDescriptor:
    """Fully decoded GGML header."""

    model_type: str
    magic: int
    container: "Container"
    hyperparameters: "HyperparameterRecord"
    # elevated from hyperparameters
    num_vocab: int
    file_type: int

    @property
    def file_type_name(self) -> str:
        return file_type_label(self.file_type)

    @property
    def version(self) -> Optional[int]:
        """Container version, ``None`` for the unversioned ggml container."""
        return getattr(self.container, "version", None)
