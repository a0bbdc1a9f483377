# ggml_probe/model_formats/ggml/ggml_containers.py
"""
GGML container variants (ggml/ggmf/ggjt/ggla) and magic resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, ClassVar, Dict, FrozenSet, Type, Union

from loguru import logger

from .ggml import (
    FILE_MAGIC_GGJT,
    FILE_MAGIC_GGLA,
    FILE_MAGIC_GGMF,
    FILE_MAGIC_GGML,
    FormatError,
    VersionError,
    read_u32,
)


@dataclass(frozen=True)
class ContainerGGML:
    """Legacy unversioned container; nothing follows the magic."""

    NAME: ClassVar[str] = "ggml"

    def name(self) -> str:
        return self.NAME

    @classmethod
    def decode(cls, stream: BinaryIO) -> "ContainerGGML":
        return cls()


@dataclass(frozen=True)
class _VersionedContainer:
    NAME: ClassVar[str] = ""
    ACCEPTED_VERSIONS: ClassVar[FrozenSet[int]] = frozenset()

    version: int

    def name(self) -> str:
        return self.NAME

    @classmethod
    def decode(cls, stream: BinaryIO):
        version = read_u32(stream)
        if version not in cls.ACCEPTED_VERSIONS:
            raise VersionError("invalid version", version=version, container=cls.NAME)
        return cls(version=version)


@dataclass(frozen=True)
class ContainerGGMF(_VersionedContainer):
    NAME: ClassVar[str] = "ggmf"
    ACCEPTED_VERSIONS: ClassVar[FrozenSet[int]] = frozenset({1})


@dataclass(frozen=True)
class ContainerGGJT(_VersionedContainer):
    NAME: ClassVar[str] = "ggjt"
    ACCEPTED_VERSIONS: ClassVar[FrozenSet[int]] = frozenset({1, 2, 3})


@dataclass(frozen=True)
class ContainerGGLA(_VersionedContainer):
    """LoRA adapter container."""

    NAME: ClassVar[str] = "ggla"
    ACCEPTED_VERSIONS: ClassVar[FrozenSet[int]] = frozenset({1})


Container = Union[ContainerGGML, ContainerGGMF, ContainerGGJT, ContainerGGLA]

# The full, closed set of containers. A magic missing here is not a GGML file.
CONTAINER_VARIANTS: Dict[int, Type[Container]] = {
    FILE_MAGIC_GGML: ContainerGGML,
    FILE_MAGIC_GGMF: ContainerGGMF,
    FILE_MAGIC_GGJT: ContainerGGJT,
    FILE_MAGIC_GGLA: ContainerGGLA,
}


def resolve_magic(magic: int) -> Type[Container]:
    """Select the container variant for a magic value."""
    try:
        variant = CONTAINER_VARIANTS[magic]
    except KeyError:
        raise FormatError("invalid file magic") from None
    logger.debug("magic {magic:#010x} -> {name}", magic=magic, name=variant.NAME)
    return variant


def read_magic(stream: BinaryIO) -> int:
    """Read the 4-byte little-endian magic."""
    return read_u32(stream)
