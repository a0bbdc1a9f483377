"""Shared fixtures: synthetic GGML headers on disk and in memory."""

from __future__ import annotations

import struct
from typing import Optional, Sequence

import pytest
from loguru import logger

GGML = 0x67676D6C
GGMF = 0x67676D66
GGJT = 0x67676A74
GGLA = 0x67676C61

# n_vocab, n_embd, n_mult, n_head, n_layer, n_rot, file_type
LLAMA_7B_Q4_0 = (32000, 4096, 256, 32, 32, 128, 2)


def pack_header(
    magic: int,
    version: Optional[int] = None,
    hparams: Optional[Sequence[int]] = LLAMA_7B_Q4_0,
    trailer: bytes = b"",
) -> bytes:
    out = struct.pack("<I", magic)
    if version is not None:
        out += struct.pack("<I", version)
    if hparams is not None:
        out += struct.pack("<7I", *hparams)
    return out + trailer


@pytest.fixture
def header():
    return pack_header


@pytest.fixture
def model_file(tmp_path):
    def _write(data: bytes, name: str = "ggml-model.bin") -> str:
        p = tmp_path / name
        p.write_bytes(data)
        return str(p)

    return _write


@pytest.fixture
def reset_logging():
    yield
    logger.remove()
