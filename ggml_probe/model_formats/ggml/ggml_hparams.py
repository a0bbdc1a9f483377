# ggml_probe/model_formats/ggml/ggml_hparams.py
"""
Architecture-specific hyperparameter records and the hint registry.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, Union

from .ggml import DispatchError, read_exact
from .ggml_filetype import to_signed32


@dataclass(frozen=True)
class LlamaHyperparameters:
    """LLaMA hyperparameter record: seven little-endian u32 fields."""

    n_vocab: int
    n_embd: int
    n_mult: int
    n_head: int
    n_layer: int
    n_rot: int
    file_type: int

    LAYOUT = struct.Struct("<7I")

    @property
    def num_vocab(self) -> int:
        return self.n_vocab

    @property
    def quant_code(self) -> int:
        return to_signed32(self.file_type)


HyperparameterRecord = Union[LlamaHyperparameters]


def read_llama(stream: BinaryIO) -> LlamaHyperparameters:
    raw = read_exact(stream, LlamaHyperparameters.LAYOUT.size)
    return LlamaHyperparameters(*LlamaHyperparameters.LAYOUT.unpack(raw))


# Keyed by architecture hint. One entry per supported layout.
HYPERPARAMETER_READERS: Dict[str, Callable[[BinaryIO], HyperparameterRecord]] = {
    "llama": read_llama,
}


def read_hyperparameters(hint: str, stream: BinaryIO) -> HyperparameterRecord:
    """Decode the hyperparameter record registered for ``hint``.

    Raises:
        DispatchError: ``hint`` has no registered layout. Nothing is read.
    """
    reader = HYPERPARAMETER_READERS.get(hint)
    if reader is None:
        raise DispatchError(f"unsupported model type: {hint}")
    return reader(stream)
