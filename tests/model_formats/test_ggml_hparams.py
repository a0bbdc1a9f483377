from __future__ import annotations

import io
import struct

import pytest

from ggml_probe.model_formats.ggml.ggml import DispatchError, TruncatedHeaderError
from ggml_probe.model_formats.ggml.ggml_hparams import (
    HYPERPARAMETER_READERS,
    LlamaHyperparameters,
    read_hyperparameters,
)


def test_llama_record_is_seven_u32_fields() -> None:
    assert LlamaHyperparameters.LAYOUT.size == 28
    assert "llama" in HYPERPARAMETER_READERS


def test_llama_record_elevates_vocab_and_quant_code() -> None:
    raw = struct.pack("<7I", 32000, 5120, 256, 40, 40, 128, 8)
    stream = io.BytesIO(raw + b"tensor data")
    hp = read_hyperparameters("llama", stream)
    assert isinstance(hp, LlamaHyperparameters)
    assert hp.num_vocab == 32000
    assert hp.quant_code == 8
    assert (hp.n_embd, hp.n_head, hp.n_layer, hp.n_rot) == (5120, 40, 40, 128)
    assert stream.tell() == 28


def test_llama_unknown_sentinel_is_signed() -> None:
    raw = struct.pack("<7I", 1, 1, 1, 1, 1, 1, 0xFFFFFFFF)
    hp = read_hyperparameters("llama", io.BytesIO(raw))
    assert hp.file_type == 0xFFFFFFFF
    assert hp.quant_code == -1


@pytest.mark.parametrize("hint", ["gpt2", "", "LLAMA", "falcon"])
def test_unregistered_hint_fails_without_reading(hint: str) -> None:
    stream = io.BytesIO(b"\x00" * 64)
    with pytest.raises(DispatchError) as exc:
        read_hyperparameters(hint, stream)
    assert str(exc.value) == f"unsupported model type: {hint}"
    assert stream.tell() == 0


def test_partial_record_is_rejected() -> None:
    stream = io.BytesIO(struct.pack("<5I", 1, 2, 3, 4, 5))
    with pytest.raises(TruncatedHeaderError):
        read_hyperparameters("llama", stream)


def test_registering_a_layout_extends_dispatch(monkeypatch) -> None:
    def read_tiny(stream):
        (n_vocab,) = struct.unpack("<I", stream.read(4))
        return LlamaHyperparameters(n_vocab, 0, 0, 0, 0, 0, 0)

    monkeypatch.setitem(HYPERPARAMETER_READERS, "tiny", read_tiny)
    hp = read_hyperparameters("tiny", io.BytesIO(struct.pack("<I", 7)))
    assert hp.num_vocab == 7
