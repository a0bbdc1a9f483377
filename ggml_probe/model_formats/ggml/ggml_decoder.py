# ggml_probe/model_formats/ggml/ggml_decoder.py
"""
Sequential, fail-fast decode of a GGML header:

magic -> container variant -> container version -> hyperparameters -> model type
"""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO

from loguru import logger

from .ggml import GGMLError, ModelDescriptor
from .ggml_containers import read_magic, resolve_magic
from .ggml_hparams import read_hyperparameters


class DecodeState(str, Enum):
    """Last step the orchestrator completed."""

    START = "start"
    MAGIC_READ = "magic_read"
    CONTAINER_DECODED = "container_decoded"
    HYPERPARAMETERS_DECODED = "hyperparameters_decoded"


def decode_ggml(stream: BinaryIO, hint: str) -> ModelDescriptor:
    """Decode the header at the current position of ``stream``.

    Args:
        stream: Binary stream positioned at the magic.
        hint: Architecture name selecting the hyperparameter layout.

    Returns:
        The fully populated descriptor.

    Raises:
        FormatError: Unknown magic, or the stream ended inside a field.
        VersionError: Container version outside its accepted set.
        DispatchError: No hyperparameter layout for ``hint``.
        BlockingIOError: A non-blocking stream had no data ready.
    """
    state = DecodeState.START
    try:
        magic = read_magic(stream)
        state = DecodeState.MAGIC_READ
        logger.debug("{state}: {magic:#010x}", state=state.value, magic=magic)

        container = resolve_magic(magic).decode(stream)
        state = DecodeState.CONTAINER_DECODED
        logger.debug(
            "{state}: {name} version={version}",
            state=state.value,
            name=container.name(),
            version=getattr(container, "version", None),
        )

        # different model types may lay out their hyperparameters differently
        hparams = read_hyperparameters(hint, stream)
        state = DecodeState.HYPERPARAMETERS_DECODED
        logger.debug("{state}: {hint} {hparams}", state=state.value, hint=hint, hparams=hparams)
    except GGMLError as e:
        logger.debug("decode aborted after {state}: {error}", state=state.value, error=e)
        raise

    return ModelDescriptor(
        model_type=hint,
        magic=magic,
        container=container,
        hyperparameters=hparams,
        num_vocab=hparams.num_vocab,
        file_type=hparams.quant_code,
    )
