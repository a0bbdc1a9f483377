# ggml_probe/llm/factory.py
"""
Model factory: decode the header, then hand off to the matching backend.
"""
from __future__ import annotations

import os
from typing import Callable, Dict, Optional

from loguru import logger

from ggml_probe.config import BackendOptions
from ggml_probe.io.file_reader import LocalFileSource
from ggml_probe.llm.base import Model
from ggml_probe.llm.llama import LlamaModel
from ggml_probe.model_formats.ggml.ggml import DispatchError
from ggml_probe.model_formats.ggml.ggml_decoder import decode_ggml
from ggml_probe.observability import Timer

BackendConstructor = Callable[[str, BackendOptions], Model]

BACKENDS: Dict[str, BackendConstructor] = {
    "llama": LlamaModel,
}


def new_model(
    model_path: str, options: Optional[BackendOptions] = None, *, hint: str = "llama"
) -> Model:
    """Open ``model_path``, decode its header and construct the backend.

    Raises:
        FileNotFoundError: The file does not exist.
        PermissionError: The file is not readable.
        FormatError, VersionError, DispatchError: Header decode or dispatch failed.
    """
    if not os.path.exists(model_path):
        raise FileNotFoundError(2, "No such file or directory", model_path)
    if not os.access(model_path, os.R_OK):
        raise PermissionError(13, "Permission denied", model_path)

    options = options or BackendOptions()
    with Timer("decode_header") as t, LocalFileSource(model_path).open() as mf:
        ggml = decode_ggml(mf.reader(), hint)
    logger.debug(
        "Decoded {path}: {container} {ftype} vocab={vocab} in {ms:.2f}ms",
        path=model_path,
        container=ggml.container.name(),
        ftype=ggml.file_type_name,
        vocab=ggml.num_vocab,
        ms=t.duration_ms,
    )

    constructor = BACKENDS.get(ggml.model_type)
    if constructor is None:
        raise DispatchError(f"unknown ggml type: {ggml.model_type}")
    return constructor(model_path, options)
