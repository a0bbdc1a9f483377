# ggml_probe/config.py
"""
Backend options passed through the model factory to a backend constructor.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import List, Mapping, Optional

ENV_LLAMA_CLI = "GGPROBE_LLAMA_CLI"
ENV_NUM_CTX = "GGPROBE_NUM_CTX"
ENV_NUM_THREADS = "GGPROBE_NUM_THREADS"


@dataclass(frozen=True)
class BackendOptions:
    """Runtime options for an inference backend. Opaque to the header decoder."""

    llama_cli: str = "llama-cli"
    num_ctx: int = 2048
    num_predict: int = 128
    num_threads: Optional[int] = None
    temperature: float = 0.8
    top_p: float = 0.9
    top_k: Optional[int] = 40
    repeat_penalty: float = 1.1
    seed: Optional[int] = None
    extra_args: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> "BackendOptions":
        """Build options from defaults, then environment, then ``overrides``."""
        env = os.environ if env is None else env
        opts = cls()
        if env.get(ENV_LLAMA_CLI):
            opts = replace(opts, llama_cli=env[ENV_LLAMA_CLI])
        if env.get(ENV_NUM_CTX):
            opts = replace(opts, num_ctx=int(env[ENV_NUM_CTX]))
        if env.get(ENV_NUM_THREADS):
            opts = replace(opts, num_threads=int(env[ENV_NUM_THREADS]))
        return replace(opts, **{k: v for k, v in overrides.items() if v is not None})
