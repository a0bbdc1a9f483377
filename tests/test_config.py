from __future__ import annotations

from ggml_probe.config import BackendOptions


def test_defaults() -> None:
    opts = BackendOptions.from_env({})
    assert opts == BackendOptions()
    assert opts.llama_cli == "llama-cli"


def test_environment_then_overrides() -> None:
    env = {
        "GGPROBE_LLAMA_CLI": "/opt/llama/main",
        "GGPROBE_NUM_CTX": "4096",
        "GGPROBE_NUM_THREADS": "8",
    }
    opts = BackendOptions.from_env(env, num_ctx=1024, seed=None)
    assert opts.llama_cli == "/opt/llama/main"
    assert opts.num_threads == 8
    assert opts.num_ctx == 1024
    assert opts.seed is None
