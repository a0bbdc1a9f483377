# ggml_probe/llm/llama.py
"""
LLaMA backend driving the llama.cpp command-line binary.
"""
from __future__ import annotations

import codecs
import shutil
import subprocess
import tempfile
from typing import List, Optional, Sequence

from loguru import logger

from ggml_probe.config import BackendOptions
from ggml_probe.llm.base import BackendError, Model, PartialResult, TokenCallback

_CHUNK = 4096


def build_llama_cli_args(model_path: str, prompt: str, opts: BackendOptions) -> List[str]:
    args = [
        "-m",
        model_path,
        "-p",
        prompt,
        "-n",
        str(int(opts.num_predict)),
        "-c",
        str(int(opts.num_ctx)),
        "--temp",
        str(float(opts.temperature)),
        "--top-p",
        str(float(opts.top_p)),
        "--repeat-penalty",
        str(float(opts.repeat_penalty)),
        "--no-display-prompt",
    ]
    if opts.top_k is not None:
        args += ["--top-k", str(int(opts.top_k))]
    if opts.seed is not None:
        args += ["-s", str(int(opts.seed))]
    if opts.num_threads is not None:
        args += ["-t", str(int(opts.num_threads))]
    return args + list(opts.extra_args)


class LlamaModel(Model):
    """A GGML LLaMA model served by llama.cpp."""

    def __init__(self, model_path: str, options: BackendOptions):
        executable = shutil.which(options.llama_cli)
        if executable is None:
            raise BackendError(f"llama.cpp binary not found: {options.llama_cli}")
        self.model_path = model_path
        self.options = options
        self.executable = executable
        self._proc: Optional[subprocess.Popen] = None
        self._closed = False

    def predict(self, tokens: Sequence[int], prompt: str, on_token: TokenCallback) -> None:
        if self._closed:
            raise BackendError("model is closed")
        cmd = [self.executable] + build_llama_cli_args(self.model_path, prompt, self.options)
        logger.debug("Starting llama.cpp: {cmd}", cmd=cmd[0])

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        with tempfile.TemporaryFile() as err:
            self._proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=err)
            try:
                while True:
                    chunk = self._proc.stdout.read1(_CHUNK)
                    if not chunk:
                        break
                    text = decoder.decode(chunk)
                    if text:
                        on_token(PartialResult(response=text))
                tail = decoder.decode(b"", final=True)
                if tail:
                    on_token(PartialResult(response=tail))
                code = self._proc.wait()
            finally:
                proc, self._proc = self._proc, None
                if proc.poll() is None:
                    proc.kill()
                    proc.wait()
                proc.stdout.close()

            if code != 0:
                err.seek(0)
                detail = err.read().decode("utf-8", errors="ignore").strip()[-200:]
                raise BackendError(f"llama.cpp exited with status {code}: {detail}")

        on_token(PartialResult(done=True, context=list(tokens)))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        proc = self._proc
        if proc is not None and proc.poll() is None:
            logger.debug("Terminating llama.cpp pid={pid}", pid=proc.pid)
            proc.terminate()
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
