# ggml_probe/llm/base.py
"""
Backend-neutral model capability returned by the factory.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Sequence


@dataclass
class PartialResult:
    """One streamed piece of a prediction."""

    response: str = ""
    done: bool = False
    context: List[int] = field(default_factory=list)


TokenCallback = Callable[[PartialResult], None]


class BackendError(Exception):
    """Raised when an inference backend fails while predicting."""


class Model(ABC):
    """A loaded model that can stream predictions."""

    @abstractmethod
    def predict(self, tokens: Sequence[int], prompt: str, on_token: TokenCallback) -> None:
        """Stream a completion of ``prompt`` to ``on_token``.

        Args:
            tokens: Context tokens from a previous exchange.
            prompt: Prompt text.
            on_token: Called once per streamed piece, last with ``done=True``.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> "Model":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
