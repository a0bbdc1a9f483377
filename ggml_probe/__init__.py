# ggml_probe/__init__.py
"""
ggml_probe
==========

Header decoder for legacy GGML-family model files (ggml, ggmf, ggjt, ggla):
container and version validation, hyperparameter extraction, quantization
labels, and a factory that hands a decoded file to its inference backend.
"""
from __future__ import annotations

from importlib.metadata import version as _pkg_version

__all__ = ["__version__"]

try:
    # Read version dynamically from installed package metadata
    __version__: str = _pkg_version("ggmlprobe")
except Exception:  # pragma: no cover - fallback for development environments
    __version__ = "0.0.0-dev"
