# ggml_probe/model_formats/ggml/ggml_filetype.py
"""
GGML file types (model-wide quantization codes) and their display labels.
"""
from __future__ import annotations

from enum import IntEnum


class GGMLFileType(IntEnum):
    """Quantization code stored in the hyperparameter record."""

    ALL_F32 = 0
    MOSTLY_F16 = 1
    MOSTLY_Q4_0 = 2
    MOSTLY_Q4_1 = 3
    MOSTLY_Q4_1_SOME_F16 = 4
    # Retired
    # MOSTLY_Q4_2 = 5
    # MOSTLY_Q4_3 = 6
    # MOSTLY_Q4_1_F16 = 7
    MOSTLY_Q8_0 = 8
    MOSTLY_Q5_0 = 9
    MOSTLY_Q5_1 = 10
    MOSTLY_Q2_K = 11
    MOSTLY_Q3_K = 12
    MOSTLY_Q4_K = 13
    MOSTLY_Q5_K = 14
    MOSTLY_Q6_K = 15
    UNKNOWN = -1

    @staticmethod
    def label(code: int) -> str:
        return file_type_label(code)


UNKNOWN_LABEL = "U"

FILE_TYPE_LABELS = {
    GGMLFileType.ALL_F32: "F32",
    GGMLFileType.MOSTLY_F16: "F16",
    GGMLFileType.MOSTLY_Q4_0: "Q4_0",
    GGMLFileType.MOSTLY_Q4_1: "Q4_1",
    GGMLFileType.MOSTLY_Q4_1_SOME_F16: "Q4_1_SOME_F16",
    GGMLFileType.MOSTLY_Q8_0: "Q8_0",
    GGMLFileType.MOSTLY_Q5_0: "Q5_0",
    GGMLFileType.MOSTLY_Q5_1: "Q5_1",
    GGMLFileType.MOSTLY_Q2_K: "Q2_K",
    GGMLFileType.MOSTLY_Q3_K: "Q3_K",
    GGMLFileType.MOSTLY_Q4_K: "Q4_K",
    GGMLFileType.MOSTLY_Q5_K: "Q5_K",
    GGMLFileType.MOSTLY_Q6_K: "Q6_K",
}


def to_signed32(code: int) -> int:
    """Interpret a 32-bit value as two's-complement signed."""
    code &= 0xFFFFFFFF
    return code - 0x100000000 if code & 0x80000000 else code


def file_type_label(code: int) -> str:
    """Return the display label for a quantization code.

    Never raises: the UNKNOWN sentinel, the retired 5-7 gap and any other
    value outside the table all map to ``"U"``. Unsigned 32-bit inputs are
    read as their signed counterpart, so ``0xFFFFFFFF`` is the sentinel.
    """
    if not isinstance(code, int) or not -0x80000000 <= code <= 0xFFFFFFFF:
        return UNKNOWN_LABEL
    return FILE_TYPE_LABELS.get(to_signed32(code), UNKNOWN_LABEL)
