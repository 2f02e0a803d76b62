"""Placeholder numeric analysis of an uploaded report.

The file is not parsed: its raw bytes are read as a uint8 vector and
passed through a softmax. The output has no medical meaning.
"""
from typing import Any, Dict

import numpy as np

from app.services.logger import log_debug


def softmax(x: np.ndarray) -> np.ndarray:
    if x.size == 0:
        return x.astype(np.float64)
    shifted = x - np.max(x)
    exp = np.exp(shifted)
    return exp / exp.sum()


def analyze_bytes(data: bytes) -> Dict[str, Any]:
    tensor = np.frombuffer(data, dtype=np.uint8).astype(np.float64)
    log_debug("report_tensor_created", {"shape": list(tensor.shape)})

    result = softmax(tensor)
    return {"shape": list(result.shape), "result": result.tolist()}
