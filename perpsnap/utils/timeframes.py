from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class TF:
    name: str
    seconds: int


TF_15M = TF("15m", 15 * 60)
TF_1H = TF("1h", 60 * 60)
TF_4H = TF("4h", 4 * 60 * 60)
TF_1D = TF("1d", 24 * 60 * 60)

_BY_NAME: Dict[str, TF] = {tf.name: tf for tf in (TF_15M, TF_1H, TF_4H, TF_1D)}


def get_timeframe(name: str) -> TF:
    tf = _BY_NAME.get(name.strip().lower())
    if tf is None:
        raise ValueError(f"Unsupported interval: {name}")
    return tf
