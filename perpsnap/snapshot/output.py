from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from perpsnap.data.models import Snapshot
from perpsnap.indicators.trend import classify_trend
from perpsnap.snapshot.aggregator import TREND_POINTS


def dataclass_to_json_safe(obj: Any) -> Any:
    """
    Convert dataclasses (including nested) into JSON-safe dicts.
    - Converts floats/ints/str/bool/None unchanged
    - Converts dict/list/tuple recursively
    - For unknown objects: str()
    """
    if obj is None:
        return None
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [dataclass_to_json_safe(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): dataclass_to_json_safe(v) for k, v in obj.items()}
    if hasattr(obj, "__dataclass_fields__"):
        return {k: dataclass_to_json_safe(v) for k, v in asdict(obj).items()}
    return str(obj)


def snapshot_to_dict(snap: Snapshot) -> Dict[str, Any]:
    out = dataclass_to_json_safe(snap)
    # None until the 3-point MA21 series exists
    out["ma21_long_trend"] = (
        classify_trend(snap.ma21_long_series) if len(snap.ma21_long_series) >= TREND_POINTS else None
    )
    return out
