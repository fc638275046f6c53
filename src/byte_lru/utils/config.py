from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict


@dataclass
class CacheConfig:
    max_bytes: int = 0  # 0 = unbounded
    record_metrics: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
