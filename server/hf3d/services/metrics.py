# ─────────────────────────────────────────────────────────────────────────────
# Generation Metrics — thread-safe counters and latency window
# ─────────────────────────────────────────────────────────────────────────────
# Exposed via GET /metrics (JSON) and GET /metrics/prometheus.
# Bounded: latency history uses deque(maxlen=1000), auto-evicts oldest.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Any

from hf3d.exceptions import ErrorKind


@dataclass
class GenerationMetrics:
    """Per-process generation statistics."""

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    requests_total: int = 0
    successes: int = 0
    failures: int = 0
    text_requests: int = 0
    image_requests: int = 0

    _failures_by_kind: Counter[str] = field(default_factory=Counter, repr=False)
    _requests_by_model: Counter[str] = field(default_factory=Counter, repr=False)
    _latency_history: deque[float] = field(default_factory=lambda: deque(maxlen=1000), repr=False)
    _start_time: float = field(default_factory=time.time, repr=False)

    def record_request(
        self,
        model_id: str,
        task: str,
        latency_ms: float,
        error_kind: ErrorKind | None = None,
    ) -> None:
        """Record one finished generation call."""
        with self._lock:
            self.requests_total += 1
            self._latency_history.append(latency_ms)
            self._requests_by_model[model_id] += 1

            if task == "image":
                self.image_requests += 1
            else:
                self.text_requests += 1

            if error_kind is None:
                self.successes += 1
            else:
                self.failures += 1
                self._failures_by_kind[error_kind.value] += 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize metrics for the /metrics endpoint."""
        with self._lock:
            latencies = sorted(self._latency_history)
            n = len(latencies)
            return {
                "requests_total": self.requests_total,
                "successes": self.successes,
                "failures": self.failures,
                "success_rate": round(self.successes / max(self.requests_total, 1), 3),
                "text_requests": self.text_requests,
                "image_requests": self.image_requests,
                "failures_by_kind": {kind.value: self._failures_by_kind[kind.value] for kind in ErrorKind},
                "requests_by_model": dict(self._requests_by_model),
                "latency_p50_ms": round(latencies[n // 2], 1) if n else 0,
                "latency_p95_ms": round(latencies[int(n * 0.95)], 1) if n else 0,
                "latency_mean_ms": round(sum(latencies) / n, 1) if n else 0,
                "uptime_seconds": int(time.time() - self._start_time),
            }
