from __future__ import annotations

import os
import platform
import time
from dataclasses import dataclass
from typing import Any, Dict

from runtime.context import RuntimeContext


@dataclass
class HealthService:
    ctx: RuntimeContext

    def get_health_summary(self) -> Dict[str, Any]:
        storage_cfg = self.ctx.config.storage
        snapshot = self.ctx.store.get_snapshot()
        return {
            "timestamp": time.time(),
            "platform": platform.platform(),
            "python": platform.python_version(),
            "cwd": os.getcwd(),
            "context_id": self.ctx.context_id,
            "storage_backend": storage_cfg.backend,
            "storage_path": storage_cfg.path if storage_cfg.backend == "sqlite" else None,
            "event_count": len(snapshot.events),
            "sync_running": self.ctx.synchronizer.running,
            "log_path": self.ctx.config.log_path,
        }
