"""Identity of a simulation run for the audit trail."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from mc_trading.config.loader import compute_config_hash
from mc_trading.simulator.models import StrategyParams


@dataclass(frozen=True)
class RunContext:
    run_id: str
    config_path: Path
    config_hash: str
    strategy_hash: str
    simulations: int
    started_at: datetime

    def audit_payload(self) -> dict[str, Any]:
        return {
            "config": str(self.config_path),
            "strategy_hash": self.strategy_hash,
            "simulations": self.simulations,
            "started_at": self.started_at.isoformat(),
        }


def strategy_hash(params: StrategyParams) -> str:
    """Stable digest of the strategy parameters, independent of file formatting."""
    payload = json.dumps(asdict(params), sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def create_run_context(
    config_path: str | Path,
    run_id_prefix: str,
    params: StrategyParams,
    simulations: int,
    run_id: Optional[str] = None,
) -> RunContext:
    path = Path(config_path)
    digest = strategy_hash(params)
    started_at = datetime.now(timezone.utc)
    if run_id is None:
        stamp = started_at.strftime("%Y%m%dT%H%M%SZ")
        run_id = f"{run_id_prefix}-{stamp}-{simulations}-{digest[:8]}"
    return RunContext(
        run_id=run_id,
        config_path=path,
        config_hash=compute_config_hash(path),
        strategy_hash=digest,
        simulations=simulations,
        started_at=started_at,
    )
