from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from mc_trading.config import load_config, serialize_config
from mc_trading.monitoring import AuditLog, LogNotifier, Monitor
from mc_trading.runtime import BatchProgress, ServiceConfig, SimulationService, create_run_context


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a Monte Carlo simulation and write a JSON report.")
    parser.add_argument("--config", default="configs/monte_carlo.yaml")
    parser.add_argument("--output", required=True)
    parser.add_argument("--simulations", type=int, default=None)
    args = parser.parse_args()

    config_path = Path(args.config)
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config = load_config(config_path)
    simulations = args.simulations if args.simulations is not None else config.simulation.simulations
    context = create_run_context(config_path, config.run_id_prefix, config.strategy, simulations)

    monitor = Monitor(LogNotifier())
    audit = AuditLog(Path(config.monitoring.audit_log_path), run_id=context.run_id, config_hash=context.config_hash)
    audit.log("run_start", context.audit_payload())

    service = SimulationService(
        ServiceConfig(
            batch_size=config.simulation.batch_size,
            max_workers=config.simulation.max_workers,
            reservoir_capacity=config.simulation.reservoir_capacity,
            chart_sample_size=config.simulation.chart_sample_size,
            executor=config.simulation.executor,
        ),
        audit_log=audit,
        monitor=monitor,
    )

    def on_progress(progress: BatchProgress) -> None:
        monitor.progress(progress.completed_batches, progress.total_batches)

    report = asyncio.run(service.run(config.strategy, simulations, on_progress=on_progress))

    payload = {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "run_id": context.run_id,
        "strategy_hash": context.strategy_hash,
        "config_path": str(config_path),
        "config": serialize_config(config),
        "simulations": simulations,
        "summary": asdict(report.summary) if report.summary is not None else None,
        "outlook": asdict(report.outlook),
        "chart": [point.as_dict() for point in report.chart],
        "error": report.error,
        "chart_error": report.chart_error,
    }

    output_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
