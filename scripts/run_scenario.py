"""CLI for running offline escalator scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from escalator import ConfigError, EscalatorConfig, Simulation


def build_simulation(config: Dict) -> Simulation:
    escalator_cfg = dict(config.get("escalator", {}))
    if "random_seed" in config:
        escalator_cfg.setdefault("rng_seed", config["random_seed"])
    metrics_interval = config.get("metrics_hook_interval", 10)
    return Simulation(EscalatorConfig.from_dict(escalator_cfg), metrics_hook_interval=metrics_interval)


def run_simulation(simulation: Simulation, config: Dict) -> List[Dict]:
    duration = config.get("duration", 300)
    snapshots: List[Dict] = []
    simulation.on_event("metrics", lambda stats: snapshots.append(_summarize(asdict(stats))))
    simulation.run_for(duration)
    return snapshots


def _summarize(stats: Dict) -> Dict:
    stats.pop("flow_history", None)
    return stats


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")

    config = json.loads(args.config.read_text())
    try:
        simulation = build_simulation(config)
    except ConfigError as exc:
        sys.exit(f"Invalid escalator configuration: {exc}")
    snapshots = run_simulation(simulation, config)

    final_stats = asdict(simulation.snapshot().stats)
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": config.get("duration", 300),
        "strategy": simulation.config.strategy.value,
        "config": simulation.config.to_dict(),
        "final_metrics": final_stats,
        "metrics_over_time": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Strategy: {results['strategy']}")
    print(f"Duration: {results['duration']} s ({simulation.state.tick_index} ticks)")
    print("Final metrics:")
    for key, value in final_stats.items():
        if key == "flow_history":
            continue
        print(f"  {key}: {value}")
    if simulation.config.strategy.value == "stand_only":
        print(f"  theoretical capacity: {simulation.config.stand_only_capacity:.3f} people/s")
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
