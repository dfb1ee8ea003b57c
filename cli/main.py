"""Command line entry point for wigglenet training runs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from wigglenet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "steps": result.steps,
        "final_cost": result.final_cost,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="or-gate",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--estimator",
        choices=["backprop", "finite_diff"],
        help="Override the gradient estimator",
    )
    parser.add_argument("--epochs", type=int, help="Override the epoch count")
    parser.add_argument("--lr", type=float, help="Override the learning rate")
    parser.add_argument("--eps", type=float, help="Finite-difference step size")
    parser.add_argument("--seed", type=int, help="Seed for parameter initialisation")
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Save a cost curve PNG"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> dict:
    config = dict(pipelines.load_preset(args.preset))

    if args.config:
        override = pipelines.read_config(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    train = config.setdefault("train", {})
    if args.estimator:
        train["estimator"] = args.estimator
    if args.epochs is not None:
        train["epochs"] = int(args.epochs)
    if args.lr is not None:
        train["lr"] = float(args.lr)
    if args.eps is not None:
        train["eps"] = float(args.eps)
    if args.seed is not None:
        train["seed"] = int(args.seed)
    if args.run_dir is not None:
        train["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = resolve_config(args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
