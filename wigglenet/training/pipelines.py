"""Preset-driven training runs for wigglenet."""

from __future__ import annotations

import json
import logging
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.network import Network
from ..core.strategies import Backprop, FiniteDifference, GradientEstimator
from ..core.types import Dataset, RunResult
from ..data import registry
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from .metrics import adder_failures, gate_failures
from .trainer import SGDOptimizer, Trainer

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "or-gate": {
        "data": {"name": "gate", "options": {"gate": "or"}},
        "model": {"hidden": [2], "init_low": 0.0, "init_high": 1.0},
        "train": {
            "estimator": "backprop",
            "epochs": 10_000,
            "lr": 0.1,
            "seed": 0,
            "eval_every": 100,
            "run_dir": "runs/or-gate",
        },
    },
    "and-gate": {
        "data": {"name": "gate", "options": {"gate": "and"}},
        "model": {"hidden": [2]},
        "train": {
            "estimator": "backprop",
            "epochs": 10_000,
            "lr": 0.1,
            "seed": 0,
            "eval_every": 100,
            "run_dir": "runs/and-gate",
        },
    },
    "nand-gate": {
        "data": {"name": "gate", "options": {"gate": "nand"}},
        "model": {"hidden": [2]},
        "train": {
            "estimator": "backprop",
            "epochs": 10_000,
            "lr": 0.1,
            "seed": 0,
            "eval_every": 100,
            "run_dir": "runs/nand-gate",
        },
    },
    "xor-gate": {
        "data": {"name": "gate", "options": {"gate": "xor"}},
        "model": {"hidden": [2]},
        "train": {
            "estimator": "backprop",
            "epochs": 30_000,
            "lr": 0.1,
            "seed": 0,
            "eval_every": 100,
            "run_dir": "runs/xor-gate",
        },
    },
    "xor-finite-diff": {
        "data": {"name": "gate", "options": {"gate": "xor"}},
        "model": {"hidden": [2]},
        "train": {
            "estimator": "finite_diff",
            "eps": 0.1,
            "epochs": 30_000,
            "lr": 0.1,
            "seed": 0,
            "eval_every": 100,
            "run_dir": "runs/xor-finite-diff",
        },
    },
    "adder-2bit": {
        "data": {"name": "adder", "options": {"bits": 2}},
        "model": {"hidden": [8]},
        "train": {
            "estimator": "backprop",
            "epochs": 5_000,
            "lr": 1.0,
            "seed": 0,
            "eval_every": 50,
            "run_dir": "runs/adder-2bit",
        },
    },
}

_REQUIRED_SECTIONS = {"data", "model", "train"}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def read_config(path: str | Path) -> Mapping[str, object]:
    """Load a JSON or YAML config file into a mapping."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix == ".json":
        data = json.loads(text or "{}")
    else:
        import yaml

        data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def merge_config(base: Mapping[str, object], override: Mapping[str, object]) -> dict:
    """Recursively overlay ``override`` onto a copy of ``base``."""

    merged = deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)  # type: ignore[arg-type]
        else:
            merged[key] = deepcopy(value)
    return merged


def build_dims(dataset: Dataset, model_cfg: Mapping[str, object]) -> List[int]:
    dims = [dataset.inputs.cols]
    dims.extend(int(h) for h in model_cfg.get("hidden", []))  # type: ignore[union-attr]
    dims.append(dataset.targets.cols)
    return dims


def build_estimator(train_cfg: Mapping[str, object]) -> GradientEstimator:
    name = str(train_cfg.get("estimator", "backprop"))
    if name == "backprop":
        return Backprop()
    if name == "finite_diff":
        return FiniteDifference(eps=float(train_cfg.get("eps", 0.1)))
    raise ValueError(f"Unknown estimator: {name}")


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train one network as described by ``config`` and write run artifacts."""

    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    dataset = registry.get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    dims = build_dims(dataset, model_cfg)
    seed = int(train_cfg.get("seed", 0))
    rng = np.random.default_rng(seed)

    network = Network(dims)
    network.randomize(
        rng,
        float(model_cfg.get("init_low", 0.0)),
        float(model_cfg.get("init_high", 1.0)),
    )
    estimator = build_estimator(train_cfg)
    optimizer = SGDOptimizer(lr=float(train_cfg.get("lr", 0.1)))
    epochs = int(train_cfg.get("epochs", 1))

    run_dir = _resolve_run_dir(train_cfg, str(data_cfg["name"]))
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=str(data_cfg["name"]),
        dims=dims,
        estimator=type(estimator).__name__,
        epochs=epochs,
        lr=optimizer.lr,
        param_count=network.parameter_count(),
    )

    jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", split="train")
    plots = PlotAdapter(
        run_dir,
        enable_plots=bool(train_cfg.get("enable_plots", False)),
        estimator=type(estimator).__name__,
        architecture=dims,
    )

    trainer = Trainer(network=network, estimator=estimator, optimizer=optimizer)
    result = trainer.run(
        dataset,
        epochs,
        eval_every=int(train_cfg.get("eval_every", 1)),
        log_every=int(train_cfg.get("log_every", 1000)),
        split_loggers={"train": [jsonl, csv_sink, plots]},
    )
    plots.close()

    failures = _count_failures(network, dataset, data_cfg)
    logger.info("Run finished: cost %.6f, %d prediction failures", result.final_cost, failures)

    manifest = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        architecture=dims,
        final_cost=result.final_cost,
        failures=failures,
    )
    return RunResult(
        steps=result.steps,
        final_cost=result.final_cost,
        history=result.history,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
    )


def _count_failures(network: Network, dataset: Dataset, data_cfg: Mapping[str, object]) -> int:
    if data_cfg["name"] == "adder":
        bits = int(dict(data_cfg.get("options", {})).get("bits", 2))  # type: ignore[arg-type]
        return adder_failures(network, bits)
    return gate_failures(network, dataset)


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_startup_summary(
    *,
    dataset_name: str,
    dims: Sequence[int],
    estimator: str,
    epochs: int,
    lr: float,
    param_count: int,
) -> None:
    print("=== wigglenet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Architecture  : {list(dims)}")
    print(f"Estimator     : {estimator}")
    print(f"Epochs        : {epochs}")
    print(f"Learning rate : {lr}")
    print(f"Parameters    : {param_count}")
    print("=====================")


__all__ = [
    "build_dims",
    "build_estimator",
    "load_preset",
    "merge_config",
    "presets",
    "read_config",
    "run_pipeline",
]
