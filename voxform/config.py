"""
Editor configuration loading.

A configuration file is JSON whose keys mirror :class:`EditorConfig`; the
``decode`` and ``samples`` sections are nested objects mirroring
:class:`DecodeParams` and :class:`SampleSetConfig`. Missing keys keep their
defaults.

Example::

    {
        "grid_size": [20, 10, 20],
        "max_grid_size": [40, 20, 40],
        "seed": 666,
        "decode": {"bottom": 0.1, "top": 0.9, "thickness": 2, "sensitivity": 0.6},
        "samples": {"samples": 100, "output_dir": "Samples"}
    }
"""

import dataclasses
import json
import os
from typing import Any, Dict

from .models import DecodeParams, EditorConfig, SampleSetConfig


def _build(cls, data: Dict[str, Any], section: str):
    if not isinstance(data, dict):
        raise ValueError(f"Section '{section}' must be an object, got {type(data).__name__}")
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown keys in '{section}': {', '.join(unknown)}")
    return cls(**data)


def config_from_dict(data: Dict[str, Any]) -> EditorConfig:
    data = dict(data)
    decode = _build(DecodeParams, data.pop("decode", {}), "decode").validate()
    samples = _build(SampleSetConfig, data.pop("samples", {}), "samples")
    cfg = _build(EditorConfig, data, "root")
    cfg.grid_size = tuple(cfg.grid_size)
    cfg.max_grid_size = tuple(cfg.max_grid_size)
    cfg.origin = tuple(cfg.origin)
    cfg.decode = decode
    cfg.samples = samples
    return cfg


def load_config(path: str) -> EditorConfig:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return config_from_dict(data)


def config_to_dict(cfg: EditorConfig) -> Dict[str, Any]:
    data = dataclasses.asdict(cfg)
    for key in ("grid_size", "max_grid_size", "origin"):
        data[key] = list(data[key])
    return data
