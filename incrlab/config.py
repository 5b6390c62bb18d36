"""Configuration loading for lab runs.

The file is YAML (``.yml`` / ``.yaml``) or JSON. Every key is optional;
missing values fall back to :func:`incrlab.models.labexp_params_defaults`.

Example::

    log_level: INFO
    results_dir: results/lab
    plots: true
    experiments: [eager-map, quickhull]   # empty or missing -> all
    params:
      input_seeds: [0]
      size: 10
      gauge: 1
      nominal_strategy: regular           # or by_content
      validate_output: true
      change_batch_size: 1
      change_batch_loopc: 10
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict

import yaml

from incrlab.errors import LabConfigError
from incrlab.models import LabExpParams, NominalStrategy, labexp_params_defaults

DEFAULT_CONFIG_FILE = "config.yaml"

_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0")


@dataclass(frozen=True)
class LabConfig:
    params: LabExpParams = field(default_factory=labexp_params_defaults)
    experiments: tuple[str, ...] = ()
    results_dir: str = "results/lab"
    log_level: str = "INFO"
    plots: bool = True


def parse_bool(value: Any, key: str) -> bool:
    """A real bool, or one of the usual true/false spellings as a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise LabConfigError(f"'{key}' must be a boolean, got {value!r}")


def load_config(config_file: str = DEFAULT_CONFIG_FILE) -> Dict[str, Any]:
    """Read a raw YAML/JSON mapping from ``config_file``."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        cfg = yaml.safe_load(text) or {}
    else:
        cfg = json.loads(text)
    if not isinstance(cfg, dict):
        raise LabConfigError(f"Config root must be a mapping: {config_file}")
    return cfg


def params_from_config(section: Dict[str, Any] | None) -> LabExpParams:
    """Overlay a ``params`` section on the default parameters."""
    defaults = labexp_params_defaults()
    if not section:
        return defaults
    if not isinstance(section, dict):
        raise LabConfigError("'params' must be a mapping")
    sp = defaults.sample_params
    gp = sp.generate_params
    try:
        gp = replace(
            gp,
            size=int(section.get("size", gp.size)),
            gauge=int(section.get("gauge", gp.gauge)),
            nominal_strategy=NominalStrategy.parse(
                section.get("nominal_strategy", gp.nominal_strategy)
            ),
        )
        seeds = section.get("input_seeds", sp.input_seeds)
        if isinstance(seeds, int):
            seeds = [seeds]
        sp = replace(
            sp,
            input_seeds=tuple(int(s) for s in seeds),
            generate_params=gp,
            validate_output=parse_bool(
                section.get("validate_output", sp.validate_output), "validate_output"
            ),
            change_batch_size=int(section.get("change_batch_size", sp.change_batch_size)),
        )
        loopc = int(section.get("change_batch_loopc", defaults.change_batch_loopc))
    except LabConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise LabConfigError(f"Invalid params section: {e}") from e
    return LabExpParams(sample_params=sp, change_batch_loopc=loopc).validate()


def lab_config_from_dict(cfg: Dict[str, Any]) -> LabConfig:
    experiments = cfg.get("experiments") or ()
    if isinstance(experiments, str):
        experiments = (experiments,)
    return LabConfig(
        params=params_from_config(cfg.get("params")),
        experiments=tuple(str(e) for e in experiments),
        results_dir=str(cfg.get("results_dir", "results/lab")),
        log_level=str(cfg.get("log_level", "INFO")),
        plots=parse_bool(cfg.get("plots", True), "plots"),
    )


def resolve_config(config_file: str | None) -> LabConfig:
    """Config from an explicit file, else ``config.yaml`` if present, else defaults."""
    if config_file is None:
        if not os.path.isfile(DEFAULT_CONFIG_FILE):
            return LabConfig()
        config_file = DEFAULT_CONFIG_FILE
    return lab_config_from_dict(load_config(config_file))
