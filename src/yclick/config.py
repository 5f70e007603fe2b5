from __future__ import annotations
import copy
from pathlib import Path
from typing import Any, Dict, Union
import yaml

from yclick.features.dense import FEATURE_DIM

DEFAULT_CONFIG: Dict[str, Any] = {
    "parser": {
        "feature_dim": FEATURE_DIM,
        "on_error": "skip",
    },
    "io": {
        "output_path": "outputs/visits.jsonl",
        "report_path": "outputs/parse_report.json",
    },
    "diagnostics": {
        "figs_dir": "outputs/figures",
        "summary_path": "outputs/diagnostics_summary.json",
        "top_articles": 20,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def _positive_int(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and x >= 1


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    for section in DEFAULT_CONFIG:
        if not isinstance(cfg.get(section), dict):
            raise ValueError(f"config section {section!r} must be a mapping, got {cfg.get(section)!r}")

    pcfg = cfg["parser"]
    dim = pcfg.get("feature_dim")
    if not _positive_int(dim):
        raise ValueError(f"parser.feature_dim must be a positive integer, got {dim!r}")
    if pcfg.get("on_error") not in ("skip", "raise"):
        raise ValueError(f"parser.on_error must be 'skip' or 'raise', got {pcfg.get('on_error')!r}")

    top = cfg["diagnostics"].get("top_articles")
    if not _positive_int(top):
        raise ValueError(f"diagnostics.top_articles must be a positive integer, got {top!r}")
    return cfg


def load_config(path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """
    Load a YAML config and merge it over DEFAULT_CONFIG. path=None returns the
    defaults.
    """
    if path is None:
        return validate_config(copy.deepcopy(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config root must be a mapping: {path}")
    return validate_config(_merge(DEFAULT_CONFIG, raw))
