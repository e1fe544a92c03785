from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from laserstrike.api.config import ProcessorSettings, TargetSpec

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"

_PROCESSOR_KEYS = ("brightness_threshold", "color_dominance_ratio",
                   "cooldown_seconds", "debounce_ms", "laser_rule")
_TARGET_KEYS = ("width", "height", "center", "max_radius", "margin")


def load_settings_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Missing settings file {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    return data


def _pick(section: Dict[str, Any], keys) -> Dict[str, Any]:
    unknown = set(section) - set(keys)
    if unknown:
        logger.warning("ignoring unknown settings keys: %s", ", ".join(sorted(unknown)))
    return {k: section[k] for k in keys if k in section}


def load_settings(path: Optional[Path] = None) -> Tuple[ProcessorSettings, TargetSpec]:
    """
    Reads processor + target settings from YAML:

        processor:
          brightness_threshold: 240
          color_dominance_ratio: 1.5
          cooldown_seconds: 3
          debounce_ms: 500
          laser_rule: dominance
        target:
          width: 500
          height: 700
          center: [250, 350]
          max_radius: 250
          margin: 20

    Missing keys keep their defaults. With no path, the bundled
    config/settings.yaml is used if present.
    """
    if path is None:
        if not DEFAULT_SETTINGS_PATH.exists():
            return ProcessorSettings(), TargetSpec()
        path = DEFAULT_SETTINGS_PATH

    data = load_settings_file(Path(path))
    proc = _pick(data.get("processor") or {}, _PROCESSOR_KEYS)
    tgt = _pick(data.get("target") or {}, _TARGET_KEYS)
    if "center" in tgt:
        cx, cy = tgt["center"]
        tgt["center"] = (float(cx), float(cy))
    return ProcessorSettings(**proc), TargetSpec(**tgt)
