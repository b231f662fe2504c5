"""
Configuration and settings loading for BillSplit
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, fields

from utils import app_dir, snap

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """Defaults and slider bounds for tax and tip (percentages)"""
    default_tax_rate: float = 8.875  # NYC sales tax
    default_tip_rate: float = 15.0
    tax_min: float = 0.0
    tax_max: float = 15.0
    tax_step: float = 0.125
    tip_min: float = 0.0
    tip_max: float = 30.0
    tip_step: float = 1.0
    log_level: str = "INFO"

    def clamp_tax(self, value: float) -> float:
        return snap(value, self.tax_min, self.tax_max, self.tax_step)

    def clamp_tip(self, value: float) -> float:
        return snap(value, self.tip_min, self.tip_max, self.tip_step)


def dict_to_settings(d: dict) -> Settings:
    """Build Settings from a dict, ignoring unknown keys"""
    known = {f.name for f in fields(Settings)}
    kwargs = {}
    for k, v in d.items():
        if k not in known:
            continue
        if k == "log_level":
            kwargs[k] = str(v)
            continue
        try:
            kwargs[k] = float(v)
        except (TypeError, ValueError):
            raise ValueError(f"settings: {k} must be a number") from None
    s = Settings(**kwargs)
    if s.tax_min > s.tax_max or s.tip_min > s.tip_max:
        raise ValueError("settings: min rate above max rate")
    if s.tax_min < 0 or s.tip_min < 0:
        raise ValueError("settings: rates must be non-negative")
    s.default_tax_rate = s.clamp_tax(s.default_tax_rate)
    s.default_tip_rate = s.clamp_tip(s.default_tip_rate)
    return s


def load_settings(path: str) -> Settings:
    """Load settings from JSON file; defaults when the file is missing"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return Settings()
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return dict_to_settings(data)


def get_default_settings() -> Settings:
    """Settings from settings.json in the app directory"""
    return load_settings(os.path.join(app_dir(), "settings.json"))


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once; later calls only change the level"""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
