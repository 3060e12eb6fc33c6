"""Configuration helpers for canvas, snapping and export settings."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class BuilderConfig:
    canvas_width: float = 1920.0
    canvas_height: float = 1080.0
    snap_threshold: float = 8.0
    snap_enabled: bool = True
    runtime_namespace: str = "mod"
    library_namespace: str = "modlib"
    parse_function: str = "ParseUI"
    string_keys_namespace: str = "stringkeys"
    number_precision: int = 4
    indent: str = "  "

    @property
    def call_marker(self) -> str:
        return f"{self.library_namespace}.{self.parse_function}"


_BUILDER_CONFIG = BuilderConfig()


def get_builder_config() -> BuilderConfig:
    return copy.deepcopy(_BUILDER_CONFIG)


def set_builder_config(config: BuilderConfig) -> None:
    global _BUILDER_CONFIG
    _BUILDER_CONFIG = copy.deepcopy(config)
