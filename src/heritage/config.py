"""Layout metrics, overridable from the environment.

Pedigree and descendants charts use different node boxes and spacing, so each
engine has its own `LayoutMetrics`. Values are read from
``HERITAGE_PEDIGREE_*`` and ``HERITAGE_DESCENDANTS_*`` variables when
`load_config()` runs.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field


def _f(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _i(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


@dataclass(frozen=True)
class LayoutMetrics:
    """Box sizes and spacing used by a layout engine."""

    node_width: float = 180.0
    node_height: float = 160.0
    union_width: float = 40.0
    union_height: float = 40.0
    h_spacing: float = 60.0  # horizontal gutter between neighbouring boxes
    v_spacing: float = 100.0  # vertical gap between generations

    @property
    def slot_width(self) -> float:
        """Horizontal room taken by one person box plus its gutter."""
        return self.node_width + self.h_spacing

    @property
    def marker_slot_width(self) -> float:
        return self.union_width + self.h_spacing

    @property
    def pair_distance(self) -> float:
        """Center-to-center distance of two partners with a marker between them."""
        return self.node_width + self.union_width + 2 * self.h_spacing

    @property
    def generation_step(self) -> float:
        return self.node_height + self.v_spacing

    @classmethod
    def from_env(cls, prefix: str, defaults: LayoutMetrics) -> LayoutMetrics:
        return cls(
            node_width=_f(f"{prefix}_NODE_WIDTH", defaults.node_width),
            node_height=_f(f"{prefix}_NODE_HEIGHT", defaults.node_height),
            union_width=_f(f"{prefix}_UNION_WIDTH", defaults.union_width),
            union_height=_f(f"{prefix}_UNION_HEIGHT", defaults.union_height),
            h_spacing=_f(f"{prefix}_H_SPACING", defaults.h_spacing),
            v_spacing=_f(f"{prefix}_V_SPACING", defaults.v_spacing),
        )


PEDIGREE_DEFAULTS = LayoutMetrics()
DESCENDANTS_DEFAULTS = LayoutMetrics(
    node_height=150.0,
    union_height=46.0,
    h_spacing=20.0,
    v_spacing=120.0,
)


@dataclass(frozen=True)
class HeritageConfig:
    pedigree: LayoutMetrics = field(default_factory=lambda: PEDIGREE_DEFAULTS)
    descendants: LayoutMetrics = field(default_factory=lambda: DESCENDANTS_DEFAULTS)

    # Default depth of the descendants chart
    max_depth: int = 10
    log_level: str = "INFO"


def load_config() -> HeritageConfig:
    """Build configuration from the current environment."""
    return HeritageConfig(
        pedigree=LayoutMetrics.from_env("HERITAGE_PEDIGREE", PEDIGREE_DEFAULTS),
        descendants=LayoutMetrics.from_env("HERITAGE_DESCENDANTS", DESCENDANTS_DEFAULTS),
        max_depth=_i("HERITAGE_MAX_DEPTH", 10),
        log_level=os.getenv("HERITAGE_LOG_LEVEL", "INFO").upper(),
    )


CONFIG = load_config()
