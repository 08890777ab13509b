"""Run configuration for the chipvm command line."""

from dataclasses import dataclass
from typing import Optional

from hydra.core.config_store import ConfigStore
from omegaconf import MISSING, DictConfig, OmegaConf

from chipvm.constants import TIMER_MODES
from chipvm.rendering import COLOR_SCHEMES


@dataclass
class RunConfig:
    """Settings for one interpreter run.

    Attributes:
        rom: Path to the ROM file
        instructions_per_frame: Instructions executed per display frame
        fps: Display frames per second; timers tick once per frame
        cap_fps: Sleep to hold ``fps`` in the windowed loop
        timer_mode: ``frame`` (fixed cadence) or ``instruction``
        with_font: Load the hex digit glyphs at 0x000
        seed: PRNG seed for CXKK
        scale: Window pixel scale
        color_scheme: Rendering palette name
        headless: Run without a window
        max_instructions: Instruction budget for headless runs
        screenshot: PNG path written after a headless run
        log_level: Console log level
    """
    rom: str = MISSING
    instructions_per_frame: int = 10
    fps: int = 60
    cap_fps: bool = True
    timer_mode: str = "frame"
    with_font: bool = True
    seed: int = 0
    scale: int = 10
    color_scheme: str = "classic"
    headless: bool = False
    max_instructions: int = 10_000
    screenshot: Optional[str] = None
    log_level: str = "INFO"


def register_configs() -> None:
    cs = ConfigStore.instance()
    cs.store(name="run_config", node=RunConfig)


def default_config() -> DictConfig:
    return OmegaConf.structured(RunConfig)


def validate_config(cfg: DictConfig) -> DictConfig:
    """Reject settings the interpreter cannot honor."""
    if cfg.timer_mode not in TIMER_MODES:
        raise ValueError(f"Unknown timer_mode '{cfg.timer_mode}'. Available: {list(TIMER_MODES)}")
    for key in ("instructions_per_frame", "fps", "scale", "max_instructions"):
        if cfg[key] <= 0:
            raise ValueError(f"{key} must be positive, got {cfg[key]}")
    if cfg.color_scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color_scheme '{cfg.color_scheme}'. Available: {list(COLOR_SCHEMES)}"
        )
    return cfg
