"""Command line entry point.

    chipvm rom=games/pong.ch8
    chipvm rom=test.ch8 headless=true max_instructions=5000 screenshot=out.png
"""

import sys

import hydra
import jax
from omegaconf import DictConfig, OmegaConf

from chipvm.config import register_configs, validate_config
from chipvm.emulator import run_until_blocked, StepStatus
from chipvm.errors import Chip8Error, ExecutionCancelled
from chipvm.logging import ConsoleLogger, progress_bar
from chipvm.rendering import save_png
from chipvm.state import EmulatorState, create_state, load_rom

register_configs()


def run_headless(state: EmulatorState, cfg: DictConfig, logger: ConsoleLogger) -> EmulatorState:
    """Execute up to ``max_instructions`` without a window."""
    with progress_bar(cfg.max_instructions) as bar:
        state, executed, status = run_until_blocked(
            state, cfg.max_instructions, bar.update, cfg.instructions_per_frame
        )

    logger.info(f"Executed {executed} instructions, pc=0x{int(state.pc):03X}")
    if status is StepStatus.WAITING_FOR_KEY:
        logger.warning(f"Program is waiting for a key press (V{state.waiting_register:X})")

    if cfg.screenshot:
        save_png(state.framebuffer, cfg.screenshot, cfg.scale, cfg.color_scheme)
        logger.info(f"Saved framebuffer to {cfg.screenshot}")
    return state


def run(cfg: DictConfig) -> int:
    """Load the ROM and run it; returns the process exit status."""
    logger = ConsoleLogger(log_level=cfg.log_level)
    try:
        validate_config(cfg)
    except ValueError as e:
        logger.error(str(e))
        return 2

    logger.debug("Configuration:\n" + OmegaConf.to_yaml(cfg))

    state = create_state(jax.random.PRNGKey(cfg.seed), timer_mode=cfg.timer_mode, with_font=cfg.with_font)
    try:
        state = load_rom(state, cfg.rom)
    except (OSError, Chip8Error) as e:
        logger.error(f"Failed to load ROM {cfg.rom}: {e}")
        return 1
    logger.info(f"Loaded {cfg.rom}")

    try:
        if cfg.headless:
            run_headless(state, cfg, logger)
        else:
            from chipvm.frontend import run_window
            run_window(state, cfg, logger)
    except Chip8Error as e:
        logger.critical(str(e))
        return 1
    except ExecutionCancelled:
        logger.info("Run cancelled")
    return 0


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    sys.exit(run(cfg))


if __name__ == "__main__":
    main()
