"""pygame window for running a CHIP-8 program interactively."""

import pygame
from omegaconf import DictConfig

from chipvm.state import EmulatorState
from chipvm.emulator import run_frame
from chipvm.keypad import InputGateway
from chipvm.rendering import create_color_scheme, framebuffer_to_rgb
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chipvm.logging import ConsoleLogger

# 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F on the left of a QWERTY keyboard
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def pump_events(gateway: InputGateway) -> None:
    """Forward pygame key events to the gateway; quit cancels it."""
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            gateway.cancel()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                gateway.cancel()
            elif event.key in KEY_MAP:
                gateway.press(KEY_MAP[event.key])
        elif event.type == pygame.KEYUP:
            if event.key in KEY_MAP:
                gateway.release(KEY_MAP[event.key])


def draw(screen, state: EmulatorState, cfg: DictConfig) -> None:
    on_color, off_color = create_color_scheme(cfg.color_scheme)
    frame = framebuffer_to_rgb(state.framebuffer, cfg.scale, on_color, off_color)
    # surfarray expects (width, height, 3)
    pygame.surfarray.blit_array(screen, frame.swapaxes(0, 1))
    pygame.display.flip()


def run_window(state: EmulatorState, cfg: DictConfig, logger: ConsoleLogger) -> EmulatorState:
    """Run frames until the window is closed.

    A program waiting on FX0A keeps the window responsive: frames still run,
    timers still tick, and the next key press resolves the wait.
    """
    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH * cfg.scale, SCREEN_HEIGHT * cfg.scale))
        pygame.display.set_caption("chipvm")
        clock = pygame.time.Clock()
        gateway = InputGateway()

        logger.info("Controls: 1234/QWER/ASDF/ZXCV = keypad, ESC = quit")
        while True:
            pump_events(gateway)
            if gateway.cancelled:
                logger.info("Window closed")
                break
            state = run_frame(state, gateway, cfg.instructions_per_frame)
            draw(screen, state, cfg)
            if cfg.cap_fps:
                clock.tick(cfg.fps)
    finally:
        pygame.quit()
    return state
