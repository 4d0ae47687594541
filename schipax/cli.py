"""Command-line entry point."""

import argparse
import time
from typing import List, Optional

import jax
from omegaconf.errors import OmegaConfBaseException

from schipax.config import EmulatorConfig, load_config
from schipax.emulator import FileProgramLoader, load_program, run_frames
from schipax.errors import Chip8Error
from schipax.logging import ConsoleLogger, get_logger
from schipax.state import create_state, EmulatorState


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schipax",
        description="CHIP-8/SCHIP interpreter",
    )
    parser.add_argument("rom", nargs="?", help="Path to the program image")
    parser.add_argument("--config", type=str, default=None, help="YAML file merged over the defaults")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a configuration value (repeatable)",
    )
    parser.add_argument(
        "--headless",
        type=int,
        default=None,
        metavar="FRAMES",
        help="Run FRAMES frames without opening a window",
    )
    parser.add_argument("--record", type=str, default=None, help="MP4 file for the headless frames")
    parser.add_argument("--screenshot", type=str, default=None, help="Image file for the final headless frame")
    return parser


def _initial_state(cfg: EmulatorConfig, image: bytes) -> EmulatorState:
    seed = cfg.seed if cfg.seed is not None else time.time_ns() & 0xFFFFFFFF
    return load_program(create_state(jax.random.PRNGKey(seed)), image)


def run_headless(cfg: EmulatorConfig, state: EmulatorState, args, logger: ConsoleLogger) -> int:
    from schipax.rendering import create_video, save_screenshot

    state, (displays, hires) = run_frames(state, args.headless, cfg.cycles_per_frame, True)
    if bool(state.halted):
        logger.info("Program exited (00FD)")
    elif bool(state.awaiting_key):
        logger.info(f"Program is waiting for a key (FX0A into V{int(state.key_register):X})")
    logger.log_registers(state)

    if args.record:
        written = create_video(displays, hires, args.record, fps=cfg.timer_frequency, scale=max(1, cfg.scale // 2))
        logger.info(f"Video saved: {args.record} ({written} frames)")
    if args.screenshot:
        save_screenshot(state, args.screenshot, scale=cfg.scale)
        logger.info(f"Screenshot saved: {args.screenshot}")
    return 0


def run_interactive(cfg: EmulatorConfig, state: EmulatorState, logger: ConsoleLogger) -> int:
    import pygame

    from schipax.frontend import PygameAudio, PygameDisplay, PygameInput
    from schipax.loop import ExecutionLoop
    from schipax.timers import TimerClock

    display = PygameDisplay(scale=cfg.scale, caption=cfg.caption)
    audio = PygameAudio(cfg.tone_frequency, cfg.sample_rate, logger=logger) if cfg.audio else None
    loop = ExecutionLoop(
        state,
        display,
        PygameInput(),
        audio=audio,
        cycles_per_frame=cfg.cycles_per_frame,
        cycle_delay=cfg.cycle_delay_ms / 1000.0,
        timer_clock=TimerClock(cfg.timer_frequency),
        logger=logger,
    )
    try:
        return loop.run()
    finally:
        display.close()
        pygame.quit()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on usage errors and 0 after --help.
        return 1 if e.code else 0
    logger = get_logger()

    if args.rom is None:
        parser.print_usage()
        logger.error("Missing program image argument")
        return 1

    try:
        cfg = load_config(args.config, args.overrides)
    except (OmegaConfBaseException, ValueError, OSError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    logger.set_level(cfg.log_level)

    try:
        image = FileProgramLoader(args.rom).load()
        state = _initial_state(cfg, image)
    except Chip8Error as e:
        logger.error(str(e))
        return 1
    logger.info(f"Loaded: {args.rom} ({len(image)} bytes)")

    if args.headless is not None:
        return run_headless(cfg, state, args, logger)
    return run_interactive(cfg, state, logger)


if __name__ == "__main__":
    raise SystemExit(main())
