"""
CHIP-8 host: pygame window, keyboard, debug controls and headless runs
"""

import argparse
import sys

import pygame

from chipcore import Machine, create_color_scheme, display_to_rgb
from chipcore.errors import ChipCoreError, MachineFault
from chipcore.logging import logger
from chipcore.rendering import display_to_text

# 4x4 block on the left of a QWERTY keyboard
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay_height = len(text_lines) * line_height + 8
    overlay_width = max_width + 16

    overlay = pygame.Surface((overlay_width, overlay_height))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def blit_display(screen, machine, scale, on_color, off_color):
    rgb = display_to_rgb(machine.display, scale=scale, on_color=on_color, off_color=off_color)
    # surfarray expects (width, height, 3)
    screen.blit(pygame.surfarray.make_surface(rgb.swapaxes(0, 1)), (0, 0))


def run_emulator(machine: Machine, scale=8, fps=60, color_scheme="classic"):
    """Main loop: one frame of cycles per display refresh"""
    pygame.init()
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption("chipcore")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 18)
    on_color, off_color = create_color_scheme(color_scheme)

    running = True
    show_debug = False
    blit_display(screen, machine, scale, on_color, off_color)

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    if machine.paused:
                        machine.resume()
                        logger.info("Resumed")
                    else:
                        machine.pause()
                        logger.info("Paused - P to resume, N to step")
                elif event.key == pygame.K_n:
                    machine.single_step()
                elif event.key == pygame.K_TAB:
                    show_debug = not show_debug
                elif event.key == pygame.K_BACKSPACE:
                    machine.reset()
                elif event.key in KEY_MAP:
                    machine.key_down(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    machine.key_up(KEY_MAP[event.key])

        try:
            if machine.paused:
                machine.run_cycle()
            else:
                machine.run_frame()
        except MachineFault as e:
            logger.error(f"{e} - Backspace to reset")

        if machine.consume_redraw() or show_debug:
            blit_display(screen, machine, scale, on_color, off_color)

        if show_debug:
            debug_lines = [
                f"PC: 0x{machine.pc:03X}  I: 0x{machine.index:03X}  OP: 0x{machine.opcode:04X}",
                f"Status: {machine.status} / {machine.run_mode}",
            ]
            registers = machine.registers
            for i in range(0, 16, 4):
                debug_lines.append(" ".join(f"V{j:X}:{int(registers[j]):02X}" for j in range(i, i + 4)))
            debug_lines.extend(machine.listing())
            draw_overlay_text(screen, debug_lines, (5, 5), font, alpha=100)

        pygame.display.flip()
        clock.tick(fps)

    pygame.quit()


def run_headless(machine: Machine, cycles: int):
    """Run a fixed number of cycles and print the screen and disassembly"""
    machine.run(cycles, progress=True)
    print(display_to_text(machine.display))
    print(f"PC: 0x{machine.pc:03X}  status: {machine.status}  fault: {machine.fault}")
    print("\n".join(machine.listing()))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 program")
    parser.add_argument("rom", help="Path to the ROM file")
    parser.add_argument("--scale", type=int, default=8, help="Window pixels per CHIP-8 pixel")
    parser.add_argument("--cycles-per-frame", type=int, default=10, help="Cycles run per displayed frame")
    parser.add_argument("--fps", type=int, default=60, help="Display refresh rate")
    parser.add_argument("--color-scheme", default="classic", help="classic, amber, white, blue or retro")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the random opcode")
    parser.add_argument("--strict", action="store_true", help="Reject ROMs larger than program memory")
    parser.add_argument("--headless", type=int, metavar="N", help="Run N cycles without a window")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    machine = Machine(
        cycles_per_frame=args.cycles_per_frame,
        seed=args.seed,
        strict_load=args.strict,
        on_beep=lambda: logger.info("Beep"),
    )

    try:
        machine.load_file(args.rom)
    except (OSError, ChipCoreError) as e:
        logger.error(f"Could not load {args.rom}: {e}")
        return 1

    if args.headless is not None:
        try:
            run_headless(machine, args.headless)
        except MachineFault as e:
            logger.error(str(e))
            return 1
        return 0

    run_emulator(machine, scale=args.scale, fps=args.fps, color_scheme=args.color_scheme)
    return 0


if __name__ == "__main__":
    sys.exit(main())
