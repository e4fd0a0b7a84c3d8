# Reference host for the interpreter core in chip8.py: a pygame window, the
# hex keypad mapped onto the left side of a QWERTY keyboard, a 60Hz timer
# event and a square wave beep.
#
# usage: chip8 -f roms/PONG [--speed 500] [--scale 15] [--disasm]


import argparse
import sys
from array import array

import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
)

from chip8 import DEBUG, SCREEN_HEIGHT, SCREEN_WIDTH, TIMER_FREQ, Chip8Error, Machine


# ******************** STATIC SECTION
# The keypad layout is:
#   1 2 3 C
#   4 5 6 D
#   7 8 9 E
#   A 0 B F
# and it's mapped on the keyboard as:
#   1 2 3 4
#   Q W E R
#   A S D F
#   Z X C V
KEY_MAPPINGS = {
    K_1: 0x1,
    K_2: 0x2,
    K_3: 0x3,
    K_4: 0xC,
    K_q: 0x4,
    K_w: 0x5,
    K_e: 0x6,
    K_r: 0xD,
    K_a: 0x7,
    K_s: 0x8,
    K_d: 0x9,
    K_f: 0xE,
    K_z: 0xA,
    K_x: 0x0,
    K_c: 0xB,
    K_v: 0xF,
}

DEFAULT_SPEED = 500     # instructions per second
SCALE = 15
BEEP_FREQ = 440
BEEP_VOLUME = 0.1
TIMER_EVENT = pygame.USEREVENT + 1
TIMER_INTERVAL = round(1000 / TIMER_FREQ)     # ms, 17 for 60Hz
BLUE = pygame.Color(80,69,155,255)
LIGHT_BLUE = pygame.Color(136,126,203,255)


# ******************** UTILITIES SECTION
def get_args(argv=None):
    parser = argparse.ArgumentParser(description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--speed", type=int, default=DEFAULT_SPEED, help="instructions executed per second")
    parser.add_argument("--scale", type=int, default=SCALE, help="size in screen pixels of a CHIP-8 pixel")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random number generator")
    parser.add_argument("--strict", action="store_true", help="stop on unknown instructions instead of skipping them")
    parser.add_argument("--keep-going", action="store_true", help="keep running after a faulty instruction")
    parser.add_argument("--disasm", action="store_true", help="print the rom disassembly and exit")
    parser.add_argument("--mute", action="store_true", help="disable the sound")
    return parser.parse_args(argv)


def load_rom(machine, path):
    """load ROM file from user specified path into the machine"""
    with open(path, mode='rb') as f:
        rom = f.read()
    machine.load_program(rom)
    if DEBUG: print(f"The ROM at path {path} has been loaded successfully")
    return rom


def print_disassembly(machine, rom, out=None):
    for address, word, text in machine.disassemble_program(rom):
        print(f"0x{address:04x}    {word:04x}    {text}", file=out)


# ******************** I/O SECTION
class Screen:
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE, surface=None):
        self.w, self.h, self.scale = w, h, s
        self.background = bg_color
        self.foreground = fg_color
        if surface is None:
            surface = pygame.display.set_mode((w * self.scale, h * self.scale))
        self.surface = surface
        self.surface.fill(self.background)

    def read_pixel(self, x, y):
        """return 1 if pixel is ON, return 0 if pixel is OFF"""
        p = self.surface.get_at((x * self.scale, y * self.scale))
        return 0 if p == self.background else 1

    def render(self, frame):
        """paint a whole framebuffer snapshot, the change is visible after refresh()"""
        self.surface.fill(self.background)
        for i, pixel in enumerate(frame):
            if pixel:
                x, y = i % self.w, i // self.w
                pygame.draw.rect(self.surface, self.foreground,
                                 (x * self.scale, y * self.scale, self.scale, self.scale))

    @staticmethod
    def refresh():
        pygame.display.flip()


class Buzzer:
    """square wave beep, silent when the mixer is not available"""

    def __init__(self, freq=BEEP_FREQ, volume=BEEP_VOLUME, mute=False):
        self.sound = None
        if mute:
            return
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            self.sound = pygame.mixer.Sound(buffer=self.square_wave(freq))
            self.sound.set_volume(volume)
        except pygame.error as e:
            if DEBUG: print(f"Sound disabled: {e}")
            self.sound = None

    @staticmethod
    def square_wave(freq):
        # modified from: https://gist.github.com/ohsqueezy/6540433
        rate, size, channels = pygame.mixer.get_init()
        period = int(round(rate / freq))
        amplitude = 2 ** (abs(size) - 1) - 1
        samples = array("h")
        for t in range(period):
            sample = amplitude if t < period / 2 else -amplitude
            samples.extend([sample] * channels)
        return samples

    def beep(self):
        if self.sound is not None:
            self.sound.play()


def handle_event(machine, event):
    """apply one pygame event to the machine, return False when the user wants to quit"""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key in KEY_MAPPINGS:
            machine.set_key(KEY_MAPPINGS[event.key], True)     # register keypress
    elif event.type == pygame.KEYUP:
        if event.key in KEY_MAPPINGS:
            machine.set_key(KEY_MAPPINGS[event.key], False)
    return True


# ******************** ENTRY POINT SECTION
def main(argv=None):
    args = get_args(argv)
    machine = Machine(seed=args.seed, strict=args.strict, timers_in_step=False)
    try:
        rom = load_rom(machine, args.file)
    except (OSError, Chip8Error) as e:
        sys.exit(f"Cannot load {args.file}: {e}")
    if args.disasm:
        print_disassembly(machine, rom)
        return

    # pygame initialization
    pygame.mixer.pre_init(44100, -16, 1, 1024)
    pygame.init()
    clock = pygame.time.Clock()
    pygame.display.set_caption(os.path.basename(args.file))
    pygame.time.set_timer(TIMER_EVENT, TIMER_INTERVAL)
    # IO
    s = Screen(s=args.scale)
    b = Buzzer(mute=args.mute)
    # emulation loop
    run = True
    try:
        while run:
            # instructions per second
            clock.tick(args.speed)
            # process user input
            # loop throught the event queue
            for event in pygame.event.get():
                if event.type == TIMER_EVENT:
                    if machine.tick_timers():
                        b.beep()
                elif not handle_event(machine, event):
                    run = False
            result = machine.step()     # emulate one machine cycle (fetch opcode, decode opcode, execute opcode)
            if not result.ok and not args.keep_going:
                sys.exit(f"********** THE EMULATOR STOPPED: {result.error}\n{machine}")
            if machine.redraw:
                s.render(machine.frame())
                s.refresh()
                machine.redraw = False
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
