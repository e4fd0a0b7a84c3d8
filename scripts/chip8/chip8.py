# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# COMPATIBILITY QUIRKS TABLE
# https://games.gulrak.net/cadmium/chip8-opcode-table.html#quirk6
#
# MASTERING CHIP-8
# https://github.com/mattmikolay/chip-8/wiki/Mastering-CHIP%E2%80%908
#
# This module is the interpreter core only: it owns the machine state and runs
# one fetch/decode/execute cycle per call to Machine.step(). Windowing, sound
# and keyboard polling live in chip8_pygame.py.


import os
import random
from collections import namedtuple
from functools import wraps


# ******************** STATIC SECTION
C8_FONTS = [0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80]  # F

FONT_GLYPH_SIZE = 5
MEMORY_SIZE = 4096
ROM_START_ADDRESS = 0x200
PROGRAM_CAPACITY = MEMORY_SIZE - ROM_START_ADDRESS
STACK_CAPACITY = 24
REGISTER_COUNT = 16
KEY_COUNT = 16
FLAG_REGISTER = 0xF
ADDRESS_LIMIT = 0xFFF
SCREEN_HEIGHT = 32
SCREEN_WIDTH = 64
TIMER_FREQ = 60     # Hz
DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False

# masks tried, in order, to turn an opcode into a key of Machine.instructions
# families not listed here are fully identified by their top nibble
DECODE_MASKS = {
    0x0000: (0xFFFF, 0xF000),
    0x5000: (0xF00F,),
    0x8000: (0xF00F,),
    0x9000: (0xF00F,),
    0xE000: (0xF0FF,),
    0xF000: (0xF0FF,),
}


# ******************** ERRORS SECTION
class Chip8Error(Exception):
    """base class of every error raised by the interpreter core"""


class ProgramTooLarge(Chip8Error):
    def __init__(self, size):
        super().__init__(f"Program of {size} bytes does not fit in the {PROGRAM_CAPACITY} bytes available")
        self.size = size


class StackOverflow(Chip8Error):
    pass


class StackUnderflow(Chip8Error):
    pass


class InvalidKeyIndex(Chip8Error):
    def __init__(self, index):
        super().__init__(f"Key index {index!r} is outside the 0x0-0xF keypad")
        self.index = index


class OutOfBoundsAccess(Chip8Error):
    pass


class UnknownOpcode(Chip8Error):
    def __init__(self, opcode):
        super().__init__(f"Unknown instruction: 0x{opcode:04x}")
        self.opcode = opcode


# ******************** UTILITIES SECTION
def asm(msg):
    """decorator to print out the ASM of the instruction being called"""
    def decorator(fn):
        @wraps(fn)
        def wrapper_fn(self, op):
            mem_addr = self.pc      # the handler may move pc, keep the address it was fetched from
            fn(self, op)
            if self.debug:
                print(f"mem_addr: 0x{mem_addr:04x}    instruction: " + msg.format(**op._asdict()))
        wrapper_fn.mnemonic = msg
        return wrapper_fn
    return decorator


class Opcode(namedtuple('Opcode', ['raw', 'x', 'y', 'n', 'nn', 'nnn'])):
    """a 16 bit instruction word split into its operand fields"""
    __slots__ = ()

    @classmethod
    def from_word(cls, word):
        word &= 0xFFFF
        return cls(word, (word & 0x0F00) >> 8, (word & 0x00F0) >> 4, word & 0x000F, word & 0x00FF, word & 0x0FFF)

    @property
    def family(self):
        return self.raw & 0xF000


class StepResult(namedtuple('StepResult', ['opcode', 'error', 'beep', 'waiting'])):
    """
    outcome of a single Machine.step() call
    opcode is None only when the fetch itself failed
    """
    __slots__ = ()

    @property
    def ok(self):
        return self.error is None


# ******************** I/O SECTION
# ********** 64x32 MONOCHROME FRAMEBUFFER, ONE BYTE PER PIXEL, ROW-MAJOR
class Display:
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = bytearray(w * h)

    def __getitem__(self, coordinates):
        x, y = coordinates
        if not (0 <= x < self.w and 0 <= y < self.h):
            raise OutOfBoundsAccess(f"Pixel ({x}, {y}) is outside the {self.w}x{self.h} screen")
        return self.buffer[y * self.w + x]

    def clear(self):
        self.buffer[:] = bytes(len(self.buffer))

    def xor_sprite(self, x, y, rows):
        """
        XOR an 8 pixel wide sprite onto the screen with its top-left corner at (x, y)
        pixels falling off the right or bottom edge are clipped, there is no wrap around
        return True if any pixel went from set to unset
        """
        collision = False
        for i, row in enumerate(rows):
            y_coordinate = y + i
            if y_coordinate >= self.h:
                break
            for j in range(8):
                x_coordinate = x + j
                if x_coordinate >= self.w:
                    break
                if row & (0x80 >> j):
                    loc = y_coordinate * self.w + x_coordinate
                    if self.buffer[loc]:
                        collision = True
                    self.buffer[loc] ^= 1
        return collision

    def snapshot(self):
        return bytes(self.buffer)

    def __str__(self):
        rows = (self.buffer[r * self.w:(r + 1) * self.w] for r in range(self.h))
        return "\n".join("".join("#" if p else "." for p in row) for row in rows)


# ********** 16 KEY HEX KEYPAD, ONLY THE HOST CHANGES IT
class Keypad:
    def __init__(self):
        self.pressed_keys = [False] * KEY_COUNT

    @staticmethod
    def _check(key):
        if not isinstance(key, int) or isinstance(key, bool) or not 0 <= key < KEY_COUNT:
            raise InvalidKeyIndex(key)

    def __getitem__(self, key):
        self._check(key)
        return self.pressed_keys[key]

    def __setitem__(self, key, value):
        self._check(key)
        self.pressed_keys[key] = bool(value)

    def untouched(self):
        return not any(self.pressed_keys)

    def first(self):
        """get the lowest-indexed key currently pressed, None if there's none"""
        for key, pressed in enumerate(self.pressed_keys):
            if pressed:
                return key
        return None

    def __str__(self):
        return "".join(f"{k:X}" if p else "-" for k, p in enumerate(self.pressed_keys))


# ******************** MEMORY SECTION
# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 24 ADDRESSES
class Stack:
    def __init__(self, capacity=STACK_CAPACITY):
        self.capacity = capacity
        self.addr_list = []

    @property
    def sp(self):
        """index of the next free slot"""
        return len(self.addr_list)

    def append(self, address):
        if len(self.addr_list) >= self.capacity:
            raise StackOverflow(f"The CHIP-8 stack can contain at most {self.capacity} addresses. Limit exceeded")
        self.addr_list.append(address)

    def pop(self):
        if not self.addr_list:
            raise StackUnderflow("Return with an empty CHIP-8 stack")
        return self.addr_list.pop()

    def clear(self):
        self.addr_list.clear()

    def __len__(self):
        return len(self.addr_list)

    def __str__(self):
        return "[" + ", ".join(f"0x{a:04x}" for a in self.addr_list) + "]"


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    def __init__(self, size=MEMORY_SIZE):
        self.size = size
        self.inner = bytearray(size)
        self.load_fonts()

    def check(self, address, count=1):
        if address < 0 or address + count > self.size:
            raise OutOfBoundsAccess(
                f"Access of {count} byte(s) at 0x{address:04x} is outside the 0x{self.size:04x} byte memory")

    def __getitem__(self, address):
        self.check(address)
        return self.inner[address]

    def __setitem__(self, address, value):
        self.check(address)
        self.inner[address] = value & 0xFF

    def __len__(self):
        return self.size

    def read(self, address, count):
        self.check(address, count)
        return bytes(self.inner[address:address + count])

    def write(self, address, data):
        data = bytes(data)
        self.check(address, len(data))
        self.inner[address:address + len(data)] = data

    def load_fonts(self):
        self.inner[0x00:0x00 + len(C8_FONTS)] = bytes(C8_FONTS)

    def clear(self):
        self.inner[:] = bytes(self.size)
        self.load_fonts()


# ******************** CPU SECTION
class Machine:
    """the CHIP-8 virtual machine, step() runs one fetch/decode/execute cycle and reports errors in its StepResult"""

    def __init__(self, rng=None, seed=None, strict=False, timers_in_step=True, debug=DEBUG):
        self.rng = rng if rng is not None else random.Random()
        self.seed = seed
        self.strict = strict
        self.timers_in_step = timers_in_step
        self.debug = debug
        self.mem = Memory()
        self.stack = Stack()
        self.display = Display()
        self.keypad = Keypad()
        self.v_regs = [0] * REGISTER_COUNT
        self.pc = ROM_START_ADDRESS
        self.idx = 0    # specify where the sprites reside in memory
        self.dt = 0     # delay timer, active when non-zero
        self.st = 0     # sound timer, active when non-zero
        self.redraw = False
        self.waiting_for_key = False
        self.instructions = {
            0x00E0: self._clear_screen,
            0x00EE: self._return,
            0x0000: self._call_machine_routine,
            0x1000: self._jump,
            0x2000: self._call_addr,
            0x3000: self._skip_if_eq,
            0x4000: self._skip_if_not_eq,
            0x5000: self._skip_if_eq_regs,
            0x6000: self._set_vk,
            0x7000: self._add_to_vk,
            0x8000: self._set_vx_to_vy,
            0x8001: self._set_vx_or_vy,
            0x8002: self._set_vx_and_vy,
            0x8003: self._set_vx_xor_vy,
            0x8004: self._add_vx_vy,
            0x8005: self._sub_vx_vy,
            0x8006: self._shr,
            0x8007: self._subn_vx_vy,
            0x800E: self._shl,
            0x9000: self._skip_if_not_eq_regs,
            0xA000: self._set_idx,
            0xB000: self._jump_plus,
            0xC000: self._random_byte_and,
            0xD000: self._to_screen,
            0xE09E: self._skip_if_pressed,
            0xE0A1: self._skip_if_not_pressed,
            0xF007: self._set_vx_dt,
            0xF00A: self._wait_keypress,
            0xF015: self._set_dt_vx,
            0xF018: self._set_st,
            0xF01E: self._add_to_idx,
            0xF029: self._select_char,
            0xF033: self._bcd_repr,
            0xF055: self._store_vregs,
            0xF065: self._load_vregs,
        }
        self.reset()

    def __str__(self):
        registers = f"PC_REGISTER:0x{self.pc:04x} | IDX_REGISTER:0x{self.idx:04x} | VARIABLE_REGISTERS:{self.v_regs}"
        stack = f"STACK:{self.stack}"
        timers = f"DT:{self.dt} | ST:{self.st}"
        flags = f"REDRAW:{self.redraw} | WAITING_FOR_KEY:{self.waiting_for_key} | KEYPAD:{self.keypad}"
        return f"{registers}\n{stack}\n{timers}\n{flags}"

    # ********** HOST INTERFACE
    def reset(self):
        """zero the whole machine, reload the font set and point pc at the program start"""
        self.mem.clear()
        self.stack.clear()
        self.display.clear()
        self.v_regs[:] = [0] * REGISTER_COUNT
        self.pc = ROM_START_ADDRESS
        self.idx = 0
        self.dt = 0
        self.st = 0
        self.waiting_for_key = False
        if self.seed is not None:
            self.rng.seed(self.seed)
        self.redraw = True      # the host has to show the cleared screen

    def load_program(self, data):
        """copy a raw CHIP-8 program at ROM_START_ADDRESS, raise ProgramTooLarge if it doesn't fit"""
        program = bytes(data)
        if len(program) > PROGRAM_CAPACITY:
            raise ProgramTooLarge(len(program))
        self.mem.write(ROM_START_ADDRESS, program)

    def set_key(self, index, pressed):
        self.keypad[index] = pressed

    def frame(self):
        """copy of the framebuffer, safe to hand over to another thread"""
        return self.display.snapshot()

    def pixel(self, x, y):
        return self.display[x, y]

    def tick_timers(self):
        """one 60Hz timer pass, return True if the sound timer asks for a beep"""
        beep = False
        if self.dt > 0:
            self.dt -= 1
        if self.st > 0:
            beep = self.st == 1
            self.st -= 1
        return beep

    def step(self):
        """run one fetch/decode/execute cycle, then (by default) one timer pass"""
        opcode, error = None, None
        self.waiting_for_key = False
        try:
            # fetch (each instruction is two bytes long)
            opcode = self.fetch()
            # decode + execute
            instruction = self.decode(opcode)
            instruction(opcode)
        except Chip8Error as e:
            error = e
        beep = self.tick_timers() if self.timers_in_step else False
        return StepResult(opcode, error, beep, self.waiting_for_key)

    # ********** FETCH / DECODE
    def fetch(self):
        high, low = self.mem.read(self.pc, 2)
        return Opcode.from_word(high << 8 | low)

    def decode(self, opcode):
        """
        decode opcodes using masks and return respective function
        in lenient mode unmapped opcodes decode to a no-op
        """
        if isinstance(opcode, int):
            opcode = Opcode.from_word(opcode)
        instruction = self._lookup(opcode)
        if instruction is not None:
            return instruction
        if self.strict:
            raise UnknownOpcode(opcode.raw)
        return self._unknown

    def _lookup(self, opcode):
        # WATCH OUT: masks order is important!!!
        # 0x00E0 and 0x00EE must be matched before the 0NNN catch-all
        for mask in DECODE_MASKS.get(opcode.family, (0xF000,)):
            instruction = self.instructions.get(opcode.raw & mask)
            if instruction is not None:
                return instruction
        return None

    def disassemble(self, word):
        opcode = Opcode.from_word(word)
        instruction = self._lookup(opcode) or self._unknown
        return instruction.mnemonic.format(**opcode._asdict())

    def disassemble_program(self, data, origin=ROM_START_ADDRESS):
        """yield (address, word, text) for every two bytes of data, a trailing odd byte is shown as DB"""
        data = bytes(data)
        for offset in range(0, len(data) - 1, 2):
            word = data[offset] << 8 | data[offset + 1]
            yield origin + offset, word, self.disassemble(word)
        if len(data) % 2:
            yield origin + len(data) - 1, data[-1], f"DB 0x{data[-1]:02x}"

    def _goto_next_instruction(self, skip=False):
        self.pc += 0x4 if skip else 0x2

    # ********** INSTRUCTIONS
    # every handler validates its operands before touching any state, so a raised
    # Chip8Error always leaves the machine exactly as it was before the instruction

    @asm("DW 0x{raw:04x}")
    def _unknown(self, opcode):
        self._goto_next_instruction()

    @asm("CLS")
    def _clear_screen(self, opcode):
        self.display.clear()
        self.redraw = True
        self._goto_next_instruction()

    @asm("RET")
    def _return(self, opcode):
        """return from a subroutine"""
        self.pc = self.stack.pop() + 2     # the stack holds the address of the call itself

    @asm("SYS 0x{nnn:03x}")
    def _call_machine_routine(self, opcode):
        """legacy RCA 1802 call, handled like a plain subroutine call"""
        self.stack.append(self.pc)
        self.pc = opcode.nnn

    @asm("JP 0x{nnn:03x}")
    def _jump(self, opcode):
        self.pc = opcode.nnn

    @asm("CALL 0x{nnn:03x}")
    def _call_addr(self, opcode):
        self.stack.append(self.pc)
        self.pc = opcode.nnn

    @asm("SE V{x:X}, 0x{nn:02x}")
    def _skip_if_eq(self, opcode):
        self._goto_next_instruction(skip=self.v_regs[opcode.x] == opcode.nn)

    @asm("SNE V{x:X}, 0x{nn:02x}")
    def _skip_if_not_eq(self, opcode):
        self._goto_next_instruction(skip=self.v_regs[opcode.x] != opcode.nn)

    @asm("SE V{x:X}, V{y:X}")
    def _skip_if_eq_regs(self, opcode):
        self._goto_next_instruction(skip=self.v_regs[opcode.x] == self.v_regs[opcode.y])

    @asm("SNE V{x:X}, V{y:X}")
    def _skip_if_not_eq_regs(self, opcode):
        self._goto_next_instruction(skip=self.v_regs[opcode.x] != self.v_regs[opcode.y])

    @asm("LD V{x:X}, 0x{nn:02x}")
    def _set_vk(self, opcode):
        """set the value of one of the 16 variable registers, Vx"""
        self.v_regs[opcode.x] = opcode.nn
        self._goto_next_instruction()

    @asm("ADD V{x:X}, 0x{nn:02x}")
    def _add_to_vk(self, opcode):
        """add to the value already present in one of the variable registers, VF untouched"""
        self.v_regs[opcode.x] = (self.v_regs[opcode.x] + opcode.nn) & 0xFF
        self._goto_next_instruction()

    @asm("LD V{x:X}, V{y:X}")
    def _set_vx_to_vy(self, opcode):
        self.v_regs[opcode.x] = self.v_regs[opcode.y]
        self._goto_next_instruction()

    @asm("OR V{x:X}, V{y:X}")
    def _set_vx_or_vy(self, opcode):
        self.v_regs[opcode.x] |= self.v_regs[opcode.y]
        self._goto_next_instruction()

    @asm("AND V{x:X}, V{y:X}")
    def _set_vx_and_vy(self, opcode):
        self.v_regs[opcode.x] &= self.v_regs[opcode.y]
        self._goto_next_instruction()

    @asm("XOR V{x:X}, V{y:X}")
    def _set_vx_xor_vy(self, opcode):
        self.v_regs[opcode.x] ^= self.v_regs[opcode.y]
        self._goto_next_instruction()

    # for the flag setting arithmetic VF is written last, so it wins when x is F

    @asm("ADD V{x:X}, V{y:X}")
    def _add_vx_vy(self, opcode):
        """set Vx = Vx + Vy, VF = carry"""
        total = self.v_regs[opcode.x] + self.v_regs[opcode.y]
        self.v_regs[opcode.x] = total & 0xFF    # keep only the lowest 8 bits from the result and store them in Vx
        self.v_regs[FLAG_REGISTER] = 1 if total > 0xFF else 0
        self._goto_next_instruction()

    @asm("SUB V{x:X}, V{y:X}")
    def _sub_vx_vy(self, opcode):
        """set Vx = Vx - Vy, VF = NOT borrow"""
        vx, vy = self.v_regs[opcode.x], self.v_regs[opcode.y]
        self.v_regs[opcode.x] = (vx - vy) & 0xFF
        self.v_regs[FLAG_REGISTER] = 1 if vx >= vy else 0
        self._goto_next_instruction()

    @asm("SHR V{x:X}, V{y:X}")
    def _shr(self, opcode):
        """set Vx = Vy SHR 1, VF = bit shifted out"""
        vy = self.v_regs[opcode.y]
        self.v_regs[opcode.x] = vy >> 1
        self.v_regs[FLAG_REGISTER] = vy & 0x1
        self._goto_next_instruction()

    @asm("SUBN V{x:X}, V{y:X}")
    def _subn_vx_vy(self, opcode):
        """set Vx = Vy - Vx, VF = NOT borrow"""
        vx, vy = self.v_regs[opcode.x], self.v_regs[opcode.y]
        self.v_regs[opcode.x] = (vy - vx) & 0xFF
        self.v_regs[FLAG_REGISTER] = 1 if vy >= vx else 0
        self._goto_next_instruction()

    @asm("SHL V{x:X}, V{y:X}")
    def _shl(self, opcode):
        """set Vx = Vy = Vy SHL 1"""
        # quirk: VF is NOT loaded with the bit shifted out
        self.v_regs[opcode.x] = self.v_regs[opcode.y] = (self.v_regs[opcode.y] << 1) & 0xFF
        self._goto_next_instruction()

    @asm("LD I, 0x{nnn:03x}")
    def _set_idx(self, opcode):
        self.idx = opcode.nnn
        self._goto_next_instruction()

    @asm("JP V0, 0x{nnn:03x}")
    def _jump_plus(self, opcode):
        self.pc = opcode.nnn + self.v_regs[0x0]

    @asm("RND V{x:X}, 0x{nn:02x}")
    def _random_byte_and(self, opcode):
        self.v_regs[opcode.x] = self.rng.randint(0, 0xFF) & opcode.nn
        self._goto_next_instruction()

    @asm("DRW V{x:X}, V{y:X}, {n}")
    def _to_screen(self, opcode):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        sprite = self.mem.read(self.idx, opcode.n)
        collision = self.display.xor_sprite(self.v_regs[opcode.x], self.v_regs[opcode.y], sprite)
        self.v_regs[FLAG_REGISTER] = 1 if collision else 0
        self.redraw = True
        self._goto_next_instruction()

    def _key_in(self, x):
        key = self.v_regs[x]
        if key >= KEY_COUNT:
            raise OutOfBoundsAccess(f"V{x:X} holds 0x{key:02x}, which is not a key of the keypad")
        return key

    @asm("SKP V{x:X}")
    def _skip_if_pressed(self, opcode):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        self._goto_next_instruction(skip=self.keypad[self._key_in(opcode.x)])

    @asm("SKNP V{x:X}")
    def _skip_if_not_pressed(self, opcode):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        self._goto_next_instruction(skip=not self.keypad[self._key_in(opcode.x)])

    @asm("LD V{x:X}, DT")
    def _set_vx_dt(self, opcode):
        self.v_regs[opcode.x] = self.dt
        self._goto_next_instruction()

    @asm("LD V{x:X}, K")
    def _wait_keypress(self, opcode):
        """wait for a key press and store its value in Vx"""
        key = self.keypad.first()
        if key is None:
            self.waiting_for_key = True     # stay on the same instruction until a key is pressed
            return
        self.v_regs[opcode.x] = key
        self._goto_next_instruction()

    @asm("LD DT, V{x:X}")
    def _set_dt_vx(self, opcode):
        self.dt = self.v_regs[opcode.x]
        self._goto_next_instruction()

    @asm("LD ST, V{x:X}")
    def _set_st(self, opcode):
        self.st = self.v_regs[opcode.x]
        self._goto_next_instruction()

    @asm("ADD I, V{x:X}")
    def _add_to_idx(self, opcode):
        """set I = I + Vx, VF = 1 when the result leaves the 12 bit address space"""
        total = self.idx + self.v_regs[opcode.x]
        self.idx = total & 0xFFFF
        self.v_regs[FLAG_REGISTER] = 1 if total > ADDRESS_LIMIT else 0
        self._goto_next_instruction()

    @asm("LD F, V{x:X}")
    def _select_char(self, opcode):
        """set I to location of sprite for digit Vx"""
        self.idx = self.v_regs[opcode.x] * FONT_GLYPH_SIZE
        self._goto_next_instruction()

    @asm("LD B, V{x:X}")
    def _bcd_repr(self, opcode):
        """hundreds digit of Vx in memory at I, the tens digit at I+1, the ones digit at I+2"""
        value = self.v_regs[opcode.x]
        self.mem.write(self.idx, (value // 100, value // 10 % 10, value % 10))
        self._goto_next_instruction()

    @asm("LD [I], V{x:X}")
    def _store_vregs(self, opcode):
        """store registers V0 through Vx (included) in memory starting at location I"""
        self.mem.write(self.idx, self.v_regs[:opcode.x + 1])
        self.idx = (self.idx + opcode.x + 1) & 0xFFFF     # compatibility quirk 6
        self._goto_next_instruction()

    @asm("LD V{x:X}, [I]")
    def _load_vregs(self, opcode):
        """read registers V0 through Vx (included) from memory starting at location I"""
        self.v_regs[:opcode.x + 1] = self.mem.read(self.idx, opcode.x + 1)
        self.idx = (self.idx + opcode.x + 1) & 0xFFFF     # compatibility quirk 6
        self._goto_next_instruction()
