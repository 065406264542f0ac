import sys

from errors import (
    CursorUnderflowError,
    HandRuntimeError,
    JumpTableMissError,
    StepLimitExceeded,
)
from resolver import load


class VM:
    def __init__(self, program, jumps, writer=None, max_steps: int | None = None):
        self.instructions = list(program.instructions)
        self.debug = list(program.debug)
        self.jumps = dict(jumps)

        self.writer = writer          # anything with write(bytes); None keeps output in memory only
        self.max_steps = max_steps    # set to an int to guard against infinite loops

        self.ip = 0                   # instruction pointer (where we are)
        self.tape = bytearray(1)      # grows to the right only
        self.cursor = 0
        self.output = bytearray()     # every byte emitted so far

        self.trace_enabled = False
        self.trace_stream = sys.stderr

    def _location_for_ip(self, ip: int):
        if ip < 0 or ip >= len(self.debug):
            return None
        return self.debug[ip]

    def _error(self, cls, message: str):
        return cls(
            message,
            ip=self.ip,
            cursor=self.cursor,
            location=self._location_for_ip(self.ip),
            output=self.output,
        )

    def jump_target(self) -> int:
        target = self.jumps.get(self.ip)
        if target is None:
            raise self._error(JumpTableMissError, f"No jump target for loop marker at ip {self.ip}")
        return target

    def emit(self, value: int):
        self.output.append(value)
        if self.writer is not None:
            self.writer.write(bytes((value,)))

    def link_program(self, program, jumps):
        # Appends another program after the current one, keeping tape and cursor.
        base_ip = len(self.instructions)

        self.instructions.extend(program.instructions)
        self.debug.extend(program.debug)
        for src, dst in jumps.items():
            self.jumps[src + base_ip] = dst + base_ip

        return base_ip, len(self.instructions)

    def step(self):
        ins = self.instructions[self.ip]

        if self.trace_enabled:
            print(
                f"TRACE ip={self.ip:04d} {ins} cursor={self.cursor} cell={self.tape[self.cursor]}",
                file=self.trace_stream,
            )

        if ins == "NEXT":
            self.cursor += 1
            if self.cursor >= len(self.tape):
                self.tape.append(0)

        elif ins == "PREVIOUS":
            # checked before moving: the cursor never goes below 0
            if self.cursor == 0:
                raise self._error(CursorUnderflowError, "Cursor underflow: cannot move left of cell 0")
            self.cursor -= 1

        elif ins == "INCREMENT":
            self.tape[self.cursor] = (self.tape[self.cursor] + 1) % 256

        elif ins == "DECREASE":
            self.tape[self.cursor] = (self.tape[self.cursor] - 1) % 256

        elif ins == "LOOP_START":
            if self.tape[self.cursor] == 0:
                self.ip = self.jump_target()

        elif ins == "LOOP_END":
            if self.tape[self.cursor] != 0:
                self.ip = self.jump_target()

        elif ins == "PRINT":
            self.emit(self.tape[self.cursor])

        else:
            raise self._error(HandRuntimeError, f"Unknown instruction: {ins}")

        # a taken jump lands on the partner marker, so this moves one past it
        self.ip += 1

    def run_range(self, start_ip: int, end_ip: int) -> bytes:
        self.ip = start_ip
        first = len(self.output)
        steps = 0
        try:
            while start_ip <= self.ip < end_ip:
                if self.max_steps is not None:
                    steps += 1
                    if steps > self.max_steps:
                        raise self._error(
                            StepLimitExceeded,
                            f"Step limit exceeded after {self.max_steps} steps (possible infinite loop)",
                        )
                self.step()
        finally:
            flush = getattr(self.writer, "flush", None)
            if flush is not None:
                flush()
        return bytes(self.output[first:])

    def run(self) -> bytes:
        return self.run_range(0, len(self.instructions))


def run(text, writer=None, max_steps=None) -> bytes:
    """Lex, resolve and execute Hand source, returning the emitted bytes.

    Syntax errors are raised before anything runs. A runtime error carries
    the bytes emitted up to the failure on its ``output`` attribute.
    """
    program, jumps = load(text)
    return VM(program, jumps, writer=writer, max_steps=max_steps).run()
