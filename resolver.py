from errors import HandSyntaxError
from lexer import GLYPHS, tokenize


class LoopResolver:
    def __init__(self, program):
        self.program = program
        self.loop_stack = []   # offsets of pending LOOP_START markers
        self.jumps = {}

    def _error(self, message, offset):
        loc = self.program.location(offset) or {}
        return HandSyntaxError(message, line=loc.get("line"), column=loc.get("column"), offset=offset)

    def resolve(self):
        self.loop_stack = []
        self.jumps = {}

        for offset, ins in enumerate(self.program):
            if ins == "LOOP_START":
                self.loop_stack.append(offset)
            elif ins == "LOOP_END":
                if not self.loop_stack:
                    raise self._error(f"Unmatched {GLYPHS['LOOP_END']} at offset {offset}", offset)
                start = self.loop_stack.pop()
                self.jumps[start] = offset
                self.jumps[offset] = start

        if self.loop_stack:
            # innermost one is the most useful to report
            offset = self.loop_stack[-1]
            raise self._error(f"Unmatched {GLYPHS['LOOP_START']} at offset {offset}", offset)

        return dict(self.jumps)


def resolve_loops(program):
    """Build the bidirectional jump table for every matched loop marker pair.

    Raises HandSyntaxError for an unmatched LOOP_END or LOOP_START, so a
    malformed program never reaches the VM.
    """
    return LoopResolver(program).resolve()


def load(text):
    program = tokenize(text)
    return program, resolve_loops(program)
