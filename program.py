class HandProgram:
    def __init__(self, instructions=(), debug=None):
        self.instructions = tuple(instructions)   # instruction tags, e.g. "NEXT", "LOOP_START"
        if debug is None:
            debug = [None] * len(self.instructions)
        self.debug = tuple(debug)                 # {"line": int, "column": int} aligned with instructions

        if len(self.debug) != len(self.instructions):
            raise ValueError("debug info must be aligned with instructions")

    def __len__(self):
        return len(self.instructions)

    def __getitem__(self, index):
        return self.instructions[index]

    def __iter__(self):
        return iter(self.instructions)

    def __eq__(self, other):
        if not isinstance(other, HandProgram):
            return NotImplemented
        return self.instructions == other.instructions

    def __hash__(self):
        return hash(self.instructions)

    def __repr__(self):
        return f"HandProgram({list(self.instructions)!r})"

    def location(self, offset):
        # debug record for an instruction offset (None when unknown)
        if offset < 0 or offset >= len(self.debug):
            return None
        return self.debug[offset]
