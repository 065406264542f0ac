class HandError(Exception):
    pass


class HandSyntaxError(HandError):
    def __init__(self, message: str, line: int | None = None, column: int | None = None, offset: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.offset = offset  # instruction offset, for loop marker errors

    def __str__(self) -> str:
        if self.line is None:
            return f"Syntax error: {self.message}"
        return f"Syntax error: {self.message} at line {self.line}, col {self.column}"


class HandRuntimeError(HandError):
    def __init__(self, message: str, ip: int | None = None, cursor: int | None = None, location=None, output=b""):
        super().__init__(message)
        self.message = message
        self.ip = ip
        self.cursor = cursor
        location = location or {}
        self.line = location.get("line")
        self.column = location.get("column")
        self.output = bytes(output)  # whatever was emitted before the failure

    def format(self, indent: str = "") -> str:
        lines = [f"{indent}Runtime error: {self.message}"]
        if self.ip is not None:
            lines.append(f"{indent}  ip={self.ip:04d} cursor={self.cursor}")
        if self.line is not None:
            lines.append(f"{indent}  at line {self.line}, col {self.column}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()


class CursorUnderflowError(HandRuntimeError):
    pass


class JumpTableMissError(HandRuntimeError):
    pass


class StepLimitExceeded(HandRuntimeError):
    pass
