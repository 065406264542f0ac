from errors import HandSyntaxError
from program import HandProgram


# symbol -> instruction tag
SYMBOLS = {
    "👉": "NEXT",
    "👈": "PREVIOUS",
    "👆": "INCREMENT",
    "👇": "DECREASE",
    "🤜": "LOOP_START",
    "🤛": "LOOP_END",
    "👊": "PRINT",
}

INSTRUCTIONS = tuple(SYMBOLS.values())

# tag -> symbol, for listings and error messages
GLYPHS = {tag: symbol for symbol, tag in SYMBOLS.items()}

WHITESPACE = " \t\r\n"


class Token:
    def __init__(self, type, line=1, column=1):
        self.type = type
        self.line = line
        self.column = column

    def __repr__(self):
        return f"{self.type}@{self.line}:{self.column}"


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line, self.column = 1, 1
        self.current_char = text[0] if text else None

    def advance(self):
        # columns count characters, so each emoji is one column wide
        if self.current_char == "\n":
            self.line, self.column = self.line + 1, 1
        else:
            self.column += 1
        self.pos += 1
        self.current_char = self.text[self.pos] if self.pos < len(self.text) else None

    def skip_whitespace(self):
        while self.current_char and self.current_char in WHITESPACE:
            self.advance()

    def get_next_token(self):
        while self.current_char:
            if self.current_char in WHITESPACE:
                self.skip_whitespace()
                continue

            tag = SYMBOLS.get(self.current_char)
            if tag is None:
                raise HandSyntaxError(f"Unknown symbol {self.current_char!r}", line=self.line, column=self.column)

            token = Token(tag, line=self.line, column=self.column)
            self.advance()
            return token

        return Token("EOF", line=self.line, column=self.column)

    def tokenize(self):
        instructions = []
        debug = []
        token = self.get_next_token()
        while token.type != "EOF":
            instructions.append(token.type)
            debug.append({"line": token.line, "column": token.column})
            token = self.get_next_token()
        return HandProgram(instructions, debug)


def tokenize(text):
    """Turn Hand source text into a HandProgram, rejecting unknown symbols."""
    return Lexer(text).tokenize()
