import sys
import traceback

from colorama import Fore, Style, just_fix_windows_console

from errors import HandError, HandSyntaxError
from lexer import GLYPHS, tokenize
from program import HandProgram
from resolver import load
from vm import VM


USAGE = """Usage:
  python cli.py parse <file.hand>
  python cli.py build <file.hand>
  python cli.py run [<file.hand> | -]   (reads standard input without a file)
  python cli.py repl
  (optional) --debug to show Python traceback
  (optional) --trace to print every executed instruction to stderr
  (optional) --max-steps N to stop runaway loops"""


class StdoutSink:
    # raw bytes to stdout without losing text already printed (prompts)
    def write(self, data):
        sys.stdout.flush()
        sys.stdout.buffer.write(data)

    def flush(self):
        sys.stdout.buffer.flush()


def report_error(e, debug: bool = False):
    if debug:
        traceback.print_exc()
        return
    if not sys.stderr.isatty():
        print(e, file=sys.stderr)
        return
    just_fix_windows_console()
    print(f"{Fore.RED}{e}{Style.RESET_ALL}", file=sys.stderr)


def read_source(path):
    if path is None or path == "-":
        raw = sys.stdin.buffer.read()
    else:
        with open(path, "rb") as f:
            raw = f.read()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HandSyntaxError(f"Source is not valid UTF-8 (byte {e.start})") from e


def cmd_parse(path, debug: bool = False):
    try:
        program = tokenize(read_source(path))
    except (HandError, OSError) as e:
        report_error(e, debug)
        sys.exit(1)

    for i, ins in enumerate(program):
        loc = program.location(i)
        print(f"  {i:04d}  {loc['line']}:{loc['column']}  {GLYPHS[ins]}  {ins}")


def cmd_build(path, debug: bool = False):
    try:
        program, jumps = load(read_source(path))
    except (HandError, OSError) as e:
        report_error(e, debug)
        sys.exit(1)

    print("INSTRUCTIONS:")
    for i, ins in enumerate(program):
        print(f"  {i:04d}  {ins}")

    print("\nJUMPS:")
    for src in sorted(jumps):
        print(f"  {src:04d} -> {jumps[src]:04d}")


def cmd_run(path, debug: bool = False, trace: bool = False, max_steps=None):
    try:
        program, jumps = load(read_source(path))
        vm = VM(program, jumps, writer=StdoutSink(), max_steps=max_steps)
        vm.trace_enabled = trace
        vm.run()
    except (HandError, OSError) as e:
        report_error(e, debug)
        sys.exit(1)


def cmd_repl(debug: bool = False, trace: bool = False, max_steps=None):
    # One VM for the whole session so the tape survives between lines.
    vm = VM(HandProgram(), {}, writer=StdoutSink(), max_steps=max_steps)
    vm.trace_enabled = trace

    if hasattr(sys.stdin, "reconfigure"):
        # undecodable bytes become U+FFFD, which the lexer rejects per line
        sys.stdin.reconfigure(encoding="utf-8", errors="replace")

    print("Hand REPL. Type :q to quit.")

    while True:
        try:
            line = input("hand> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if stripped in (":q", ":quit", "quit", "exit"):
            break
        if not stripped:
            continue

        try:
            program, jumps = load(line)
            start_ip, end_ip = vm.link_program(program, jumps)
            out = vm.run_range(start_ip, end_ip)
        except HandError as e:
            report_error(e, debug)
            continue

        if out and not out.endswith(b"\n"):
            print()


def _pop_flag(argv, flag):
    if flag in argv:
        argv.remove(flag)
        return True
    return False


def _pop_max_steps(argv):
    if "--max-steps" not in argv:
        return None
    i = argv.index("--max-steps")
    if i + 1 >= len(argv):
        print("--max-steps needs a number")
        sys.exit(1)
    raw = argv[i + 1]
    del argv[i : i + 2]
    try:
        value = int(raw)
    except ValueError:
        print(f"--max-steps needs a number, got {raw}")
        sys.exit(1)
    if value <= 0:
        print("--max-steps must be positive")
        sys.exit(1)
    return value


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    debug = _pop_flag(argv, "--debug")
    trace = _pop_flag(argv, "--trace")
    max_steps = _pop_max_steps(argv)

    if not argv:
        print(USAGE)
        sys.exit(1)

    cmd = argv[0]
    rest = argv[1:]

    if cmd == "repl":
        if rest:
            print(USAGE)
            sys.exit(1)
        cmd_repl(debug=debug, trace=trace, max_steps=max_steps)
        return

    if cmd == "run":
        if len(rest) > 1:
            print("Run accepts at most one file.")
            sys.exit(1)
        cmd_run(rest[0] if rest else None, debug=debug, trace=trace, max_steps=max_steps)
        return

    if cmd not in ("parse", "build"):
        print(f"Unknown command: {cmd}")
        sys.exit(1)

    if len(rest) != 1:
        print(USAGE)
        sys.exit(1)

    if cmd == "parse":
        cmd_parse(rest[0], debug=debug)
    else:
        cmd_build(rest[0], debug=debug)


if __name__ == "__main__":
    main()
