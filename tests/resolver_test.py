from errors import HandSyntaxError
from lexer import tokenize
from resolver import load, resolve_loops


def test_simple_loop_pair():
    jumps = resolve_loops(tokenize("👆🤜👇🤛"))
    if jumps != {1: 3, 3: 1}:
        raise AssertionError(f"Unexpected jumps: {jumps}")


def test_nested_and_adjacent_loops():
    #            0 1 2 3 4 5 6 7
    program = tokenize("🤜🤜🤛🤜🤛🤛🤜🤛")
    jumps = resolve_loops(program)
    expected = {0: 5, 5: 0, 1: 2, 2: 1, 3: 4, 4: 3, 6: 7, 7: 6}
    if jumps != expected:
        raise AssertionError(f"Unexpected jumps: {jumps}")


def test_table_is_symmetric_and_only_covers_markers():
    program = tokenize("👆🤜👉🤜👆👇🤛👈👇🤛👊")
    jumps = resolve_loops(program)
    for src, dst in jumps.items():
        if jumps[dst] != src:
            raise AssertionError(f"Asymmetric pair {src} -> {dst}")
        if program[src] not in ("LOOP_START", "LOOP_END"):
            raise AssertionError(f"Entry for non-marker at {src}")
        start, end = min(src, dst), max(src, dst)
        if program[start] != "LOOP_START" or program[end] != "LOOP_END":
            raise AssertionError(f"Pair {start}, {end} is not start/end")
    markers = [i for i, ins in enumerate(program) if ins in ("LOOP_START", "LOOP_END")]
    if sorted(jumps) != markers:
        raise AssertionError(f"Missing entries: {sorted(jumps)} vs {markers}")


def test_resolving_twice_gives_the_same_table():
    program = tokenize("🤜🤜👆🤛👉🤜🤛🤛")
    if resolve_loops(program) != resolve_loops(program):
        raise AssertionError("Resolver is not idempotent")


def test_unmatched_loop_end_is_rejected():
    try:
        load("🤛")
    except HandSyntaxError as e:
        if e.offset != 0 or (e.line, e.column) != (1, 1):
            raise AssertionError(f"Wrong location: offset={e.offset} line={e.line} col={e.column}")
    else:
        raise AssertionError("Expected HandSyntaxError for unmatched 🤛")


def test_unmatched_loop_end_after_balanced_pair():
    try:
        resolve_loops(tokenize("🤜🤛🤛"))
    except HandSyntaxError as e:
        if e.offset != 2:
            raise AssertionError(f"Wrong offset: {e.offset}")
    else:
        raise AssertionError("Expected HandSyntaxError")


def test_unmatched_loop_start_is_rejected():
    try:
        resolve_loops(tokenize("🤜🤜🤛"))
    except HandSyntaxError as e:
        if e.offset != 0:
            raise AssertionError(f"Wrong offset: {e.offset}")
        if "Unmatched" not in str(e):
            raise AssertionError(f"Unexpected message: {e}")
    else:
        raise AssertionError("Expected HandSyntaxError for unmatched 🤜")


def test_program_without_loops_has_empty_table():
    if resolve_loops(tokenize("👆👉👊")) != {}:
        raise AssertionError("Expected empty jump table")


if __name__ == "__main__":
    test_simple_loop_pair()
    test_nested_and_adjacent_loops()
    test_table_is_symmetric_and_only_covers_markers()
    test_resolving_twice_gives_the_same_table()
    test_unmatched_loop_end_is_rejected()
    test_unmatched_loop_end_after_balanced_pair()
    test_unmatched_loop_start_is_rejected()
    test_program_without_loops_has_empty_table()
    print("ok")
