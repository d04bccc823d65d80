from timeit import timeit

from malt.reader.parser import tokenize, read


def time_tokenize(code: str, rounds: int) -> float:
    """Time the tokenizer alone on one line."""
    tokenize(code)  # Warmup
    return timeit(lambda: tokenize(code), number=rounds)


def time_read(code: str, rounds: int) -> float:
    """Time the parser alone: tokenize once, then repeatedly read the same tokens."""
    tokens = tokenize(code)
    read(tokens)  # Warmup
    return timeit(lambda: read(tokens), number=rounds)


FLAT_LIST_CODE = "(" + " ".join(f"item-{i}" for i in range(200)) + ")"

NESTED_CODE = "(" * 100 + "x" + ")" * 100

# Every reader macro plus all three collection kinds
SUGAR_CODE = r"""`(let [a ~x b ~@ys] ^{"doc" "meta"} (swap! @state 'inc))"""

STRING_HEAVY_CODE = " ".join(['"a string with \\"escaped\\" quotes"'] * 50)


def _print_pair(name: str, code: str, rounds: int) -> None:
    ttok = time_tokenize(code, rounds)
    tread = time_read(code, rounds)
    print(f"Benchmark: {name}")
    print(f"  tokenize: {ttok:.6f}s  |  read (parse only): {tread:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    _print_pair("flat list of 200 atoms", FLAT_LIST_CODE, rounds=2000)
    _print_pair("100 nested lists", NESTED_CODE, rounds=2000)
    _print_pair("reader macro sugar", SUGAR_CODE, rounds=20000)
    _print_pair("50 escaped strings", STRING_HEAVY_CODE, rounds=2000)
