"""Quick script to scan a single example line for palindromes
and print structured output.

Usage (from repo root, with venv active):
  python -m scripts.quick_scan_example
"""
from pprint import pprint

from hebpal.pipeline.letters import build_stream
from hebpal.pipeline.scanner import scan_palindromes, select_maximal

EXAMPLE_LINE = "הבא נא אבא אליך כי לא ידע כי כלתו היא"


def run_example(line: str):
    stream = build_stream(line)
    results = scan_palindromes(line, 3, 50)
    return {
        "raw_text": line,
        "letters": stream.letters,
        "positions": list(stream.positions),
        "palindromes": [r.model_dump() for r in results],
        "maximal": [r.normalized for r in select_maximal(results)],
    }


if __name__ == "__main__":
    out = run_example(EXAMPLE_LINE)
    pprint(out, width=120, compact=False)
