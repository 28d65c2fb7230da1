#!/usr/bin/env python3
"""
Random fuzzer for the markupnodes transform pipeline.
Generates invalid/malformed HTML and checks that every document transforms
without raising and produces a structurally valid node tree.
"""

import argparse
import random
import string
import sys
import time
import traceback

from markupnodes import TransformOptions, transform_html
from markupnodes.tags import TAG_MAP

# Fuzzing strategies
MAPPED_TAGS = sorted(TAG_MAP)
UNMAPPED_TAGS = [
    "script", "style", "iframe", "object", "embed", "form", "input", "button", "select",
    "textarea", "video", "audio", "canvas", "svg", "math", "template", "noscript", "marquee",
]
FORMATTING_TAGS = ["b", "strong", "i", "em", "u", "code"]
BLOCK_TAGS = ["div", "p", "section", "article", "blockquote", "pre", "h1", "h2", "h3"]

ATTRIBUTES = ["id", "class", "style", "src", "width", "height", "href", "alt", "title", "data-x"]

STYLE_DECLARATIONS = [
    "color: red",
    "font-size: 16px",
    "width: 50%",
    "height: 10px",
    "-webkit-transform: none",
    "--brand: #fff",
    "background: url(http://example.com/a.png)",
    "color",  # Missing colon
    ": red",  # Missing name
    "width:",  # Missing value
    "",
    ";;;",
    "COLOR: Blue",
]

SPECIAL_CHARS = [
    "\x00", "\x0b", "\x0c", "\x7f",  # Control chars
    "�",  # Replacement character
    " ",  # Non-breaking space
    " ", " ",  # Line/paragraph separators
    "​",  # Zero-width space
    "﻿",  # BOM
]

ENTITIES = ["&amp;", "&lt;", "&gt;", "&nbsp;", "&", "&amp", "&#x1f;", "&#99999999;", "&unknown;"]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def fuzz_style_value():
    """Generate a style attribute value, often malformed."""
    count = random.randint(0, 5)
    return "; ".join(random.choice(STYLE_DECLARATIONS) for _ in range(count))


def fuzz_attribute():
    """Generate one attribute, possibly malformed."""
    name = random.choice(ATTRIBUTES)
    if name == "style":
        value = fuzz_style_value()
    elif name in ("width", "height"):
        value = random.choice(["100", "50%", "", "auto", random_string(0, 5)])
    else:
        value = random_string(0, 20)

    quote_styles = [('="', '"'), ("='", "'"), ("=", ""), ("", ""), ('="', "")]
    quote_start, quote_end = random.choice(quote_styles)
    if not quote_start:
        return name
    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_tag_name():
    """Pick a tag name, mostly ones the transform knows about."""
    strategies = [
        lambda: random.choice(MAPPED_TAGS),
        lambda: random.choice(MAPPED_TAGS),
        lambda: random.choice(FORMATTING_TAGS),
        lambda: random.choice(UNMAPPED_TAGS),
        lambda: random.choice(MAPPED_TAGS).upper(),
        lambda: random_string(1, 8),
    ]
    return random.choice(strategies)()


def fuzz_text():
    """Generate text content with edge cases."""
    strategies = [
        lambda: random_string(1, 30),
        lambda: " " + random_string(1, 10) + " ",
        lambda: random.choice(ENTITIES),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 5))),
        lambda: "<" + random_string(1, 5),  # Incomplete tag
        lambda: " " * random.randint(1, 20),  # Whitespace only
        lambda: "\r\n" * random.randint(1, 3),
        lambda: "<br>",
        lambda: " <br/> ",
    ]
    return random.choice(strategies)()


def fuzz_nested_structure(depth=0, max_depth=8):
    """Generate nested (possibly invalid) structure."""
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()

    tag = fuzz_tag_name()
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 3)))
    open_tag = f"<{tag} {attrs}>" if attrs else f"<{tag}>"
    children = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))

    # Sometimes don't close tags
    if random.random() < 0.2:
        return f"{open_tag}{children}"
    # Sometimes mismatch tags
    if random.random() < 0.1:
        return f"{open_tag}{children}</{fuzz_tag_name()}>"
    return f"{open_tag}{children}</{tag}>"


def fuzz_formatting_runs():
    """Generate overlapping and misnested inline formatting."""
    a = random.choice(FORMATTING_TAGS)
    b = random.choice(FORMATTING_TAGS)
    block = random.choice(BLOCK_TAGS)
    variants = [
        f"<{a}>text<{block}>more</{a}>content</{block}>",
        f"<{a}><{b}>x</{a}>y</{b}>",
        f"<{a}></{a}>",
        f"<{a}>one<br>two<br><br>three</{a}>",
        f"<{block}><{a}>a</{a}><{b}>b</{b}> c </{block}>",
        f"<{a}>" * 5 + "deep" + f"</{a}>" * 3,
    ]
    return random.choice(variants)


def fuzz_list():
    """Generate lists with odd children."""
    kind = random.choice(["ul", "ol"])
    items = []
    for _ in range(random.randint(0, 5)):
        item = random.choice([
            f"<li>{random_string(1, 10)}</li>",
            f"<li><p>{random_string(1, 10)}</p></li>",
            "<li></li>",
            f"<li>{fuzz_formatting_runs()}</li>",
            f"<p>{random_string(1, 5)}</p>",  # Non-item child
            f"<li>{fuzz_list() if random.random() < 0.3 else 'x'}</li>",
        ])
        items.append(item)
    return f"<{kind}>{''.join(items)}</{kind}>"


def fuzz_table():
    """Generate tables with and without sections."""
    def row():
        cells = "".join(f"<{random.choice(['td', 'th'])}>{random_string(0, 5)}</td>" for _ in range(random.randint(0, 3)))
        return f"<tr>{cells}</tr>"

    sections = []
    for section in random.sample(["thead", "tbody", "tfoot", None], k=random.randint(1, 4)):
        rows = "".join(row() for _ in range(random.randint(0, 3)))
        sections.append(f"<{section}>{rows}</{section}>" if section else rows)
    return f"<table>{''.join(sections)}</table>"


def fuzz_image():
    """Generate images with every sizing combination."""
    attrs = [fuzz_attribute() for _ in range(random.randint(0, 4))]
    if random.random() < 0.7:
        attrs.append(f'src="{random_string(1, 10)}.png"')
    random.shuffle(attrs)
    closing = random.choice([">", "/>", "></img>", f">{random_string(1, 5)}</img>"])
    return f"<img {' '.join(attrs)}{closing}"


def generate_fuzzed_html():
    """Generate a complete fuzzed document."""
    strategies = [
        fuzz_nested_structure,
        fuzz_nested_structure,
        fuzz_formatting_runs,
        fuzz_list,
        fuzz_table,
        fuzz_image,
        fuzz_text,
    ]
    return "".join(random.choice(strategies)() for _ in range(random.randint(1, 6)))


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False, style_mode="inline"):
    """Run the fuzzer and report results."""
    if seed is not None:
        random.seed(seed)

    options = TransformOptions(style_mode=style_mode, remove_all_class=False, validate=True)

    crashes = []
    hangs = []
    successes = 0

    print(f"Fuzzing markupnodes ({style_mode}) with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            transform_html(html, options)
            elapsed = time.perf_counter() - start

            # Check for hangs (>5 seconds)
            if elapsed > 5.0:
                hangs.append({"test_num": i, "html": html, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
            else:
                successes += 1

        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    # Report results
    print(f"\n{'='*60}")
    print("FUZZING RESULTS")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/elapsed_total:.1f}")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:  # Show first 10
            print(f"\nTest #{crash['test_num']}:")
            print(f"  HTML: {crash['html'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if hangs:
        print(f"\n{'='*60}")
        print("HANG DETAILS:")
        print(f"{'='*60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  HTML: {hang['html'][:200]!r}...")

    if save_failures and (crashes or hangs):
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return len(crashes) == 0 and len(hangs) == 0


def main():
    parser = argparse.ArgumentParser(description="Fuzz the markupnodes transform with malformed HTML")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--style-mode",
        choices=["inline", "css-class"],
        default="inline",
        help="Style mode to transform with (default: inline)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed HTML documents (no transforming)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
        style_mode=args.style_mode,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
