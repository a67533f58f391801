#!/usr/bin/env python3
"""
Random fuzzer for the rinsehtml sanitizer.
Generates invalid/malformed HTML fragments and checks that every cleaned
result is crash-free, contains only whitelisted markup and is stable when
cleaned a second time.
"""

import argparse
import random
import string
import sys
import time
import traceback
from html.parser import HTMLParser

# Fuzzing strategies
TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "th", "ul", "ol", "li",
    "form", "input", "button", "select", "option", "script", "style", "applet",
    "head", "body", "html", "title", "meta", "link", "br", "hr", "h1", "h2", "h3",
    "iframe", "object", "embed", "video", "svg", "math", "blink", "marquee",
    "pre", "code", "blockquote", "q", "del", "ins", "area", "map", "font", "wbr",
]

UNACCEPTABLE_TAGS = ["script", "applet"]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "name", "value", "type",
    "onclick", "onload", "onerror", "data-x", "cite", "longdesc", "usemap", "action",
    "disabled", "readonly", "checked", "selected", "nowrap", "xml:lang", "austen:id",
]

SPECIAL_CHARS = [
    "\x00", "\x01", "\x0b", "\x0c", "\x7f",  # Control chars
    "\ufffd",  # Replacement character
    "\u00a0",  # Non-breaking space
    "\u2028", "\u2029",  # Line/paragraph separators
    "\u200b", "\u200d",  # Zero-width chars
    "\ufeff",  # BOM
]

ENTITIES = [
    "&amp;", "&lt;", "&gt;", "&quot;", "&apos;", "&nbsp;",
    "&", "&amp", "&ampamp;", "&am", "&#", "&#x", "&#123", "&#x1f;",
    "&#xdeadbeef;", "&#99999999;", "&#x;", "&unknown;", "&AMP;", "&LT",
    "&#0;", "&#x0D;", "&#128;", "&#xD800;", "&#x10FFFF;", "&#x110000;",
]

URLS = [
    "page.html", "../up.html", "/root.png", "?q=1&amp;r=2", "#frag",
    "http://example.org/x", "//cdn.example.net/y", "javascript:alert(1)",
    "http://[oops", "mailto:someone@example.com", "",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    """Generate random whitespace (including weird ones)."""
    ws = [" ", "\t", "\n", "\r", "\f", "\x0c", ""]
    return "".join(random.choices(ws, k=random.randint(0, 5)))


def fuzz_tag_name():
    """Generate malformed tag names."""
    strategies = [
        lambda: random.choice(TAGS),  # Valid tag
        lambda: random.choice(TAGS).upper(),  # Uppercase
        lambda: random.choice(TAGS) + random_string(1, 5),  # Tag with suffix
        lambda: random_string(1, 10),  # Random string
        lambda: "",  # Empty
        lambda: random.choice(SPECIAL_CHARS) + random.choice(TAGS),  # Special prefix
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),  # Special suffix
        lambda: random.choice(TAGS) + "/" + random.choice(TAGS),  # Slash in name
        lambda: " " + random.choice(TAGS),  # Space prefix
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    """Generate malformed attributes."""
    name_strategies = [
        lambda: random.choice(ATTRIBUTES),
        lambda: random.choice(ATTRIBUTES).upper(),
        lambda: random_string(1, 15),
        lambda: "on" + random_string(2, 8),  # Event handler
        lambda: "=",
        lambda: '"',
        lambda: "<",
    ]

    value_strategies = [
        lambda: random_string(0, 50),
        lambda: random.choice(URLS),
        lambda: random.choice(ENTITIES),
        lambda: "<script>alert(1)</script>",
        lambda: '"><script>alert(1)</script>',
        lambda: random.choice(SPECIAL_CHARS) * random.randint(1, 10),
        lambda: "",
        lambda: "x" * random.randint(100, 1000),  # Long value
    ]

    quote_styles = [
        ('="', '"'),
        ("='", "'"),
        ("=", ""),  # Unquoted
        ("", ""),  # No value
        ('="', ""),  # Unclosed quote
        ("==", ""),  # Double equals
    ]

    name = random.choice(name_strategies)()
    value = random.choice(value_strategies)()
    quote_start, quote_end = random.choice(quote_styles)

    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    """Generate malformed opening tags."""
    tag = fuzz_tag_name()
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 5)))
    closing = random.choice([">", "/>", " >", "/ >", "", ">>", "/>>"])
    opening = random.choice(["<", "< ", "<<", "<!", "<?", "</"]) if random.random() < 0.2 else "<"
    return f"{opening}{tag}{random_whitespace()}{attrs}{random_whitespace()}{closing}"


def fuzz_close_tag():
    """Generate malformed closing tags."""
    tag = fuzz_tag_name()
    variants = [
        f"</{tag}>",
        f"</ {tag}>",
        f"</{tag} >",
        f"</{tag}{random_whitespace()}>",
        f"</{tag}",  # Unclosed
        f"</{tag}/>",  # Self-closing end tag
        f"</{tag} {fuzz_attribute()}>",  # Attribute in end tag
    ]
    return random.choice(variants)


def fuzz_comment():
    """Generate malformed comments, some hiding markup."""
    content = random.choice([random_string(0, 50), "<script>alert(1)</script>", "<b>x</b>"])
    variants = [
        f"<!--{content}-->",
        f"<!-{content}-->",
        f"<!--{content}",
        f"<!--{content}--!>",
        "<!---->",
        "<!-->",
        f"<!{content}>",
    ]
    return random.choice(variants)


def fuzz_declaration():
    """Generate doctypes, processing instructions and odd marked sections."""
    variants = [
        "<!DOCTYPE html>",
        "<!doctype html>",
        "<!DOCTYPE>",
        "<!DOCTYPE " + random_string() + ">",
        "<?xml version='1.0'?>",
        "<?php echo 1 ?>",
        f"<![if {random_string(1, 5)}]>",
        "<![endif]>",
        f"<![INCLUDE[{random_string()}]]>",
    ]
    return random.choice(variants)


def fuzz_cdata():
    """Generate CDATA sections, often holding markup that must be sanitized again."""
    content = random.choice([
        random_string(0, 30),
        fuzz_open_tag() + fuzz_text() + fuzz_close_tag(),
        f"<{random.choice(UNACCEPTABLE_TAGS)}>{random_string()}",
        f"</{random.choice(UNACCEPTABLE_TAGS)}>{random_string()}",
        fuzz_nested_structure(max_depth=3),
    ])
    variants = [
        f"<![CDATA[{content}]]>",
        f"<![CDATA[{content}",
        f"<![CDATA[{content}]>",
        "<![CDATA[]]>",
        f"<![CDATA{content}]]>",
        f"<![cdata[{content}]]>",
    ]
    return random.choice(variants)


def fuzz_unacceptable():
    """Generate unacceptable elements, balanced or not."""
    tag = random.choice(UNACCEPTABLE_TAGS)
    content = random.choice([random_string(0, 30), fuzz_nested_structure(max_depth=3)])
    variants = [
        f"<{tag}>{content}</{tag}>",
        f"<{tag}>{content}",
        f"</{tag}>{content}",
        f"<{tag}><{tag}>{content}</{tag}>{content}</{tag}>",
        f"<{tag.upper()}>{content}</{tag}>",
        f"<{tag} src='{random.choice(URLS)}'>{content}</{tag}>",
        f"<script>//<![CDATA[\n{content}\n//]]></script>",
    ]
    return random.choice(variants)


def fuzz_text():
    """Generate text content with edge cases."""
    strategies = [
        lambda: random_string(1, 50),
        lambda: random.choice(ENTITIES),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 10))),
        lambda: "<" + random_string(1, 5),  # Incomplete tag
        lambda: "&" + random_string(1, 10),  # Incomplete entity
        lambda: random_string() + ">" + random_string(),  # Stray >
        lambda: '"' + random_string() + '"',
        lambda: "\r\n" * random.randint(1, 5),  # Line endings
        lambda: " " * random.randint(10, 100),  # Lots of spaces
    ]
    return random.choice(strategies)()


def fuzz_nested_structure(depth=0, max_depth=10):
    """Generate nested (possibly invalid) structure."""
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()

    tag = random.choice(TAGS)
    children = [fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3))]
    content = "".join(children)

    # Sometimes don't close tags
    if random.random() < 0.2:
        return f"<{tag}>{content}"
    # Sometimes mismatch tags
    if random.random() < 0.1:
        other_tag = random.choice(TAGS)
        return f"<{tag}>{content}</{other_tag}>"

    return f"<{tag}>{content}</{tag}>"


def generate_fuzzed_html():
    """Generate one fuzzed fragment from a random mix of strategies."""
    generators = [
        (fuzz_open_tag, 15),
        (fuzz_close_tag, 10),
        (fuzz_text, 15),
        (fuzz_comment, 5),
        (fuzz_declaration, 3),
        (fuzz_cdata, 8),
        (fuzz_unacceptable, 8),
        (fuzz_nested_structure, 10),
    ]
    funcs, weights = zip(*generators)
    parts = [random.choices(funcs, weights=weights)[0]() for _ in range(random.randint(1, 20))]
    return "".join(parts)


class _MarkupCollector(HTMLParser):
    """Collect (tag, attribute names) from a cleaned fragment."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.tags = []
        self.declarations = 0

    def handle_starttag(self, tag, attrs):
        self.tags.append((tag, [name for name, _ in attrs]))

    def handle_endtag(self, tag):
        self.tags.append((tag, []))

    def handle_comment(self, data):
        self.declarations += 1

    def handle_decl(self, decl):
        self.declarations += 1

    def handle_pi(self, data):
        self.declarations += 1

    def unknown_decl(self, data):
        self.declarations += 1


def check_output(sanitizer, output):
    """Return a list of problems with ``output``; empty when it is fine."""
    problems = []
    collector = _MarkupCollector()
    collector.feed(output)
    collector.close()
    rules = sanitizer.rules
    for tag, attrs in collector.tags:
        if not rules.is_acceptable_element(tag):
            problems.append(f"element {tag!r} is not acceptable")
        for attr in attrs:
            if not rules.is_acceptable_attribute(attr):
                problems.append(f"attribute {attr!r} on {tag!r} is not acceptable")
    if collector.declarations:
        problems.append("comment or declaration survived")
    again = sanitizer.clean(output)
    if again != output:
        problems.append(f"not idempotent: {again[:200]!r}")
    return problems


def build_sanitizer(normalize, base_uri):
    from rinsehtml import Sanitizer

    return Sanitizer(use_normalizer=normalize, base_uri=base_uri)


def run_fuzzer(num_tests=1000, seed=None, verbose=False, save_failures=False, normalize=False, base_uri=None):
    """Run the fuzzer."""
    if seed is not None:
        random.seed(seed)
    else:
        seed = random.randint(0, 2**32 - 1)
        random.seed(seed)
        print(f"Using random seed: {seed}")

    sanitizer = build_sanitizer(normalize, base_uri)

    crashes = []
    violations = []
    hangs = []
    successes = 0

    print(f"Fuzzing {sanitizer!r} with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            output = sanitizer.clean(html)
            elapsed = time.perf_counter() - start
            problems = check_output(sanitizer, output)
        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        # Check for hangs (>5 seconds)
        if elapsed > 5.0:
            hangs.append({"test_num": i, "html": html, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")
        if problems:
            violations.append({"test_num": i, "html": html, "output": output, "problems": problems})
            if verbose:
                print(f"  VIOLATION: Test {i}: {problems[0]}")
        elif elapsed <= 5.0:
            successes += 1

    elapsed_total = time.time() - start_time

    # Report results
    print(f"\n{'='*60}")
    print("FUZZING RESULTS: rinsehtml")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Violations:     {len(violations)}")
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

    if violations:
        print(f"\n{'='*60}")
        print("VIOLATION DETAILS:")
        print(f"{'='*60}")
        for violation in violations[:10]:
            print(f"\nTest #{violation['test_num']}:")
            print(f"  HTML:   {violation['html'][:200]!r}...")
            print(f"  Output: {violation['output'][:200]!r}...")
            for problem in violation["problems"]:
                print(f"  - {problem}")
        if len(violations) > 10:
            print(f"\n... and {len(violations) - 10} more violations")

    if hangs:
        print(f"\n{'='*60}")
        print("HANG DETAILS:")
        print(f"{'='*60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  HTML: {hang['html'][:200]!r}...")

    if save_failures and (crashes or violations or hangs):
        filename = f"fuzz_failures_rinsehtml_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write("Fuzzing results for rinsehtml\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for violation in violations:
                f.write(f"=== VIOLATION #{violation['test_num']} ===\n")
                f.write(f"HTML:\n{violation['html']}\n")
                f.write(f"Output:\n{violation['output']}\n")
                f.write("Problems:\n" + "\n".join(violation["problems"]) + "\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not violations and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the rinsehtml sanitizer with invalid input")
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
        "--normalize",
        action="store_true",
        help="Run the html5lib normalizer over every result",
    )
    parser.add_argument(
        "--base-uri",
        default=None,
        help="Rebase relative links against this URI",
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
        help="Just print N sample fuzzed fragments (no cleaning)",
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
        normalize=args.normalize,
        base_uri=args.base_uri,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
