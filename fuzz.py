#!/usr/bin/env python3
"""
Random fuzzer for the sanitizer.
Generates malformed and hostile HTML and checks that every output
is stable under a second sanitize pass and only holds allowed markup.
"""

import argparse
import random
import string
import sys
import time
import traceback
from dataclasses import replace

from htmlcleaner import DEFAULT_POLICY, parse, preprocess, sanitize, tree_depth
from htmlcleaner.constants import URL_ATTRIBUTES

TAGS = [
    "a", "b", "i", "u", "s", "em", "strong", "p", "div", "span", "ul", "ol", "li",
    "img", "video", "audio", "table", "tr", "td", "pre", "code", "blockquote",
    "details", "summary", "script", "style", "textarea", "title", "iframe", "xmp",
    "noscript", "template", "svg", "math", "form", "input", "select", "option",
    "h1", "br", "hr", "plaintext", "listing", "custom-element",
]

FORMATTING_TAGS = ["a", "b", "big", "code", "em", "i", "s", "small", "strike", "strong", "tt", "u"]

ATTRIBUTES = ["href", "src", "alt", "title", "poster", "controls", "class", "style", "onclick", "onerror"]

URLS = [
    "http://example.com/",
    "https://example.com/a?b=1&c=2",
    "/relative/path",
    "mailto:someone@example.com",
    "data:image/png;base64,AAAA",
    "javascript:alert(1)",
    "JaVaScRiPt:alert(1)",
    " javascript:alert(1)",
    "java\tscript:alert(1)",
    "jav&#x09;ascript:alert(1)",
    "java&#10;script:alert(1)",
    "\x01javascript:alert(1)",
    "vbscript:msgbox(1)",
    "http://[::1",
    "//example.com",
    "",
]

SPECIAL_CHARS = ["\x00", "\x01", "\x0b", "\x0c", "\x7f", "\ufffd", "\u00a0", "\u2028", "\u200b", "\ufeff"]

ENTITIES = ["&amp;", "&lt;", "&gt;", "&quot;", "&nbsp;", "&", "&amp", "&#", "&#x0;", "&#x110000;", "&unknown;"]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def fuzz_tag_name():
    """Generate tag names, mostly real ones in odd spellings."""
    strategies = [
        lambda: random.choice(TAGS),
        lambda: random.choice(TAGS).upper(),
        lambda: random.choice(TAGS) + random_string(1, 3),
        lambda: random_string(1, 8),
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),
        lambda: random.choice(TAGS) + "/" + random.choice(TAGS),
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    """Generate attributes, with URL attributes carrying hostile values."""
    name = random.choice(ATTRIBUTES) if random.random() < 0.8 else random_string(1, 10)
    if name in URL_ATTRIBUTES or random.random() < 0.2:
        value = random.choice(URLS)
    else:
        value = random.choice([random_string(0, 30), random.choice(ENTITIES), "<script>alert(1)</script>", ""])

    quote_start, quote_end = random.choice([('="', '"'), ("='", "'"), ("=", ""), ("", ""), ('="', "")])
    if not quote_start:
        return name
    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    closing = random.choice([">", "/>", " >", "", ">>"])
    return f"<{fuzz_tag_name()} {attrs}{closing}"


def fuzz_close_tag():
    tag = fuzz_tag_name()
    return random.choice([f"</{tag}>", f"</ {tag}>", f"</{tag}", f"</{tag}/>", f"</{tag} {fuzz_attribute()}>"])


def fuzz_comment():
    content = random_string(0, 30)
    return random.choice(
        [
            f"<!--{content}-->",
            f"<!--{content}",
            f"<!--{content}--!>",
            "<!-->",
            "<!--->",
            f"<!--{content}--{content}-->",
            f"<!{content}>",
            f"<?{content}?>",
            "<!DOCTYPE html>",
        ]
    )


def fuzz_text():
    strategies = [
        lambda: random_string(1, 40),
        lambda: random.choice(ENTITIES),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 5))),
        lambda: "<" + random_string(1, 5),
        lambda: random_string() + ">" + random_string(),
        lambda: "\r\n" * random.randint(1, 3),
        lambda: " " * random.randint(1, 20),
    ]
    return random.choice(strategies)()


def fuzz_raw_text():
    tag = random.choice(["script", "style", "textarea", "title", "xmp", "iframe", "noscript", "pre"])
    content = random.choice([random_string(0, 20), "</" + tag, "<b>x</b>", "\nline", "a < b"])
    return random.choice([f"<{tag}>{content}</{tag}>", f"<{tag}>{content}", f"<{tag}>{content}</{tag.upper()} >"])


def fuzz_nested_structure(depth=0, max_depth=8):
    """Generate nested (possibly invalid) structure."""
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()

    tag = random.choice(TAGS)
    content = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))

    # Sometimes don't close tags
    if random.random() < 0.2:
        return f"<{tag}>{content}"
    # Sometimes mismatch tags
    if random.random() < 0.1:
        return f"<{tag}>{content}</{random.choice(TAGS)}>"
    return f"<{tag}>{content}</{tag}>"


def fuzz_misnested_formatting():
    """Formatting elements closed in the wrong order, around blocks."""
    outer, inner = random.choice(FORMATTING_TAGS), random.choice(FORMATTING_TAGS)
    block = random.choice(["div", "p", "blockquote", "li", "table"])
    text = random_string(1, 8)
    return random.choice(
        [
            f"<{outer}><{inner}>{text}</{outer}></{inner}>",
            f"<{outer}>{text}<{block}>{text}</{outer}>{text}</{block}>",
            f"<{outer}>{text}<{block}>{text}</{block}>{text}</{outer}>",
            f"<{block}><{outer}>{text}</{block}>{text}",
        ]
    )


def fuzz_foreign_content():
    content = random_string(0, 15)
    return random.choice(
        [
            f"<svg>{content}</svg>",
            f"<svg><a xlink:href='javascript:alert(1)'>{content}</a></svg>",
            f"<svg><foreignObject><b>{content}</b></foreignObject></svg>",
            f"<svg><script>{content}</script></svg>",
            f"<math><mi>{content}</mi></math>",
            f"<svg><p>{content}</p></svg>",
        ]
    )


def fuzz_deeply_nested():
    depth = random.randint(90, 300)
    tag = random.choice(["div", "b", "blockquote", "li", "p"])
    return random.choice(
        [
            f"<{tag}>" * depth + "content" + f"</{tag}>" * depth,
            f"<{tag}>" * depth + "content",
            "".join(f"<{random.choice(['div', 'b', 'i', 'ul'])}>" for _ in range(depth)) + "x",
        ]
    )


GENERATORS = [
    (fuzz_open_tag, 20),
    (fuzz_close_tag, 10),
    (fuzz_comment, 6),
    (fuzz_text, 15),
    (fuzz_raw_text, 6),
    (fuzz_nested_structure, 10),
    (fuzz_misnested_formatting, 8),
    (fuzz_foreign_content, 4),
    (fuzz_deeply_nested, 1),
]


def generate_fuzzed_html():
    """Generate one fuzzed fragment."""
    generators, weights = zip(*GENERATORS)
    count = random.randint(1, 15)
    return "".join(fn() for fn in random.choices(generators, weights=weights, k=count))


POLICIES = {
    "default": DEFAULT_POLICY,
    "wrapping": replace(DEFAULT_POLICY.allow_elements("div", "ul", "li").wrap_inside("blockquote"), wrap_text=True),
}


def check_output(policy, output):
    """Return a description of the first invariant `output` breaks, or None."""
    nodes = parse(output)
    if policy.max_depth and tree_depth(nodes) > policy.max_depth:
        return "nesting deeper than max_depth"

    stack = list(nodes)
    while stack:
        node = stack.pop()
        stack.extend(node.children)
        if not node.is_element:
            continue
        if node.namespace or not policy.allows_element(node.name):
            return f"disallowed element <{node.name}>"
        for attr in node.attrs:
            if not policy.allows_attribute(node.name, attr.name):
                return f"disallowed attribute {attr.name} on <{node.name}>"
            if attr.name in URL_ATTRIBUTES and "script:" in attr.value.lower():
                return f"script URL in {attr.name} on <{node.name}>"

    if sanitize(policy, output) != output:
        return "output changes when sanitized again"
    return None


def run_fuzzer(policy_name, num_tests, seed=None, use_preprocess=False, verbose=False, save_failures=False):
    """Run the fuzzer against one policy."""
    if seed is not None:
        random.seed(seed)
    policy = POLICIES[policy_name]

    failures = []
    hangs = []
    successes = 0

    print(f"Fuzzing sanitize() with the {policy_name} policy, {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            source = preprocess(policy, html) if use_preprocess else html
            output = sanitize(policy, source)
            elapsed = time.perf_counter() - start
            problem = check_output(policy, output)
        except Exception as e:
            failures.append({"test_num": i, "html": html, "error": repr(e), "traceback": traceback.format_exc()})
            if verbose:
                print(f"  CRASH: Test {i}: {e!r}")
            continue

        if problem is not None:
            failures.append({"test_num": i, "html": html, "error": problem, "traceback": output})
            if verbose:
                print(f"  FAIL: Test {i}: {problem}")
        elif elapsed > 5.0:
            hangs.append({"test_num": i, "html": html, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")
        else:
            successes += 1

    elapsed_total = time.time() - start_time

    print(f"\n{'=' * 60}")
    print(f"FUZZING RESULTS: {policy_name}{' (preprocessed)' if use_preprocess else ''}")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Failures:       {len(failures)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")

    for failure in failures[:10]:
        print(f"\nTest #{failure['test_num']}:")
        print(f"  HTML: {failure['html'][:200]!r}")
        print(f"  Error: {failure['error']}")
    if len(failures) > 10:
        print(f"\n... and {len(failures) - 10} more failures")

    for hang in hangs[:5]:
        print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
        print(f"  HTML: {hang['html'][:200]!r}")

    if save_failures and (failures or hangs):
        filename = f"fuzz_failures_{policy_name}_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write(f"Fuzzing results for {policy_name}\n")
            f.write(f"Seed: {seed}\n\n")
            for failure in failures:
                f.write(f"=== FAILURE #{failure['test_num']} ===\n")
                f.write(f"HTML:\n{failure['html']}\n")
                f.write(f"Error: {failure['error']}\n")
                f.write(f"Details:\n{failure['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not failures and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the sanitizer with malformed and hostile HTML")
    parser.add_argument(
        "--policy", "-p",
        choices=sorted(POLICIES),
        default="default",
        help="Policy to sanitize with (default: default)",
    )
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--preprocess", action="store_true", help="Run the text preprocessor before sanitizing")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--save-failures", action="store_true", help="Save failures to a file")
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed fragments (no sanitizing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(
        args.policy,
        args.num_tests,
        seed=args.seed,
        use_preprocess=args.preprocess,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
