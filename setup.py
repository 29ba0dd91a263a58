"""
Packaging for htmlcleaner.

The sanitizer is pure Python. Setting HTMLCLEANER_USE_MYPYC=1 compiles the
modules every sanitize() call spends most of its time in (the preprocessor
tokenizer, the renderer and the depth guard) with mypyc:

    HTMLCLEANER_USE_MYPYC=1 pip install .[mypyc]

MYPYC_OPT_LEVEL and MYPYC_DEBUG_LEVEL are passed through to mypyc.
"""

import os
import sys
from pathlib import Path

from setuptools import setup

USE_MYPYC = os.environ.get("HTMLCLEANER_USE_MYPYC", "0") == "1"

# policy.py stays interpreted: frozen slotted dataclasses with
# __post_init__ normalization do not compile cleanly.
MYPYC_MODULES = [
    "src/htmlcleaner/tokenizer.py",
    "src/htmlcleaner/serialize.py",
    "src/htmlcleaner/depth.py",
]


def compiled_extensions() -> list:
    try:
        from mypyc.build import mypycify
    except ImportError:
        sys.exit("HTMLCLEANER_USE_MYPYC=1 needs mypyc; install the extra: pip install htmlcleaner[mypyc]")

    missing = [path for path in MYPYC_MODULES if not Path(path).exists()]
    if missing:
        sys.exit(f"Cannot compile missing module(s): {', '.join(missing)}")

    print(f"htmlcleaner: compiling {', '.join(Path(path).stem for path in MYPYC_MODULES)} with mypyc")
    return mypycify(
        MYPYC_MODULES,
        opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"),
        debug_level=os.environ.get("MYPYC_DEBUG_LEVEL", "0"),
        separate=False,
        multi_file=False,
    )


if __name__ == "__main__":
    setup(ext_modules=compiled_extensions() if USE_MYPYC else [])
