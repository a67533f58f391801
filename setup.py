"""
Build script for rinsehtml with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    python -m build

    # Compiled with mypyc
    RINSEHTML_USE_MYPYC=1 pip install .
"""

import os
import sys
from pathlib import Path

from setuptools import setup

# Determine if we should use mypyc
USE_MYPYC = os.environ.get("RINSEHTML_USE_MYPYC", "0") == "1"

# Leaf modules only: sanitizer.py and tokenizer.py subclass or call into
# html.parser and html5lib, which mypyc does not compile through.
MYPYC_MODULES = [
    "src/rinsehtml/rules.py",
    "src/rinsehtml/suppression.py",
    "src/rinsehtml/serialize.py",
]


def build_with_mypyc() -> list:
    """Build extension modules using mypyc."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        print(
            "ERROR: mypyc is not installed. Install with: pip install mypy",
            file=sys.stderr,
        )
        print("Or install with mypyc support: pip install rinsehtml[mypyc]", file=sys.stderr)
        sys.exit(1)

    # Verify all modules exist
    for module_path in MYPYC_MODULES:
        if not Path(module_path).exists():
            print(f"ERROR: Module not found: {module_path}", file=sys.stderr)
            sys.exit(1)

    print("=" * 70)
    print("Building rinsehtml with mypyc compilation")
    print("=" * 70)
    print(f"Compiling {len(MYPYC_MODULES)} modules:")
    for module in MYPYC_MODULES:
        print(f"  - {module}")
    print("=" * 70)

    opt_level = os.environ.get("MYPYC_OPT_LEVEL", "3")
    debug_level = os.environ.get("MYPYC_DEBUG_LEVEL", "0")

    mypyc_options = {
        "opt_level": opt_level,
        "debug_level": debug_level,
        "verbose": True,
        "separate": False,  # Don't use separate extensions
        "multi_file": False,  # Single group compilation
    }

    return mypycify(MYPYC_MODULES, **mypyc_options)


if __name__ == "__main__":
    ext_modules = []

    if USE_MYPYC:
        ext_modules = build_with_mypyc()
    else:
        print("Building rinsehtml in pure Python mode (no mypyc compilation)")
        print("To enable mypyc: RINSEHTML_USE_MYPYC=1 pip install .")

    setup(
        name="rinsehtml",
        version="0.1.0",
        description="Whitelist sanitizer for untrusted HTML fragments",
        package_dir={"": "src"},
        packages=["rinsehtml"],
        python_requires=">=3.9",
        install_requires=["html5lib>=1.1"],
        extras_require={
            "test": ["pytest"],
            "benchmark": ["bleach>=6.0", "psutil"],
            "mypyc": ["mypy"],
        },
        ext_modules=ext_modules,
    )
