"""Coverage hook for the command scripts when they run as subprocesses.

Tests run dual-review.py, compare-reviews.py and friends via
`sys.executable path/to/script`. pytest-cov only measures the parent process,
so child interpreters start coverage here when COVERAGE_PROCESS_START is set.
Python imports `sitecustomize` at startup and `sys.path[0]` is this directory
when a script from it is executed.
"""

import os


def _maybe_start_coverage() -> None:
    if not os.environ.get("COVERAGE_PROCESS_START"):
        return
    try:
        import coverage
    except ImportError:
        return

    try:
        coverage.process_startup()
    except Exception:
        # A broken coverage setup must not change the script's behavior.
        return


_maybe_start_coverage()
