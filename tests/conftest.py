"""Import helpers for scripts that aren't packages, plus shared payload fixtures."""
import importlib.util
import json
import os
import stat
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
SCRIPTS_DIR = REPO_ROOT / "scripts"

# scripts/ for `lib.*`, repo root for `pkg.*`.
for _path in (SCRIPTS_DIR, REPO_ROOT):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))


def _import_script(name: str, filename: str):
    """Import a script file as a module using importlib."""
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / filename)
    mod = importlib.util.module_from_spec(spec)
    sys.modules[name] = mod
    spec.loader.exec_module(mod)
    return mod


dual_review = _import_script("dual_review", "dual-review.py")
compare_reviews = _import_script("compare_reviews", "compare-reviews.py")
run_review = _import_script("run_review", "run-review.py")


def script_env(env_extra: dict | None = None) -> dict[str, str]:
    """Environment for running a script as a subprocess."""
    env = os.environ.copy()
    for key in list(env):
        if key.startswith("DUAL_REVIEW_"):
            env.pop(key)
    existing = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(REPO_ROOT), existing) if p)
    if env_extra:
        env.update(env_extra)
    return env


SQL_INJECTION = {
    "category": "security",
    "severity": "high",
    "file": "api/user.controller.ts",
    "line": 42,
    "message": "Potential SQL injection",
    "fix": "Use parameterized queries via Sequelize bindings",
}

MISSING_TEST = {
    "category": "tests",
    "severity": "low",
    "file": "api/user.service.ts",
    "message": "No test covers the empty-result branch",
    "fix": "Add a unit test for findAll returning []",
}

N_PLUS_ONE = {
    "category": "performance",
    "severity": "med",
    "file": "api/order.repository.ts",
    "line": 88,
    "message": "N+1 query when loading order items",
    "fix": "Eager-load items with include",
}


def payload_dict(*issues: dict, low: int = 0, med: int = 0, high: int = 0) -> dict:
    return {"issues": list(issues), "summary": {"counts": {"low": low, "med": med, "high": high}}}


@pytest.fixture
def empty_payload_json() -> str:
    return json.dumps(payload_dict())


@pytest.fixture
def sample_payload_json() -> str:
    return json.dumps(payload_dict(SQL_INJECTION, MISSING_TEST, low=1, high=1))


def write_fake_cli(tmp_path: Path, name: str, stdout: str, *, exit_code: int = 0, stderr: str = "") -> Path:
    """Executable stand-in for a reviewer CLI.

    Each call records its argv and stdin as JSON in ``<path>.log``.
    """
    path = tmp_path / name
    path.write_text(
        f"#!{sys.executable}\n"
        "import json, sys\n"
        "data = sys.stdin.read()\n"
        "with open(sys.argv[0] + '.log', 'w') as fh:\n"
        "    json.dump({'argv': sys.argv[1:], 'stdin': data}, fh)\n"
        f"sys.stdout.write({stdout!r})\n"
        f"sys.stderr.write({stderr!r})\n"
        f"sys.exit({exit_code})\n"
    )
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def fake_cli_call(path: Path) -> dict:
    return json.loads(Path(str(path) + ".log").read_text(encoding="utf-8"))


def write_config(tmp_path: Path, command_a: Path, command_b: Path) -> Path:
    path = tmp_path / "dual-review.yml"
    path.write_text(
        "reviewers:\n"
        f"  - name: Cursor\n    command: {json.dumps(str(command_a))}\n"
        f"  - name: Claude\n    command: {json.dumps(str(command_b))}\n"
        "limits:\n  timeout_seconds: 30\n"
    )
    return path
