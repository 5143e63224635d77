"""Typed loader for defaults/dual-review.yml plus environment overrides.

Centralizes parsing/validation so the command scripts only see dataclasses.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "defaults" / "dual-review.yml"

DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024
DEFAULT_TIMEOUT_SECONDS = 600
DEFAULT_PROMPT_ARG = "-p"
DEFAULT_MODEL_ARG = "--model"
DEFAULT_OUTPUT_JSON_ARGS = ("--output-format", "json")

_TRUTHY = {"1", "true"}


class ConfigError(RuntimeError):
    """Configuration file or environment is invalid."""


@dataclass(frozen=True)
class ReviewerSpec:
    """How to invoke one reviewer CLI."""

    name: str
    command: str
    prompt_arg: str = DEFAULT_PROMPT_ARG
    output_json_args: tuple[str, ...] = DEFAULT_OUTPUT_JSON_ARGS
    model_arg: str = DEFAULT_MODEL_ARG
    model: str | None = None
    extra_args: tuple[str, ...] = ()
    stdin_prompt: bool = False


@dataclass(frozen=True)
class LimitsConfig:
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class EnvOverrides:
    """Values read once from DUAL_REVIEW_* environment variables."""

    max_output_bytes: int | None = None
    default_model: str | None = None
    git_cwd: str | None = None
    dry_run: bool = False


@dataclass(frozen=True)
class DualReviewConfig:
    reviewer_a: ReviewerSpec
    reviewer_b: ReviewerSpec
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    staged: bool = True
    cwd: str | None = None
    dry_run: bool = False

    @property
    def reviewers(self) -> tuple[ReviewerSpec, ReviewerSpec]:
        return self.reviewer_a, self.reviewer_b


def _require_mapping(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{ctx}: expected mapping")
    return value


def _require_list(value: Any, ctx: str) -> list[Any]:
    if not isinstance(value, list):
        raise ConfigError(f"{ctx}: expected list")
    return value


def _require_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    s = value.strip()
    if not s:
        raise ConfigError(f"{ctx}: must be non-empty")
    return s


def _optional_str(value: Any, ctx: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    s = value.strip()
    return s or None


def _require_str_tuple(value: Any, ctx: str) -> tuple[str, ...]:
    raw = _require_list(value, ctx)
    return tuple(_require_str(item, f"{ctx}[{idx}]") for idx, item in enumerate(raw))


def _require_bool(value: Any, ctx: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{ctx}: expected boolean")
    return value


def _require_positive_int(value: Any, ctx: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{ctx}: expected integer")
    if value < 1:
        raise ConfigError(f"{ctx}: must be >= 1")
    return value


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text())
    except FileNotFoundError:
        raise ConfigError(f"missing config file: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e


def _parse_reviewer(raw: Any, ctx: str) -> ReviewerSpec:
    item = _require_mapping(raw, ctx)
    spec = ReviewerSpec(
        name=_require_str(item.get("name"), f"{ctx}.name"),
        command=_require_str(item.get("command"), f"{ctx}.command"),
    )
    if "prompt_arg" in item:
        spec = replace(spec, prompt_arg=_require_str(item["prompt_arg"], f"{ctx}.prompt_arg"))
    if "output_json_args" in item:
        spec = replace(
            spec,
            output_json_args=_require_str_tuple(item["output_json_args"], f"{ctx}.output_json_args"),
        )
    if "model_arg" in item:
        spec = replace(spec, model_arg=_require_str(item["model_arg"], f"{ctx}.model_arg"))
    if "extra_args" in item:
        spec = replace(spec, extra_args=_require_str_tuple(item["extra_args"], f"{ctx}.extra_args"))
    if "stdin_prompt" in item:
        spec = replace(spec, stdin_prompt=_require_bool(item["stdin_prompt"], f"{ctx}.stdin_prompt"))
    return replace(spec, model=_optional_str(item.get("model"), f"{ctx}.model"))


def load_env_overrides(environ: Mapping[str, str] | None = None) -> EnvOverrides:
    """Parse DUAL_REVIEW_* variables. Empty values count as unset."""
    env = os.environ if environ is None else environ

    max_output_bytes = None
    raw_max = (env.get("DUAL_REVIEW_STDIO_MAX_BUFFER") or "").strip()
    if raw_max:
        try:
            max_output_bytes = int(raw_max)
        except ValueError:
            raise ConfigError("DUAL_REVIEW_STDIO_MAX_BUFFER: expected integer") from None
        if max_output_bytes < 1:
            raise ConfigError("DUAL_REVIEW_STDIO_MAX_BUFFER: must be >= 1")

    dry_run = (env.get("DUAL_REVIEW_DRY_RUN") or "").strip().lower() in _TRUTHY

    return EnvOverrides(
        max_output_bytes=max_output_bytes,
        default_model=(env.get("DUAL_REVIEW_DEFAULT_MODEL") or "").strip() or None,
        git_cwd=(env.get("DUAL_REVIEW_GIT_CWD") or "").strip() or None,
        dry_run=dry_run,
    )


def load_dual_review_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DualReviewConfig:
    """Load the config file and apply environment overrides."""
    config_path = path or DEFAULT_CONFIG_PATH
    cfg = _require_mapping(_load_yaml(config_path), "config")

    reviewers_raw = cfg.get("reviewers")
    if reviewers_raw is None:
        raise ConfigError("config.reviewers: missing required key")
    reviewers_list = _require_list(reviewers_raw, "config.reviewers")
    if len(reviewers_list) != 2:
        raise ConfigError("config.reviewers: expected exactly two reviewers")
    reviewer_a = _parse_reviewer(reviewers_list[0], "config.reviewers[0]")
    reviewer_b = _parse_reviewer(reviewers_list[1], "config.reviewers[1]")
    if reviewer_a.name == reviewer_b.name:
        raise ConfigError("config.reviewers: reviewer names must differ")

    limits = LimitsConfig()
    limits_raw = cfg.get("limits")
    if limits_raw is not None:
        limits_cfg = _require_mapping(limits_raw, "config.limits")
        limits = LimitsConfig(
            max_output_bytes=_require_positive_int(
                limits_cfg.get("max_output_bytes", DEFAULT_MAX_OUTPUT_BYTES),
                "config.limits.max_output_bytes",
            ),
            timeout_seconds=_require_positive_int(
                limits_cfg.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
                "config.limits.timeout_seconds",
            ),
        )

    staged = True
    git_raw = cfg.get("git")
    if git_raw is not None:
        git_cfg = _require_mapping(git_raw, "config.git")
        staged = _require_bool(git_cfg.get("staged", True), "config.git.staged")

    overrides = load_env_overrides(environ)
    if overrides.max_output_bytes is not None:
        limits = replace(limits, max_output_bytes=overrides.max_output_bytes)
    if overrides.default_model:
        if reviewer_a.model is None:
            reviewer_a = replace(reviewer_a, model=overrides.default_model)
        if reviewer_b.model is None:
            reviewer_b = replace(reviewer_b, model=overrides.default_model)

    return DualReviewConfig(
        reviewer_a=reviewer_a,
        reviewer_b=reviewer_b,
        limits=limits,
        staged=staged,
        cwd=overrides.git_cwd,
        dry_run=overrides.dry_run,
    )
