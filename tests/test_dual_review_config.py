"""Tests for lib.dual_review_config: YAML loader and DUAL_REVIEW_* overrides."""

import pytest
from pathlib import Path

from lib.dual_review_config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_MAX_OUTPUT_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
    ConfigError,
    EnvOverrides,
    LimitsConfig,
    ReviewerSpec,
    load_dual_review_config,
    load_env_overrides,
)

MINIMAL = """
reviewers:
  - name: Cursor
    command: cursor
  - name: Claude
    command: claude
"""


def write_config(tmp_path: Path, content: str) -> Path:
    p = tmp_path / "dual-review.yml"
    p.write_text(content)
    return p


class TestLoadConfig:
    def test_minimal_valid_config(self, tmp_path):
        cfg = load_dual_review_config(write_config(tmp_path, MINIMAL), environ={})
        assert cfg.reviewer_a == ReviewerSpec(name="Cursor", command="cursor")
        assert cfg.reviewer_b.command == "claude"
        assert cfg.reviewer_a.prompt_arg == "-p"
        assert cfg.reviewer_a.output_json_args == ("--output-format", "json")
        assert cfg.reviewer_a.model_arg == "--model"
        assert cfg.limits == LimitsConfig()
        assert cfg.limits.max_output_bytes == DEFAULT_MAX_OUTPUT_BYTES
        assert cfg.limits.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert cfg.staged is True
        assert cfg.cwd is None
        assert cfg.dry_run is False
        assert cfg.reviewers == (cfg.reviewer_a, cfg.reviewer_b)

    def test_full_config(self, tmp_path):
        path = write_config(tmp_path, """
reviewers:
  - name: Codex
    command: codex
    prompt_arg: "--prompt"
    output_json_args: ["--json"]
    model_arg: "-m"
    model: gpt-5
    extra_args: ["--quiet"]
  - name: Agent
    command: cursor-agent
    stdin_prompt: true
limits:
  max_output_bytes: 2048
  timeout_seconds: 30
git:
  staged: false
""")
        cfg = load_dual_review_config(path, environ={})
        assert cfg.reviewer_a == ReviewerSpec(
            name="Codex",
            command="codex",
            prompt_arg="--prompt",
            output_json_args=("--json",),
            model_arg="-m",
            model="gpt-5",
            extra_args=("--quiet",),
        )
        assert cfg.reviewer_b.stdin_prompt is True
        assert cfg.limits == LimitsConfig(max_output_bytes=2048, timeout_seconds=30)
        assert cfg.staged is False

    def test_shipped_defaults_load(self):
        cfg = load_dual_review_config(DEFAULT_CONFIG_PATH, environ={})
        assert cfg.reviewer_a.name == "Cursor"
        assert cfg.reviewer_b.name == "Claude"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="missing config file"):
            load_dual_review_config(tmp_path / "nope.yml", environ={})

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_dual_review_config(write_config(tmp_path, "reviewers: [\n"), environ={})

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="config: expected mapping"):
            load_dual_review_config(write_config(tmp_path, "- a\n- b\n"), environ={})

    def test_missing_reviewers(self, tmp_path):
        with pytest.raises(ConfigError, match="missing required key"):
            load_dual_review_config(write_config(tmp_path, "limits: {}\n"), environ={})

    def test_requires_exactly_two_reviewers(self, tmp_path):
        path = write_config(tmp_path, "reviewers:\n  - name: A\n    command: a\n")
        with pytest.raises(ConfigError, match="exactly two"):
            load_dual_review_config(path, environ={})

    def test_reviewer_names_must_differ(self, tmp_path):
        path = write_config(tmp_path, """
reviewers:
  - name: Same
    command: a
  - name: Same
    command: b
""")
        with pytest.raises(ConfigError, match="must differ"):
            load_dual_review_config(path, environ={})

    def test_empty_command_rejected(self, tmp_path):
        path = write_config(tmp_path, MINIMAL.replace("command: claude", 'command: "  "'))
        with pytest.raises(ConfigError, match=r"config.reviewers\[1\].command: must be non-empty"):
            load_dual_review_config(path, environ={})

    def test_bad_limit(self, tmp_path):
        path = write_config(tmp_path, MINIMAL + "limits:\n  timeout_seconds: 0\n")
        with pytest.raises(ConfigError, match="timeout_seconds: must be >= 1"):
            load_dual_review_config(path, environ={})

    def test_bad_stdin_prompt_type(self, tmp_path):
        path = write_config(tmp_path, MINIMAL.replace("command: claude", "command: claude\n    stdin_prompt: yes-please"))
        with pytest.raises(ConfigError, match="stdin_prompt: expected boolean"):
            load_dual_review_config(path, environ={})


class TestEnvOverrides:
    def test_empty_environment(self):
        assert load_env_overrides({}) == EnvOverrides()

    def test_all_values(self):
        overrides = load_env_overrides(
            {
                "DUAL_REVIEW_STDIO_MAX_BUFFER": "4096",
                "DUAL_REVIEW_DEFAULT_MODEL": "sonnet",
                "DUAL_REVIEW_GIT_CWD": "/repo",
                "DUAL_REVIEW_DRY_RUN": "true",
            }
        )
        assert overrides == EnvOverrides(
            max_output_bytes=4096,
            default_model="sonnet",
            git_cwd="/repo",
            dry_run=True,
        )

    @pytest.mark.parametrize(("value", "expected"), [("1", True), ("TRUE", True), ("0", False), ("yes", False), ("", False)])
    def test_dry_run_values(self, value, expected):
        assert load_env_overrides({"DUAL_REVIEW_DRY_RUN": value}).dry_run is expected

    @pytest.mark.parametrize("value", ["ten", "0", "-5"])
    def test_bad_max_buffer(self, value):
        with pytest.raises(ConfigError, match="DUAL_REVIEW_STDIO_MAX_BUFFER"):
            load_env_overrides({"DUAL_REVIEW_STDIO_MAX_BUFFER": value})

    def test_overrides_applied_to_config(self, tmp_path):
        path = write_config(tmp_path, MINIMAL.replace("command: claude", "command: claude\n    model: opus"))
        cfg = load_dual_review_config(
            path,
            environ={
                "DUAL_REVIEW_STDIO_MAX_BUFFER": "123",
                "DUAL_REVIEW_DEFAULT_MODEL": "sonnet",
                "DUAL_REVIEW_GIT_CWD": str(tmp_path),
                "DUAL_REVIEW_DRY_RUN": "1",
            },
        )
        assert cfg.limits.max_output_bytes == 123
        assert cfg.reviewer_a.model == "sonnet"
        assert cfg.reviewer_b.model == "opus"
        assert cfg.cwd == str(tmp_path)
        assert cfg.dry_run is True
