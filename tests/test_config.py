"""
Tests for configuration, errors and utilities.
"""

import pytest

from acceptance_core.config import (
    DEFAULT_CRITERION_TIMEOUT_MS,
    AcceptanceConfig,
)
from acceptance_core.errors import (
    REMEDIATION,
    AcceptanceError,
    CriteriaFileNotFoundError,
    ErrorCode,
    ValidationError,
)
from acceptance_core.utils import (
    TimingContext,
    format_duration,
    sanitize_filename,
    truncate_string,
    validate_not_empty,
    validate_positive,
)

ENV_VARS = (
    "ACCEPTANCE_ARTIFACTS_ROOT",
    "ACCEPTANCE_CRITERION_TIMEOUT_MS",
    "ACCEPTANCE_FLOW_STEP_TIMEOUT_MS",
    "ACCEPTANCE_EXECUTOR_URL",
    "ACCEPTANCE_CAPTURE_EVIDENCE",
    "ACCEPTANCE_SCREENSHOT_EACH_STEP",
    "ACCEPTANCE_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAcceptanceConfig:
    """Environment-driven settings"""

    def test_defaults(self, clean_env):
        config = AcceptanceConfig.from_env()
        assert config.artifacts_root == "./artifacts"
        assert config.criterion_timeout_ms == DEFAULT_CRITERION_TIMEOUT_MS
        assert config.executor_url is None
        assert config.screenshot_each_step is True
        assert config.capture_evidence_on_pass is False
        assert config.log_level == "INFO"

    def test_overrides(self, clean_env):
        clean_env.setenv("ACCEPTANCE_ARTIFACTS_ROOT", "/tmp/runs")
        clean_env.setenv("ACCEPTANCE_CRITERION_TIMEOUT_MS", "1500")
        clean_env.setenv("ACCEPTANCE_EXECUTOR_URL", "http://localhost:8787")
        clean_env.setenv("ACCEPTANCE_CAPTURE_EVIDENCE", "yes")
        clean_env.setenv("ACCEPTANCE_SCREENSHOT_EACH_STEP", "false")
        clean_env.setenv("ACCEPTANCE_LOG_LEVEL", "debug")

        config = AcceptanceConfig.from_env()
        assert config.artifacts_root == "/tmp/runs"
        assert config.criterion_timeout_ms == 1500
        assert config.executor_url == "http://localhost:8787"
        assert config.capture_evidence_on_pass is True
        assert config.screenshot_each_step is False
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["abc", "0", "-5"])
    def test_invalid_timeout(self, clean_env, raw):
        clean_env.setenv("ACCEPTANCE_CRITERION_TIMEOUT_MS", raw)
        with pytest.raises(ValidationError):
            AcceptanceConfig.from_env()

    def test_to_dict(self):
        assert AcceptanceConfig(executor_url="http://x").to_dict()["executor_url"] == "http://x"


class TestErrors:
    def test_default_remediation(self):
        error = AcceptanceError("no input", code=ErrorCode.AC_NO_INPUT)
        assert error.remediation == REMEDIATION[ErrorCode.AC_NO_INPUT]
        assert error.to_dict()["code"] == "AC_NO_INPUT"

    def test_subclass_code(self):
        error = CriteriaFileNotFoundError("missing", details="errno 2")
        assert error.code == ErrorCode.AC_FILE_NOT_FOUND
        assert error.details == "errno 2"

    def test_every_code_has_remediation(self):
        assert set(REMEDIATION) == set(ErrorCode)


class TestUtils:
    def test_truncate(self):
        assert truncate_string("short", 10) == "short"
        assert truncate_string("a" * 20, 10) == "aaaaaaa..."

    @pytest.mark.parametrize("ms,text", [
        (850, "850ms"),
        (12300, "12.3s"),
        (125000, "2m 5s"),
    ])
    def test_format_duration(self, ms, text):
        assert format_duration(ms) == text

    def test_sanitize_filename(self):
        assert sanitize_filename("a/b:c") == "a_b_c"

    def test_validate(self):
        assert validate_positive(5, "n") == 5
        with pytest.raises(ValidationError):
            validate_positive(True, "n")
        with pytest.raises(ValidationError):
            validate_not_empty("  ", "name")

    def test_timing_context(self):
        with TimingContext("op") as timer:
            assert timer.elapsed_ms >= 0
        assert timer.duration_ms >= 0
