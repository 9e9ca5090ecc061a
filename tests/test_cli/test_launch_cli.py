"""Tests for the launch policy CLI and environment settings."""

import json
from unittest.mock import patch

import pytest

from launch_policy.cli import main
from launch_policy.cli_parts.parser import create_parser, strip_base_params
from launch_policy.config import (
    ENV_FLASH_ATTENTION,
    ENV_KV_CACHE_TYPE,
    LaunchSettings,
    load_settings_from_env,
    parse_bool,
)
from launch_policy.models.model_types import AcceleratorInfo


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LAUNCH_FLASH_ATTENTION", "LAUNCH_KV_CACHE_TYPE", "LAUNCH_DEBUG", "LAUNCH_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


def _run_json(argv, capsys):
    assert main(["--json"] + argv) == 0
    return json.loads(capsys.readouterr().out)


class TestSettings:
    """Test cases for environment driven settings."""

    def test_defaults(self):
        assert load_settings_from_env({}) == LaunchSettings()

    def test_reads_environment(self):
        settings = load_settings_from_env(
            {ENV_FLASH_ATTENTION: "1", ENV_KV_CACHE_TYPE: " Q8_0 ", "LAUNCH_LOG_FILE": "launch.log"}
        )
        assert settings.flash_attention is True
        assert settings.kv_cache_type == "q8_0"
        assert settings.log_file == "launch.log"

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "t", "yes", "on"])
    def test_parse_bool_true(self, value):
        assert parse_bool(value, False) is True

    @pytest.mark.parametrize("value", ["0", "false", "F", "no", "off"])
    def test_parse_bool_false(self, value):
        assert parse_bool(value, True) is False

    def test_parse_bool_invalid_keeps_default(self, caplog):
        assert parse_bool("maybe", True, ENV_FLASH_ATTENTION) is True
        assert "Invalid boolean for LAUNCH_FLASH_ATTENTION" in caplog.text

    def test_parse_bool_empty_keeps_default(self):
        assert parse_bool("", True) is True
        assert parse_bool(None, False) is False


class TestParser:
    """Test cases for argument parsing."""

    def test_flash_attn_defaults_to_unset(self):
        args = create_parser().parse_args(["--preset", "llama"])
        assert args.flash_attn is None

    def test_no_flash_attn(self):
        args = create_parser().parse_args(["--preset", "llama", "--no-flash-attn"])
        assert args.flash_attn is False

    def test_base_params_after_separator(self):
        args = create_parser().parse_args(["--preset", "llama", "--", "--model", "m", "--port", "1"])
        assert strip_base_params(args.base_params) == ["--model", "m", "--port", "1"]

    def test_metadata_and_preset_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--preset", "llama", "--metadata", "m.json"])


class TestMain:
    """Test cases for the CLI entry point."""

    def test_enabled_decision(self, capsys):
        result = _run_json(
            ["--preset", "llama", "--accelerator", "cuda:8", "--flash-attn", "--kv-cache-type", "q8_0",
             "--", "--model", "test"],
            capsys,
        )
        assert result["support"]["enabled"] is True
        assert result["params"] == ["--model", "test", "--flash-attn", "--kv-cache-type", "q8_0"]

    def test_embedding_model(self, capsys):
        result = _run_json(
            ["--preset", "bert", "--accelerator", "cuda:8", "--flash-attn", "--kv-cache-type", "q8_0",
             "--", "--model", "test"],
            capsys,
        )
        assert result["support"]["is_embedding_model"] is True
        assert result["support"]["enabled"] is False
        assert result["params"] == ["--model", "test"]

    def test_unsupported_hardware(self, capsys):
        result = _run_json(["--preset", "llama", "--accelerator", "cuda:6", "--flash-attn"], capsys)
        assert result["support"]["supported_by_hardware"] is False
        assert result["params"] == []

    def test_environment_requests_flash_attention(self, monkeypatch, capsys):
        monkeypatch.setenv("LAUNCH_FLASH_ATTENTION", "true")
        monkeypatch.setenv("LAUNCH_KV_CACHE_TYPE", "q4_0")
        result = _run_json(["--preset", "qwen2", "--accelerator", "metal"], capsys)
        assert result["params"] == ["--flash-attn", "--kv-cache-type", "q4_0"]

    def test_cli_overrides_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("LAUNCH_FLASH_ATTENTION", "true")
        result = _run_json(["--preset", "llama", "--accelerator", "metal", "--no-flash-attn"], capsys)
        assert result["support"]["enabled"] is False

    def test_model_detail_reported(self, capsys):
        result = _run_json(["--preset", "deepseek2", "--accelerator", "cuda:9", "--flash-attn"], capsys)
        assert result["support"]["supported_by_model"] is False
        assert "does not equal" in result["model_detail"]

    def test_detects_accelerators_when_not_given(self, capsys):
        with patch(
            "launch_policy.cli_parts.common.detect_accelerators",
            return_value=[AcceleratorInfo(library="cpu")],
        ) as mock_detect:
            result = _run_json(["--preset", "llama", "--flash-attn"], capsys)
        mock_detect.assert_called_once()
        assert result["accelerators"] == [{"library": "cpu", "driver_major": 0, "driver_minor": 0}]
        assert result["support"]["enabled"] is False

    def test_metadata_file(self, tmp_path, capsys):
        path = tmp_path / "model.json"
        path.write_text(
            json.dumps(
                {
                    "general.architecture": "llama",
                    "llama.attention.key_length": 32,
                    "llama.attention.value_length": 32,
                }
            )
        )
        result = _run_json(["--metadata", str(path), "--accelerator", "rocm", "--flash-attn"], capsys)
        assert result["params"] == ["--flash-attn"]

    def test_missing_metadata_file_fails(self, tmp_path, capsys):
        assert main(["--metadata", str(tmp_path / "nope.json"), "--accelerator", "metal"]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_missing_metadata_file_json_error_goes_to_stderr(self, tmp_path, capsys):
        assert main(["--metadata", str(tmp_path / "nope.json"), "--accelerator", "metal", "--json"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error:" in captured.err

    def test_unwritable_log_file_fails(self, tmp_path, capsys):
        log_file = tmp_path / "missing-dir" / "launch.log"
        assert main(["--preset", "llama", "--accelerator", "metal", "--log-file", str(log_file)]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_infinite_head_count_metadata(self, tmp_path, capsys):
        """Test that a metadata dump with Infinity head counts yields a decision."""
        path = tmp_path / "model.json"
        path.write_text(
            '{"general.architecture": "llama", "llama.attention.key_length": Infinity, '
            '"llama.attention.value_length": Infinity}'
        )
        result = _run_json(["--metadata", str(path), "--accelerator", "cuda:8", "--flash-attn"], capsys)
        assert result["support"]["supported_by_model"] is False
        assert result["params"] == []

    def test_unknown_preset_fails(self, capsys):
        assert main(["--preset", "mystery", "--accelerator", "metal"]) == 1
        assert "Preset mystery not supported" in capsys.readouterr().out

    def test_requires_metadata_source(self):
        with pytest.raises(SystemExit):
            main(["--accelerator", "metal"])

    def test_list_presets(self, capsys):
        assert main(["--list-presets"]) == 0
        out = capsys.readouterr().out
        assert "Available Presets:" in out
        assert "nomic-bert" in out

    def test_text_output(self, capsys):
        assert main(["--preset", "llama", "--accelerator", "cuda:8", "--flash-attn"]) == 0
        out = capsys.readouterr().out
        assert "FLASH ATTENTION DECISION" in out
        assert "--flash-attn" in out


if __name__ == "__main__":
    pytest.main([__file__])
