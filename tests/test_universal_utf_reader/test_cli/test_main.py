"""Tests for the CLI main module."""

import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from universal_utf_reader.character import EncodingHint
from universal_utf_reader.cli.main import (
    CLIConfig,
    FileDecoder,
    create_argument_parser,
    format_detections,
    main,
)

TEXT = "line one é\r\nline two 世界\r\n"


class FullDiskOutput:
    """Binary output whose writes always fail."""

    def __init__(self) -> None:
        self.writes = 0

    def write(self, data: bytes) -> int:
        self.writes += 1
        raise OSError("disk full")

    def flush(self) -> None:
        pass


@pytest.fixture
def sample_files(tmp_path):
    """Create UTF-16 files with and without BOM."""
    bom_file = tmp_path / "bom.txt"
    bom_file.write_bytes(b"\xff\xfe" + TEXT.encode("utf-16-le"))
    le_file = tmp_path / "le.txt"
    le_file.write_bytes(TEXT.encode("utf-16-le"))
    utf8_file = tmp_path / "plain.txt"
    utf8_file.write_bytes(TEXT.encode("utf-8"))
    return {"bom": bom_file, "le": le_file, "utf8": utf8_file}


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CLIConfig()
        assert config.hint is EncodingHint.HTML5
        assert config.output_format == "text"
        assert config.verbose is False
        assert config.quiet is False

    def test_config_from_file(self, tmp_path):
        """Test loading configuration from file."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "hint": "windows",
            "buffer_size": 1024,
            "normalize_newlines": True,
            "output_format": "json",
        }))

        config = CLIConfig.from_file(config_path)

        assert config.hint is EncodingHint.UTF16LE
        assert config.decoder_config.buffer_size == 1024
        assert config.decoder_config.normalize_newlines is True
        assert config.output_format == "json"

    def test_config_from_nonexistent_file(self):
        """Test handling non-existent config file."""
        config = CLIConfig.from_file(Path("nonexistent.json"))
        assert config.hint is EncodingHint.UTF8
        assert config.output_format == "text"

    def test_config_from_invalid_file(self, tmp_path, capsys):
        """Test that invalid files fall back to defaults with a warning."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"buffer_size": 0}))

        config = CLIConfig.from_file(config_path)

        assert config.decoder_config.buffer_size == 8192
        assert "Could not load config file" in capsys.readouterr().err


class TestFileDecoder:
    """Test the CLI decoding helper."""

    def test_write_decoded(self, sample_files, tmp_path):
        """Test decoding one file into an output stream."""
        decoder = FileDecoder(CLIConfig())
        output_path = tmp_path / "out.txt"

        with output_path.open("wb") as output:
            result = decoder.write_decoded(sample_files["bom"], output)

        assert result["success"] is True
        assert result["encoding"] == "utf-16-le"
        assert result["method"] == "bom"
        assert output_path.read_bytes() == TEXT.encode("utf-8")

    def test_write_decoded_missing_file(self, tmp_path):
        """Test that a missing file is reported, not raised."""
        decoder = FileDecoder(CLIConfig())
        output_path = tmp_path / "out.txt"

        with output_path.open("wb") as output:
            result = decoder.write_decoded(tmp_path / "nope.txt", output)

        assert result["success"] is False
        assert "error" in result

    def test_write_error_propagates(self, sample_files, caplog):
        """Test that a failing output is not reported as a bad input file."""
        decoder = FileDecoder(CLIConfig())

        with pytest.raises(OSError, match="disk full"):
            decoder.write_decoded(sample_files["utf8"], FullDiskOutput())

        assert "Failed to decode file" not in caplog.text

    def test_detect(self, sample_files):
        """Test detection summary."""
        result = FileDecoder(CLIConfig()).detect(sample_files["bom"])

        assert result["encoding"] == "utf-16-le"
        assert result["bom"] == "ff fe"


class TestArgumentParser:
    """Test argument parsing."""

    def test_cat_arguments(self):
        """Test parsing the cat command."""
        parser = create_argument_parser()

        args = parser.parse_args(["cat", "a.txt", "b.txt", "--hint", "windows", "-n"])

        assert args.command == "cat"
        assert args.paths == [Path("a.txt"), Path("b.txt")]
        assert args.hint == "windows"
        assert args.normalize_newlines is True

    def test_detect_arguments(self):
        """Test parsing the detect command."""
        parser = create_argument_parser()

        args = parser.parse_args(["detect", "a.txt", "--format", "json"])

        assert args.command == "detect"
        assert args.format == "json"

    def test_invalid_hint(self):
        """Test that unknown hints are rejected by argparse."""
        parser = create_argument_parser()

        with pytest.raises(SystemExit):
            parser.parse_args(["cat", "a.txt", "--hint", "latin1"])


class TestFormatDetections:
    """Test detection output formatting."""

    def test_text_format(self):
        """Test the text layout."""
        results = [
            {"file": "a.txt", "success": True, "encoding": "utf-8",
             "method": "hint", "bom": ""},
            {"file": "b.txt", "success": True, "encoding": "utf-16-be",
             "method": "bom", "bom": "fe ff"},
            {"file": "c.txt", "success": False, "error": "missing"},
        ]

        output = format_detections(results, "text")

        assert output.splitlines() == [
            "a.txt: utf-8 (hint)",
            "b.txt: utf-16-be (bom) [fe ff]",
            "c.txt: error: missing",
        ]

    def test_json_format(self):
        """Test the JSON layout."""
        results = [{"file": "a.txt", "success": True}]

        assert json.loads(format_detections(results, "json")) == results


class TestMain:
    """Test the main entry point."""

    def test_no_command(self, capsys):
        """Test that running without a command prints help."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_cat_to_stdout(self, sample_files, capsysbinary):
        """Test printing a BOM file as UTF-8."""
        exit_code = main(["cat", str(sample_files["bom"]), "--hint", "utf8"])

        assert exit_code == 0
        assert capsysbinary.readouterr().out == TEXT.encode("utf-8")

    def test_cat_normalize_newlines(self, sample_files, tmp_path):
        """Test CRLF to LF conversion."""
        output_path = tmp_path / "out.txt"

        exit_code = main([
            "cat", str(sample_files["le"]), "--hint", "windows",
            "--normalize-newlines", "--output", str(output_path),
        ])

        assert exit_code == 0
        assert output_path.read_bytes() == TEXT.replace("\r\n", "\n").encode("utf-8")

    def test_cat_multiple_files(self, sample_files, tmp_path):
        """Test concatenating files with different encodings."""
        output_path = tmp_path / "out.txt"

        exit_code = main([
            "cat", str(sample_files["bom"]), str(sample_files["utf8"]),
            "--output", str(output_path),
        ])

        assert exit_code == 0
        assert output_path.read_bytes() == (TEXT + TEXT).encode("utf-8")

    def test_cat_missing_file(self, sample_files, tmp_path, capsys):
        """Test that a missing file gives exit code 1 but others are still written."""
        output_path = tmp_path / "out.txt"

        exit_code = main([
            "cat", str(tmp_path / "missing.txt"), str(sample_files["utf8"]),
            "--output", str(output_path),
        ])

        assert exit_code == 1
        assert output_path.read_bytes() == TEXT.encode("utf-8")
        assert "missing.txt" in capsys.readouterr().err

    def test_cat_stops_on_output_error(self, sample_files, monkeypatch, capsys):
        """Test that a broken output ends the run instead of skipping to the next file."""
        output = FullDiskOutput()
        monkeypatch.setattr(sys, "stdout", SimpleNamespace(buffer=output))

        exit_code = main(["cat", str(sample_files["utf8"]), str(sample_files["bom"])])

        assert exit_code == 1
        assert output.writes == 1
        assert "Error writing output: disk full" in capsys.readouterr().err

    def test_cat_with_config_file(self, sample_files, tmp_path):
        """Test that --config supplies the hint."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"hint": "windows", "normalize_newlines": True}))
        output_path = tmp_path / "out.txt"

        exit_code = main([
            "cat", str(sample_files["le"]), "--config", str(config_path),
            "--output", str(output_path),
        ])

        assert exit_code == 0
        assert output_path.read_bytes() == TEXT.replace("\r\n", "\n").encode("utf-8")

    def test_cat_stats(self, sample_files, tmp_path, capsys):
        """Test that --stats reports metrics and memory as JSON."""
        output_path = tmp_path / "out.txt"

        exit_code = main([
            "cat", str(sample_files["bom"]), "--stats", "--output", str(output_path),
        ])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().err)
        assert summary["files"][0]["encoding"] == "utf-16-le"
        assert summary["files"][0]["metrics"]["bytes_written"] == len(TEXT.encode("utf-8"))
        assert summary["memory"]["samples"] >= 2

    def test_detect_json(self, sample_files, capsys):
        """Test detect with JSON output."""
        exit_code = main([
            "detect", str(sample_files["bom"]), str(sample_files["le"]),
            "--hint", "utf16be", "--format", "json",
        ])

        assert exit_code == 0
        results = json.loads(capsys.readouterr().out)
        assert [r["encoding"] for r in results] == ["utf-16-le", "utf-16-be"]
        assert [r["method"] for r in results] == ["bom", "hint"]

    def test_detect_missing_file(self, tmp_path, capsys):
        """Test detect on a missing file."""
        exit_code = main(["detect", str(tmp_path / "missing.txt")])

        assert exit_code == 1
        assert "error" in capsys.readouterr().out
