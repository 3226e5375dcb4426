"""Tests for the validate and algorithms CLI commands."""

import json

from targetedid.cli.validate import algorithms_command, validate_command
from targetedid.errors import ExitCode
from targetedid.models import HashAlgorithm


class TestValidateCommand:
    """Tests for validate command."""

    def test_validate_json(self, tmp_path, settings, capsys):
        """Test JSON output lists effective options per named value."""
        config = tmp_path / "config.yaml"
        config.write_text(
            "salt: s3cr3t\n"
            "hashFunction: sha1\n"
            "values:\n"
            "  default: {}\n"
            "  nameid:\n"
            "    nameId: true\n"
            "    hashFunction: sha512\n"
        )

        exit_code = validate_command(
            config_path=str(config), output_format="json", settings=settings
        )

        assert exit_code == ExitCode.SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["valid"] is True
        assert [v["name"] for v in data["values"]] == ["default", "nameid"]
        assert data["values"][0]["hashFunction"] == "sha1"
        assert data["values"][1]["hashFunction"] == "sha512"
        assert data["values"][1]["nameId"] is True
        assert data["values"][0]["salt"] == "***"

    def test_validate_table(self, tmp_path, settings, capsys):
        """Test table output."""
        config = tmp_path / "config.yaml"
        config.write_text("ifUser: ['^[a-z]+$']\n")

        exit_code = validate_command(config_path=str(config), settings=settings)

        assert exit_code == ExitCode.SUCCESS
        captured = capsys.readouterr()
        assert "hashFunction" in captured.out
        assert "1 named value configured" in captured.out

    def test_validate_invalid(self, tmp_path, settings, capsys):
        """Test invalid configuration in JSON mode."""
        config = tmp_path / "config.yaml"
        config.write_text("values:\n  a:\n    fields: [salt, nickname]\n")

        exit_code = validate_command(
            config_path=str(config), output_format="json", settings=settings
        )

        assert exit_code == ExitCode.CONFIG_ERROR
        data = json.loads(capsys.readouterr().out)
        assert data["valid"] is False
        assert "unknown field" in data["error"]

    def test_validate_missing_file(self, tmp_path, settings, capsys):
        """Test missing configuration file."""
        exit_code = validate_command(config_path=str(tmp_path / "nope.yaml"), settings=settings)

        assert exit_code == ExitCode.CONFIG_ERROR
        assert "not found" in capsys.readouterr().out


class TestAlgorithmsCommand:
    """Tests for algorithms command."""

    def test_algorithms_json(self, capsys):
        """Test JSON list of algorithms."""
        exit_code = algorithms_command(output_format="json")

        assert exit_code == ExitCode.SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data == [a.value for a in HashAlgorithm]

    def test_algorithms_table(self, capsys):
        """Test plain listing."""
        algorithms_command()
        out = capsys.readouterr().out
        assert "sha256" in out
        assert "sha3-512" in out
