"""
Tests for the ainimo command line.
"""

import json

import pytest

from ainimo.interface.cli import build_parser, main


class TestParser:

    def test_rejects_unknown_action(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["act", "dance"])

    def test_global_options(self):
        args = build_parser().parse_args(["--slot", "b", "act", "study"])
        assert args.slot == "b"
        assert args.action == "study"


class TestCommands:
    """Run commands against a temporary saves directory."""

    def test_requires_save(self, tmp_path):
        assert main(["--saves-dir", str(tmp_path), "status"]) == 1

    def test_new_then_act(self, tmp_path):
        saves = ["--saves-dir", str(tmp_path)]
        assert main(saves + ["new"]) == 0
        assert main(saves + ["new"]) == 1
        assert main(saves + ["act", "study"]) == 0

        data = json.loads((tmp_path / "default.json").read_text(encoding="utf-8"))
        assert data["parameters"]["intelligence"] == 15
        assert data["achievements"]["pending_notifications"] == []

    def test_slot_remembered(self, tmp_path):
        assert main(["--saves-dir", str(tmp_path), "--slot", "second", "new"]) == 0
        config = json.loads((tmp_path / ".ainimo_config.json").read_text(encoding="utf-8"))
        assert config["slot"] == "second"

    def test_buy_without_coins(self, tmp_path):
        saves = ["--saves-dir", str(tmp_path)]
        main(saves + ["new"])
        assert main(saves + ["buy", "hat_crown"]) == 1

    def test_chat(self, tmp_path, capsys):
        saves = ["--saves-dir", str(tmp_path)]
        main(saves + ["new"])
        assert main(saves + ["chat", "hello", "friend"]) == 0
        assert "Ainimo:" in capsys.readouterr().out
