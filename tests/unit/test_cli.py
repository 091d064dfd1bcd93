# tests/unit/test_cli.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
import logging

import pytest

from fsmgen.cli import build_parser, main, run, split_type_names
from fsmgen.core.config import CompilerConfig
from fsmgen.core.errors import NamingPolicyError


class TestArguments:
    def test_short_and_long_flags(self):
        parser = build_parser()
        short = parser.parse_args(["-type", "CBMDeclaration", "-dir", "src", "-v"])
        long = parser.parse_args(["--type", "CBMDeclaration", "--dir", "src", "--verbose"])
        assert vars(short) == vars(long)
        assert short.directory == "src"
        assert short.verbose is True

    def test_type_is_required(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2
        assert "-type" in capsys.readouterr().err

    def test_empty_type_list(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["-type", " , ", "-dir", str(tmp_path)])
        assert exc_info.value.code == 2

    def test_split_type_names(self):
        assert split_type_names("CBMDeclaration, OtherDeclaration,") == ["CBMDeclaration", "OtherDeclaration"]


class TestMain:
    def test_generates_file(self, source_dir):
        assert main(["-type", "CBMDeclaration", "-dir", str(source_dir)]) == 0
        generated = (source_dir / "cbm.fsm.py").read_text(encoding="utf-8")
        assert "class CBM:" in generated

    def test_verbose_logs_description(self, source_dir, caplog):
        with caplog.at_level(logging.INFO, logger="fsmgen"):
            assert main(["-type", "CBMDeclaration", "-dir", str(source_dir), "-v"]) == 0
        assert "digraph CBM {" in caplog.text
        assert "Terminal [shape=Msquare];" in caplog.text

    def test_naming_policy_checked_before_scanning(self, tmp_path, write_source, caplog):
        write_source("broken.py", "class Broken(:\n")
        with caplog.at_level(logging.ERROR, logger="fsmgen"):
            assert main(["-type", "Foo", "-dir", str(tmp_path)]) == 1
        assert "unsupported type name" in caplog.text
        assert "can't parse" not in caplog.text

    def test_type_not_found(self, source_dir, caplog):
        with caplog.at_level(logging.ERROR, logger="fsmgen"):
            assert main(["-type", "OtherDeclaration", "-dir", str(source_dir)]) == 1
        assert "type `OtherDeclaration` not found" in caplog.text

    def test_failure_does_not_stop_other_declarations(self, source_dir, write_source, caplog):
        write_source(
            "broken.py",
            """
            class BrokenDeclaration:
                First: 'int'
                Second: "Annotated[int, 'Go:\\"Nowhere\\"']"
            """,
        )
        with caplog.at_level(logging.ERROR, logger="fsmgen"):
            code = main(["-type", "BrokenDeclaration,CBMDeclaration", "-dir", str(source_dir)])
        assert code == 1
        assert "no such destination state as `Nowhere`" in caplog.text
        assert (source_dir / "cbm.fsm.py").exists()
        assert not (source_dir / "broken.fsm.py").exists()

    def test_min_event_length_flag(self, write_source, tmp_path, caplog):
        write_source(
            "job.py",
            """
            from typing import Annotated


            class JobDeclaration:
                Idle: Annotated[int, 'Go:"Done"']
                Done: int
            """,
        )
        assert main(["-type", "JobDeclaration", "-dir", str(tmp_path)]) == 0
        with caplog.at_level(logging.ERROR, logger="fsmgen"):
            assert main(["-type", "JobDeclaration", "-dir", str(tmp_path), "--min-event-length", "3"]) == 1
        assert "at least 3 characters" in caplog.text

    def test_config_file(self, write_source, tmp_path, caplog):
        config = write_source("pyproject.toml", "[tool.fsmgen]\nmin-event-name-length = 0\n")
        with caplog.at_level(logging.ERROR, logger="fsmgen"):
            assert main(["-type", "CBMDeclaration", "-dir", str(tmp_path), "--config", str(config)]) == 1
        assert "min_event_name_length" in caplog.text


class TestRun:
    def test_returns_failure_count(self, source_dir):
        assert run(["CBMDeclaration", "OtherDeclaration"], str(source_dir), CompilerConfig()) == 1

    def test_invalid_names_raise(self, source_dir):
        with pytest.raises(NamingPolicyError):
            run(["CBMDeclaration", "Foo"], str(source_dir), CompilerConfig())
        assert not (source_dir / "cbm.fsm.py").exists()
