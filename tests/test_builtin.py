"""Tests for the builtin commands and their dispatch table."""

import os

import psutil

from pipeshell.builtin import (
    CLEAR_SCREEN, count_occurrences, execute_builtin, grep_count, lookup,
)
from pipeshell.history import BUILTIN, PIPELINE, record
from pipeshell.results import Result


class TestDispatch:

    def test_lookup_known_names(self):
        for name in ("cd", "help", "exit", "pwd", "grep", "info", "clear", "history"):
            assert callable(lookup(name))

    def test_lookup_unknown(self):
        assert lookup("ls") is None

    def test_execute_non_builtin(self):
        assert execute_builtin(["ls", "-l"]) == (False, True)

    def test_execute_empty(self):
        assert execute_builtin([]) == (False, True)

    def test_exit_stops_loop(self):
        assert execute_builtin(["exit"]) == (True, False)


class TestCd:

    def test_changes_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(os.getcwd())
        assert execute_builtin(["cd", str(tmp_path)]) == (True, True)
        assert os.getcwd() == str(tmp_path)

    def test_missing_argument(self, capfd):
        assert execute_builtin(["cd"]) == (True, True)
        assert 'expected argument to "cd"' in capfd.readouterr().err

    def test_bad_directory(self, tmp_path, capfd):
        assert execute_builtin(["cd", str(tmp_path / "nope")]) == (True, True)
        assert "cd:" in capfd.readouterr().err


class TestGrep:

    def test_overlapping_count(self):
        assert count_occurrences("aaaa", "aa") == 3
        assert count_occurrences("abc", "x") == 0
        assert count_occurrences("abc", "") == 0

    def test_counts_file(self, tmp_path, capfd):
        f = tmp_path / "text"
        f.write_text("foo bar foo\nfoofoo\n")
        assert grep_count(["-c", "foo", str(f)]) == (Result.SUCCESS, 4)

        execute_builtin(["grep", "-c", "foo", str(f)])
        assert "There are 4 times" in capfd.readouterr().out

    def test_wrong_parameter(self, tmp_path):
        assert grep_count(["-x", "foo", str(tmp_path)]) == (Result.WRONG_PARAMETER, 0)

    def test_missing_file(self, tmp_path):
        assert grep_count(["-c", "foo", str(tmp_path / "missing")]) == (Result.FILE_NOT_FOUND, 0)

    def test_missing_arguments(self):
        assert grep_count(["-c"]) == (Result.MISSING_PARAMETER, 0)


class TestOtherBuiltins:

    def test_pwd(self, tmp_path, monkeypatch, capfd):
        monkeypatch.chdir(tmp_path)
        assert execute_builtin(["pwd"]) == (True, True)
        assert capfd.readouterr().out.strip() == str(tmp_path)

    def test_help_lists_builtins(self, capfd):
        execute_builtin(["help"])
        out = capfd.readouterr().out
        for name in ("cd", "exit", "grep", "info", "clear"):
            assert name in out

    def test_info_reports_process(self, capfd):
        execute_builtin(["info"])
        out = capfd.readouterr().out
        assert str(os.getpid()) in out
        assert str(psutil.Process().ppid()) in out

    def test_clear(self, capfd):
        execute_builtin(["clear"])
        assert capfd.readouterr().out == CLEAR_SCREEN

    def test_history(self, capfd):
        record("ls -l", PIPELINE)
        record("pwd", BUILTIN)
        execute_builtin(["history"])
        assert capfd.readouterr().out == "1\tls -l\n2\tpwd\n"

    def test_history_by_kind(self, capfd):
        record("ls -l", PIPELINE)
        record("pwd", BUILTIN)
        record("seq 3 | wc -l", PIPELINE)

        execute_builtin(["history", "-p"])
        assert capfd.readouterr().out == "1\tls -l\n3\tseq 3 | wc -l\n"

        execute_builtin(["history", "-b"])
        assert capfd.readouterr().out == "2\tpwd\n"

    def test_history_bad_flag(self, capfd):
        assert execute_builtin(["history", "-z"]) == (True, True)
        assert "usage" in capfd.readouterr().err
