"""Tests for the command-line interface."""

import json

import pytest

from tantrums.cli import EXIT_ERRORS, EXIT_OK, EXIT_USAGE, collect_inputs, main


@pytest.fixture
def write_program(tmp_path):
    """Fixture to write a source file into a temporary directory."""

    def _write(source: str, name: str = "main.42AHH"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


class TestLintCommand:
    """Test the lint command."""

    def test_clean_file(self, write_program, clean_program, capsys) -> None:
        """Test that a clean file exits 0 and says so."""
        path = write_program(clean_program)

        assert main(["lint", str(path), "--no-color"]) == EXIT_OK
        assert "[ok]" in capsys.readouterr().out

    def test_errors_exit_one(self, write_program, capsys) -> None:
        """Test that an error finding exits 1 and renders the source line."""
        path = write_program("y = 10 / 0;\nprint(y);\n")

        assert main(["lint", str(path), "--no-color"]) == EXIT_ERRORS
        out = capsys.readouterr().out
        assert "error[E0303]: Division by zero." in out
        assert f"{path}:1:8" in out
        assert "found 1 error(s) and 0 warning(s)" in out

    def test_warnings_exit_zero(self, write_program, capsys) -> None:
        """Test that warnings alone do not fail the run."""
        path = write_program("int x = 5;\n")

        assert main(["lint", str(path), "--no-color"]) == EXIT_OK
        assert "warning[W0401]" in capsys.readouterr().out

    def test_json_output(self, write_program, capsys) -> None:
        """Test the JSON report layout."""
        path = write_program("x = 1\nprint(x);\n")

        assert main(["lint", str(path), "--json"]) == EXIT_OK
        payload = json.loads(capsys.readouterr().out)
        report = payload["files"][0]

        assert report["file"] == str(path)
        assert report["summary"] == {"errors": 0, "warnings": 1}
        assert report["diagnostics"][0]["name"] == "missing-semicolon"
        assert report["diagnostics"][0]["line"] == 0

    def test_deny_override(self, write_program, capsys) -> None:
        """Test that --deny turns a warning into a failing error."""
        path = write_program("x = 1\nprint(x);\n")

        assert main(["lint", str(path), "--deny", "missing-semicolon", "--no-color"]) == EXIT_ERRORS

    def test_allow_override(self, write_program, capsys) -> None:
        """Test that --allow silences a rule."""
        path = write_program("y = 10 / 0;\nprint(y);\n")

        assert main(["lint", str(path), "--allow", "E0303", "--no-color"]) == EXIT_OK

    def test_unknown_rule(self, write_program, capsys) -> None:
        """Test that an unknown rule name is a usage error."""
        path = write_program("x = 1;\n")

        assert main(["lint", str(path), "--allow", "bogus"]) == EXIT_USAGE
        assert "bogus" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys) -> None:
        """Test that an unreadable input is a usage error."""
        assert main(["lint", str(tmp_path / "absent.42AHH")]) == EXIT_USAGE
        assert "cannot read" in capsys.readouterr().err

    def test_project_config(self, write_program, tmp_path, capsys) -> None:
        """Test that tantrums.toml next to the file is honored."""
        (tmp_path / "tantrums.toml").write_text('[lint]\nallow = ["division-by-zero"]\n')
        path = write_program("y = 10 / 0;\nprint(y);\n")

        assert main(["lint", str(path), "--no-color"]) == EXIT_OK

    def test_invalid_project_config(self, write_program, tmp_path, capsys) -> None:
        """Test that a broken tantrums.toml stops the run."""
        (tmp_path / "tantrums.toml").write_text("[lint\n")
        path = write_program("x = 1;\n")

        assert main(["lint", str(path)]) == EXIT_USAGE

    def test_directory_input(self, write_program, tmp_path, capsys) -> None:
        """Test that directories are searched for source files."""
        write_program("x = 1;\nprint(x);\n", "a.42AHH")
        write_program("y = 10 / 0;\nprint(y);\n", "sub/b.42ahh")
        write_program("not tantrums", "notes.txt")

        assert main(["lint", str(tmp_path), "--json"]) == EXIT_ERRORS
        files = [f["file"] for f in json.loads(capsys.readouterr().out)["files"]]
        assert len(files) == 2
        assert not any(f.endswith(".txt") for f in files)


class TestCollectInputs:
    """Test input expansion."""

    def test_files_pass_through(self, tmp_path) -> None:
        """Test that explicit files are kept even with another suffix."""
        path = tmp_path / "script.txt"
        assert collect_inputs([path]) == [path]


class TestMain:
    """Test the entry point."""

    def test_no_command(self, capsys) -> None:
        """Test that running without a command prints help."""
        assert main([]) == EXIT_USAGE
        assert "usage" in capsys.readouterr().out.lower()

    def test_rules_command(self, capsys) -> None:
        """Test that the rule catalog lists every rule."""
        assert main(["rules"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "wrong-argument-count" in out
        assert "E0501" in out

    def test_lint_alias(self, write_program, capsys) -> None:
        """Test the short alias of the lint command."""
        path = write_program("x = 1;\nprint(x);\n")
        assert main(["l", str(path)]) == EXIT_OK
