"""Tests for control-flow checks."""

from tantrums.utils.diagnostics import Severity


class TestReturnOutsideFunction:
    """Test return and throw at file level."""

    def test_top_level_return(self, lint) -> None:
        """Test that a file-level return is an error on the keyword."""
        diagnostics = lint("return 1;", "return-outside-function")

        assert len(diagnostics) == 1
        assert (diagnostics[0].start_col, diagnostics[0].end_col) == (0, 6)
        assert diagnostics[0].message == "'return' used outside of a function."

    def test_top_level_throw(self, lint) -> None:
        """Test that throw follows the same rule."""
        diagnostics = lint('throw "boom";', "return-outside-function")
        assert diagnostics[0].message == "'throw' used outside of a function."

    def test_inside_nested_block(self, lint) -> None:
        """Test that a return nested in blocks of a function is fine."""
        source = """
        tantrum f(x) {
            if (x > 0) {
                while (true) {
                    return x;
                }
            }
            return 0;
        }
        """
        assert lint(source, "return-outside-function") == []

    def test_after_function_closes(self, lint) -> None:
        """Test that a return after the closing brace is outside again."""
        source = """
        tantrum f() {
            print(1);
        }
        return 2;
        """
        diagnostics = lint(source, "return-outside-function")

        assert len(diagnostics) == 1
        assert diagnostics[0].line == 3


class TestLoopJumps:
    """Test break and continue placement."""

    def test_top_level_break(self, lint) -> None:
        """Test break outside any loop."""
        diagnostics = lint("break;", "jump-outside-loop")

        assert len(diagnostics) == 1
        assert diagnostics[0].message == "'break' used outside of a loop."
        assert diagnostics[0].severity == Severity.ERROR

    def test_inside_loop(self, lint) -> None:
        """Test break and continue inside loop bodies, nested blocks included."""
        source = """
        while (true) {
            break;
        }
        tantrum f(items) {
            for item in items {
                if (item == 0) {
                    continue;
                }
            }
        }
        """
        assert lint(source, "jump-outside-loop") == []

    def test_function_body_is_not_a_loop(self, lint) -> None:
        """Test continue directly in a function body."""
        source = """
        tantrum f() {
            continue;
        }
        """
        diagnostics = lint(source, "jump-outside-loop")

        assert len(diagnostics) == 1
        assert diagnostics[0].message == "'continue' used outside of a loop."


class TestDeadCode:
    """Test unreachable statements after return."""

    def test_after_return(self, lint) -> None:
        """Test that a statement after return in the same block is reported."""
        source = """
        tantrum int f() {
            return 1;
            print("never");
        }
        """
        diagnostics = lint(source, "unreachable-code")

        assert len(diagnostics) == 1
        assert diagnostics[0].line == 2
        assert (diagnostics[0].start_col, diagnostics[0].end_col) == (4, 19)

    def test_return_in_if_block(self, lint) -> None:
        """Test that code after the block holding the return is reachable."""
        source = """
        tantrum int f(int x) {
            if (x > 0) {
                return 1;
            }
            return 0;
        }
        """
        assert lint(source, "unreachable-code") == []

    def test_if_else(self, lint) -> None:
        """Test returns in both branches."""
        source = """
        tantrum int f(int x) {
            if (x > 0) {
                return 1;
            } else {
                return 2;
            }
        }
        """
        assert lint(source, "unreachable-code") == []

    def test_each_line_reported_once(self, lint) -> None:
        """Test that consecutive returns do not duplicate findings."""
        source = """
        tantrum int f() {
            return 1;
            return 2;
            x = 3;
        }
        """
        diagnostics = lint(source, "unreachable-code")
        assert [d.line for d in diagnostics] == [2, 3]


class TestDivisionByZero:
    """Test literal division by zero."""

    def test_integer_zero(self, lint) -> None:
        """Test division by 0."""
        diagnostics = lint("y = 10 / 0;", "division-by-zero")

        assert len(diagnostics) == 1
        assert (diagnostics[0].start_col, diagnostics[0].end_col) == (7, 10)
        assert diagnostics[0].severity == Severity.ERROR

    def test_float_zero(self, lint) -> None:
        """Test division by 0.0."""
        assert len(lint("y = 10 / 0.0;", "division-by-zero")) == 1

    def test_inside_string(self, lint) -> None:
        """Test that division text inside a literal is ignored."""
        assert lint('s = "10 / 0";', "division-by-zero") == []

    def test_inside_comment(self, lint) -> None:
        """Test that division text inside a comment is ignored."""
        assert lint("y = 1; // 10 / 0", "division-by-zero") == []

    def test_non_zero(self, lint) -> None:
        """Test divisors that merely start with zero."""
        for source in ("y = 10 / 0.5;", "y = 10 / 05;", "y = 10 / x;", "y = 10 / 0x;"):
            assert lint(source, "division-by-zero") == [], source


class TestMissingReturn:
    """Test value-returning functions without a return."""

    def test_missing(self, lint) -> None:
        """Test that the warning points at the function name."""
        diagnostics = lint('tantrum int f() { print("hi"); }', "missing-return")

        assert len(diagnostics) == 1
        assert (diagnostics[0].line, diagnostics[0].start_col, diagnostics[0].end_col) == (0, 12, 13)
        assert diagnostics[0].message == "Function 'f' has return type but may not return a value."
        assert diagnostics[0].severity == Severity.WARNING

    def test_present(self, lint) -> None:
        """Test that adding a return clears the warning."""
        assert lint('tantrum int f() { print("hi"); return 0; }', "missing-return") == []

    def test_nested_return(self, lint) -> None:
        """Test that a return in a nested block counts."""
        source = """
        tantrum int f(int x) {
            if (x > 0) {
                return 1;
            }
        }
        """
        assert lint(source, "missing-return") == []

    def test_void_and_untyped(self, lint) -> None:
        """Test functions that need no return."""
        source = """
        tantrum void f() {
            print("x");
        }
        tantrum g() {
            print("y");
        }
        """
        assert lint(source, "missing-return") == []

    def test_return_in_other_function(self, lint) -> None:
        """Test that a later function's return does not count."""
        source = """
        tantrum int f() {
            print("x");
        }
        tantrum int g() {
            return 1;
        }
        """
        diagnostics = lint(source, "missing-return")

        assert len(diagnostics) == 1
        assert diagnostics[0].message.startswith("Function 'f'")
