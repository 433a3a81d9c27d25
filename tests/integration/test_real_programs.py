"""
Test analysis of realistic Tantrums programs.

These tests verify that whole programs of the kind students write produce
exactly the findings a reviewer would expect, and nothing else.
"""

from tantrums import analyze_source
from tantrums.utils.diagnostics import sort_key


def _findings(source: str) -> list[tuple[int, str]]:
    return [(d.line + 1, d.name) for d in sorted(analyze_source(source), key=sort_key)]


class TestRealPrograms:
    """Test analysis of realistic Tantrums programs."""

    def test_fizzbuzz(self) -> None:
        """Test a classic loop with nested conditionals."""
        source = """\
#mode dynamic;

tantrum fizzbuzz(n) {
    for i in range(n) {
        if (i % 15 == 0) {
            print("FizzBuzz");
        } else {
            if (i % 3 == 0) {
                print("Fizz");
            } else {
                print(i);
            }
        }
    }
}

fizzbuzz(20);
"""
        assert _findings(source) == []

    def test_static_bank_account(self) -> None:
        """Test a typed program under static mode."""
        source = """\
#mode static;

tantrum int deposit(int balance, int amount) {
    if (amount <= 0) {
        throw "amount must be positive";
    }
    return balance + amount;
}

tantrum float rate(int years) {
    if (years > 5) {
        return 0.05;
    }
    return 1;
}

tantrum main() {
    int balance = deposit(100, 50);
    float r = rate(3);
    try {
        balance = deposit(balance, 0);
    } catch (err) {
        print(err);
    }
    print(balance * r);
}
"""
        assert _findings(source) == []

    def test_student_mistakes(self) -> None:
        """Test a program full of typical beginner mistakes."""
        source = """\
#mode static;

tantrum int average(int total, int count) {
    if (count == 0) {
        return total / 0;
    }
    print("no return here");
}

tantrum helper(x) {
    return x;
    print("after return");
}

tantrum main() {
    int result = average(10);
    int score = "high";
    label = "done";
    int len = 3;
    p = alloc int(4);
    print(result + score + len + p);
    avrage(1, 2);
    break;
}
"""
        assert _findings(source) == [
            (5, "division-by-zero"),
            (10, "static-missing-return-type"),
            (12, "unreachable-code"),
            (16, "wrong-argument-count"),
            (17, "assignment-type-mismatch"),
            (18, "unused-variable"),
            (18, "static-untyped-variable"),
            (19, "shadowed-builtin"),
            (20, "unfreed-allocation"),
            (20, "static-untyped-variable"),
            (22, "undefined-function"),
            (23, "jump-outside-loop"),
        ]

    def test_memory_program(self) -> None:
        """Test allocation paired with free and with returned pointers."""
        source = """\
tantrum make_counter() {
    counter = alloc int(0);
    return counter;
}

tantrum main() {
    buffer = alloc list(10);
    append(buffer, 1);
    free(buffer);
    c = make_counter();
    free(c);
}
"""
        assert _findings(source) == []

    def test_broken_delimiters_do_not_hide_other_findings(self) -> None:
        """Test that checks stay independent of one another."""
        source = """\
tantrum main() {
    x = (1 + 2;
    y = 10 / 0;
    print(x + y);
"""
        names = {name for _, name in _findings(source)}

        assert "unclosed-delimiter" in names
        assert "division-by-zero" in names
