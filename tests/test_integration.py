import sys
import os
import io

import pytest

# Ensure src is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
sys.path.insert(0, SRC)

from treelox import Session, run_source
from treelox.config import Config
from treelox.error_reporter import get_error_reporter


# Helper: run a whole program and return its printed lines
def run_program(src, **overrides):
	settings = Config(load=False)
	for key, value in overrides.items():
		settings.set(key, value, persist=False)
	out = io.StringIO()
	result = run_source(src, output=out, config=settings, filename="program.lox")
	return out.getvalue().splitlines(), result


BANK = """
class Account {
	init(owner) { this.owner = owner; this.balance = 0; }
	deposit(amount) { this.balance = this.balance + amount; return this; }
	withdraw(amount) {
		if (amount > this.balance) return false;
		this.balance = this.balance - amount;
		return true;
	}
}

class Savings < Account {
	init(owner, rate) { super.init(owner); this.rate = rate; }
	accrue() { return this.deposit(this.balance * this.rate); }
}

var s = Savings("ada", 0.5);
s.deposit(100).deposit(20);
s.accrue();
print s.balance;
print s.withdraw(1000);
print s.withdraw(80);
print s.balance;
"""


def test_end_to_end_counter():
	lines, result = run_program(
		"fun counter(){ var i=0; fun inc(){ i=i+1; return i; } return inc; } "
		"var c=counter(); print c(); print c();"
	)
	assert result.ok
	assert lines == ["1", "2"]


@pytest.mark.parametrize("stress", [False, True])
def test_bank_program(stress):
	lines, result = run_program(BANK, gc_stress=stress)
	assert result.ok, result.errors
	assert lines == ["180", "false", "true", "100"]


def test_closures_in_a_loop_capture_fresh_scopes():
	lines, result = run_program("""
	var fns_0; var fns_1; var fns_2;
	for (var i = 0; i < 3; i = i + 1) {
		var j = i;
		fun f() { return j; }
		if (i == 0) fns_0 = f;
		if (i == 1) fns_1 = f;
		if (i == 2) fns_2 = f;
	}
	print fns_0() + fns_1() + fns_2();
	""")
	assert result.ok
	assert lines == ["3"]


def test_runtime_error_report_format():
	_, result = run_program('var a = "x";\nprint a - 1;')
	error = result.runtime_error
	report = get_error_reporter().format(error, "program.lox")
	assert report.splitlines()[0] == "TypeMismatch: Operands must be numbers."
	assert report.splitlines()[1] == "[line 2]"
	assert "print a - 1;" in report


def test_static_error_report_format():
	_, result = run_program("var = 1;")
	report = get_error_reporter().format(result.static_errors[0], "program.lox")
	assert report.splitlines()[0] == "[line 1] Error at '=': Expect variable name."


def test_session_accumulates_definitions():
	out = io.StringIO()
	session = Session(output=out, config=Config(load=False))
	session.run("fun square(n) { return n * n; }")
	session.run("class Sq { area(n) { return square(n); } }")
	session.run("print Sq().area(9);")
	assert out.getvalue().splitlines() == ["81"]
