import pytest
from policy.fit import FitPolicy
from workload.script import Command, ScriptError, load_script, parse_command, parse_script


def test_parse_script():
    script = parse_script([
        "2\n",
        "16384\n",
        "A 1 210\n",
        "\n",
        "# comment\n",
        "d 1\n",
        "P\n",
    ])
    assert script.policy is FitPolicy.BEST_FIT
    assert script.total_size == 16384
    assert script.commands == [
        Command("alloc", 1, 210, lineno=3),
        Command("free", 1, lineno=6),
        Command("print", lineno=7),
    ]


def test_header_only():
    script = parse_script(["3", "10"])
    assert script.policy is FitPolicy.WORST_FIT
    assert script.commands == []


@pytest.mark.parametrize("lines,lineno", [
    (["4", "100"], 1),
    (["x", "100"], 1),
    (["1", "0"], 2),
    (["1", "big"], 2),
    (["1", "100", "A 1"], 3),
    (["1", "100", "X 1 2"], 3),
    (["1", "100", "A 1 2 3"], 3),
    (["1", "100", "A 1 -2"], 3),
    (["1", "100", "A one 2"], 3),
    (["1", "100", "P", "D"], 4),
])
def test_bad_lines(lines, lineno):
    with pytest.raises(ScriptError) as exc:
        parse_script(lines)
    assert exc.value.lineno == lineno
    assert f"line {lineno}" in str(exc.value)


def test_missing_header():
    with pytest.raises(ScriptError):
        parse_script(["1"])


def test_parse_command():
    assert parse_command("  A   7   30 ") == Command("alloc", 7, 30)
    assert parse_command("p") == Command("print")


def test_load_script(tmp_path):
    path = tmp_path / "run.txt"
    path.write_text("1\n100\nA 1 10\nP\n")
    script = load_script(str(path))
    assert script.total_size == 100
    assert [c.op for c in script.commands] == ["alloc", "print"]


@pytest.mark.parametrize("line", ["A -1 10", "D -1", "a -7 3"])
def test_negative_pid(line):
    with pytest.raises(ScriptError) as exc:
        parse_script(["1", "100", line])
    assert exc.value.lineno == 3
    assert "non-negative" in str(exc.value)


def test_pid_zero_is_allowed():
    assert parse_command("A 0 5") == Command("alloc", 0, 5)


def test_load_script_rejects_bad_bytes(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_bytes(b"1\n100\n\xff\xfe P\n")
    with pytest.raises(ScriptError) as exc:
        load_script(str(path))
    assert exc.value.lineno == 0
