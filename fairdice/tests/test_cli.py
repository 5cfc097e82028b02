import re

from typer.testing import CliRunner

from fairdice.cli import app
from fairdice.commit_reveal.commit import build_commitment
from fairdice.commit_reveal.keys import SecretKey
from fairdice.constants import USAGE_EXAMPLE

DICE = ["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"]

runner = CliRunner()


def test_table_plain():
    res = runner.invoke(app, ["table", "--plain", *DICE])
    assert res.exit_code == 0, res.output
    assert "beats" in res.output
    assert "0.5556" in res.output


def test_table_rich_precision():
    res = runner.invoke(app, ["table", "-p", "2", *DICE])
    assert res.exit_code == 0, res.output
    assert "0.56" in res.output
    assert "0.5556" not in res.output


def test_table_accepts_negative_faces():
    res = runner.invoke(app, ["table", "--plain", "-1,2,3,4,5,6", *DICE[:2]])
    assert res.exit_code == 0, res.output


def test_play_rejects_too_few_dice():
    res = runner.invoke(app, ["play", *DICE[:2]])
    assert res.exit_code == 1
    assert "InsufficientDice" in res.output
    assert USAGE_EXAMPLE in res.output


def test_play_rejects_malformed_die():
    res = runner.invoke(app, ["play", "1,2,3", *DICE[:2]])
    assert res.exit_code == 1
    assert "MalformedDie" in res.output
    assert "Example:" in res.output


def test_play_exit_request():
    res = runner.invoke(app, ["play", *DICE], input="x\n")
    assert res.exit_code == 0, res.output
    assert "commitment=" in res.output
    assert "Goodbye." in res.output
    assert "key=" not in res.output


def test_play_end_of_input_fails():
    res = runner.invoke(app, ["play", *DICE], input="")
    assert res.exit_code == 1
    assert "end of input" in res.output


def test_play_full_game():
    # answer every prompt with the first die / zero; retry on a taken die
    res = runner.invoke(app, ["play", *DICE], input="0\n0\n1\n0\n0\n")
    assert res.exit_code == 0, res.output
    assert re.search(r"Winner: (you|computer|nobody \(tie\))\.", res.output)
    assert res.output.count("key=") == 3


def test_roll():
    res = runner.invoke(app, ["roll", "10", "--purpose", "lottery"], input="7\n")
    assert res.exit_code == 0, res.output
    assert "range=0..9; purpose=lottery" in res.output
    m = re.search(r"Result: (\d+)", res.output)
    assert m and 0 <= int(m.group(1)) < 10


def test_roll_rejects_bad_purpose():
    res = runner.invoke(app, ["roll", "6", "--purpose", "a;b"])
    assert res.exit_code == 2


def test_verify_ok_and_mismatch():
    key = SecretKey(bytes(range(32)))
    c = build_commitment(key, 3).hex()
    ok = runner.invoke(app, ["verify", "--commitment", c, "--key", key.hex(), "--value", "3"])
    assert ok.exit_code == 0, ok.output
    assert ok.output.startswith("OK")

    bad = runner.invoke(app, ["verify", "--commitment", c, "--key", key.hex(), "--value", "4"])
    assert bad.exit_code == 1
    assert "MISMATCH" in bad.output


def test_verify_bad_hex():
    res = runner.invoke(app, ["verify", "--commitment", "zz", "--key", "00", "--value", "1"])
    assert res.exit_code == 2


def test_config_file_and_log_level(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("probability_precision: 1\n")
    res = runner.invoke(app, ["--config", str(p), "--log-level", "error", "table", "--plain", *DICE])
    assert res.exit_code == 0, res.output
    assert "0.6" in res.output


def test_bad_config_exits_2(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("nonsense: 1\n")
    res = runner.invoke(app, ["--config", str(p), "table", *DICE])
    assert res.exit_code == 2


def test_version():
    res = runner.invoke(app, ["--version"])
    assert res.exit_code == 0
    assert res.output.startswith("fairdice ")


def test_play_rejects_overlong_face():
    die = ",".join(["9" * 5000] + ["1"] * 5)
    res = runner.invoke(app, ["play", die, "1,2,3,4,5,6", "1,2,3,4,5,6"])
    assert res.exit_code == 1
    assert "MalformedDie" in res.output
    assert USAGE_EXAMPLE in res.output


def test_roll_help_shows_instructions():
    res = runner.invoke(app, ["roll", "6"], input="?\n1\n")
    assert res.exit_code == 0, res.output
    assert "How it works" in res.output
    assert "Result:" in res.output
