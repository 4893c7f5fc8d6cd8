"""Tests for the scan log, audit runner and CLI."""

import csv
import json
from pathlib import Path

import pytest

from utf8scan.cli.utf8scan import main
from utf8scan.core import AuditRunner, AuditTarget, InvalidRun, ScanLog, Utf8Scanner, repair


def test_scan_log_writes(tmp_path):
    log_path = tmp_path / "logs" / "scan.log"
    log = ScanLog(log_path)
    entry = log.log("a.txt", "check")
    assert log_path.exists()
    assert log_path.read_text(encoding="utf-8") == entry + "\n"
    assert entry.endswith("Z | check | a.txt | valid")


def test_scan_log_records_runs(tmp_path):
    log = ScanLog(tmp_path / "scan.log")
    log.log("b.txt", "repair", [InvalidRun(3, 2), InvalidRun(7, 1)])
    assert log.events[0].endswith("| repair | b.txt | invalid runs=2 offset=3 length=2")


def test_audit_runner_with_fake_reader(tmp_path):
    contents = {
        Path("a.txt"): b"abc",
        Path("b.txt"): b"a\xffb\xc2",
    }

    def fake_reader(path):
        return contents[path]

    artifacts = tmp_path / "artifacts"
    log = ScanLog(tmp_path / "scan.log")
    runner = AuditRunner(artifacts_path=artifacts, reader=fake_reader, log=log)
    summary = runner.run(
        [AuditTarget("a.txt", Path("a.txt")), AuditTarget("b.txt", Path("b.txt"))],
        notes="unit",
    )

    first, second = summary["files"]
    assert first["valid"] is True
    assert first["scalars"] == 3
    assert second["valid"] is False
    assert second["invalid_runs"] == 2
    assert second["sample"] == [[1, 1], [3, 2]]
    assert second["repaired_size_bytes"] == 4
    assert summary["totals"] == {"files": 2, "valid": 1, "invalid": 1}
    assert len(log.events) == 2

    written = json.loads((artifacts / "audit_results.json").read_text(encoding="utf-8"))
    assert written["notes"] == "unit"
    assert "## b.txt" in (artifacts / "audit_results.md").read_text(encoding="utf-8")
    scorecard = (artifacts / "audit_scorecard.csv").read_text(encoding="utf-8").splitlines()
    assert scorecard[0].startswith("name,path,size_bytes")
    assert scorecard[2] == "b.txt,b.txt,4,4,0,2,4,unit"


def test_audit_scorecard_quotes_commas(tmp_path):
    runner = AuditRunner(artifacts_path=tmp_path, reader=lambda path: b"a\xffb\xc2")
    runner.run([AuditTarget("a,b.txt", Path("dir,x/a,b.txt"))], notes="n1, n2")

    with (tmp_path / "audit_scorecard.csv").open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 1
    assert rows[0]["name"] == "a,b.txt"
    assert rows[0]["path"] == str(Path("dir,x/a,b.txt"))
    assert rows[0]["invalid_runs"] == "2"
    assert rows[0]["notes"] == "n1, n2"


@pytest.mark.parametrize(
    "data, stop_at_nul",
    [
        (b"abc", False),
        (b"a\xffb\xc2", False),
        (b"ok \xf0\x9f\x98", False),
        (b"\xc2Abc\xff\xfe", False),
        (b"\xf0\x9f\x00zz\xff", True),
        (b"a\xff\x00\xff", True),
    ],
)
def test_audit_repaired_size_matches_repair(tmp_path, data, stop_at_nul):
    scanner = Utf8Scanner(stop_at_nul=stop_at_nul)
    runner = AuditRunner(artifacts_path=tmp_path, scanner=scanner, replacement=b"<?>", reader=lambda path: data)
    summary = runner.run([AuditTarget("x", Path("x"))])
    assert summary["files"][0]["repaired_size_bytes"] == len(repair(data, b"<?>", scanner))


def test_audit_runner_sample_cap(tmp_path):
    runner = AuditRunner(
        artifacts_path=tmp_path,
        reader=lambda path: b"\xff" * 20,
        max_report=3,
    )
    summary = runner.run([AuditTarget("bad", Path("bad"))])
    assert summary["files"][0]["invalid_runs"] == 20
    assert len(summary["files"][0]["sample"]) == 3


def test_audit_runner_stop_at_nul(tmp_path):
    runner = AuditRunner(
        artifacts_path=tmp_path,
        scanner=Utf8Scanner(stop_at_nul=True),
        reader=lambda path: b"ok\x00\xff",
    )
    summary = runner.run([AuditTarget("c", Path("c"))])
    assert summary["stop_at_nul"] is True
    assert summary["files"][0]["valid"] is True


def test_audit_runner_missing_file(tmp_path):
    runner = AuditRunner(artifacts_path=tmp_path / "artifacts")
    with pytest.raises(FileNotFoundError):
        runner.run([AuditTarget("missing", tmp_path / "missing.txt")])


def test_cli_check(tmp_path, capsys):
    good = tmp_path / "good.txt"
    good.write_bytes("привет".encode("utf-8"))
    bad = tmp_path / "bad.txt"
    bad.write_bytes(b"1\xff34")

    assert main(["check", str(good)]) == 0
    assert capsys.readouterr().out.strip() == "valid"
    assert main(["check", str(bad)]) == 1
    assert capsys.readouterr().out.strip() == "invalid offset=1 length=1"


def test_cli_check_writes_scan_log(tmp_path, capsys):
    source = tmp_path / "bad.txt"
    source.write_bytes(b"ab\xc2")
    log_path = tmp_path / "scan.log"
    assert main(["--scan-log", str(log_path), "check", str(source)]) == 1
    assert "| check | " in log_path.read_text(encoding="utf-8")
    assert "invalid runs=1 offset=2 length=2" in log_path.read_text(encoding="utf-8")


def test_cli_check_stop_at_nul(tmp_path, capsys):
    source = tmp_path / "nul.bin"
    source.write_bytes(b"ab\x00\xff")
    assert main(["check", str(source)]) == 1
    assert main(["--stop-at-nul", "check", str(source)]) == 0


def test_cli_repair_to_file(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"1\xff34\xc2")
    output = tmp_path / "out.txt"
    assert main(["repair", str(source), "--replacement", "*", "--output", str(output)]) == 0
    assert output.read_bytes() == b"1*34*"


def test_cli_repair_default_marker(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"a\xffb")
    output = tmp_path / "out.txt"
    main(["repair", str(source), "--output", str(output)])
    assert output.read_bytes().decode("utf-8") == "a\ufffdb"


def test_cli_count_and_fold(tmp_path, capsys):
    source = tmp_path / "in.txt"
    source.write_bytes("Ёлка Tree".encode("utf-8"))
    assert main(["count", str(source)]) == 0
    assert capsys.readouterr().out.strip() == "9"

    lowered = tmp_path / "lower.txt"
    main(["lower", str(source), "--output", str(lowered)])
    assert lowered.read_bytes().decode("utf-8") == "ёлка tree"

    raised = tmp_path / "upper.txt"
    main(["upper", str(source), "--output", str(raised)])
    assert raised.read_bytes().decode("utf-8") == "ЁЛКА TREE"


def test_cli_audit(tmp_path, capsys):
    good = tmp_path / "good.txt"
    good.write_bytes(b"fine")
    bad = tmp_path / "bad.txt"
    bad.write_bytes(b"\xed\xa0\x80")
    artifacts = tmp_path / "artifacts"

    status = main(["audit", str(good), str(bad), "--artifacts", str(artifacts), "--notes", "cli"])
    summary = json.loads(capsys.readouterr().out)
    assert status == 1
    assert summary["totals"]["invalid"] == 1
    assert summary["files"][1]["sample"] == [[0, 3]]
    assert (artifacts / "audit_scorecard.csv").exists()


def test_cli_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        main(["count", str(tmp_path / "nope.txt")])
