"""utf8scan CLI entrypoint."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from utf8scan.core import (
    AuditRunner,
    AuditTarget,
    ScanLog,
    Utf8Scanner,
    count_scalars,
    repair,
    to_lower,
    to_upper,
)


def load_bytes(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path.read_bytes()


def write_bytes(data: bytes, output: Optional[str]) -> None:
    if output:
        Path(output).write_bytes(data)
        return
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def build_scanner(args: argparse.Namespace) -> Utf8Scanner:
    return Utf8Scanner(stop_at_nul=args.stop_at_nul)


def build_log(args: argparse.Namespace) -> Optional[ScanLog]:
    return ScanLog(Path(args.scan_log)) if args.scan_log else None


def check(args: argparse.Namespace) -> int:
    scanner = build_scanner(args)
    run = scanner.locate_invalid(load_bytes(args.path))
    log = build_log(args)
    if log is not None:
        log.log(args.path, "check", [run] if run else [])
    if run is None:
        print("valid")
        return 0
    print(f"invalid offset={run.offset} length={run.length}")
    return 1


def repair_file(args: argparse.Namespace) -> int:
    scanner = build_scanner(args)
    data = load_bytes(args.path)
    log = build_log(args)
    if log is not None:
        log.log(args.path, "repair", list(scanner.iter_invalid(data)))
    write_bytes(repair(data, args.replacement.encode("utf-8"), scanner), args.output)
    return 0


def count(args: argparse.Namespace) -> int:
    print(count_scalars(load_bytes(args.path), build_scanner(args)))
    return 0


def lower(args: argparse.Namespace) -> int:
    write_bytes(to_lower(load_bytes(args.path), build_scanner(args)), args.output)
    return 0


def upper(args: argparse.Namespace) -> int:
    write_bytes(to_upper(load_bytes(args.path), build_scanner(args)), args.output)
    return 0


def audit(args: argparse.Namespace) -> int:
    runner = AuditRunner(
        artifacts_path=Path(args.artifacts).resolve(),
        scanner=build_scanner(args),
        replacement=args.replacement.encode("utf-8"),
        log=build_log(args),
    )
    targets: List[AuditTarget] = [AuditTarget(name=Path(path).name, path=Path(path)) for path in args.paths]
    summary = runner.run(targets, notes=args.notes)
    print(json.dumps(summary, indent=2))
    return 0 if summary["totals"]["invalid"] == 0 else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="UTF-8 validation and repair")
    parser.add_argument(
        "--stop-at-nul", action="store_true", help="Treat the first zero byte as end of text"
    )
    parser.add_argument("--scan-log", default=None, help="Append scan checkpoints to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Report the first malformed run")
    check_parser.add_argument("path", help="Input file, or - for stdin")
    check_parser.set_defaults(func=check)

    repair_parser = subparsers.add_parser("repair", help="Replace malformed runs")
    repair_parser.add_argument("path", help="Input file, or - for stdin")
    repair_parser.add_argument(
        "--replacement", default="\ufffd", help="Text substituted for each malformed run"
    )
    repair_parser.add_argument("--output", default=None, help="Output file (default: stdout)")
    repair_parser.set_defaults(func=repair_file)

    count_parser = subparsers.add_parser("count", help="Count scalar units")
    count_parser.add_argument("path", help="Input file, or - for stdin")
    count_parser.set_defaults(func=count)

    for name, func, text in (("lower", lower, "Fold to lower case"), ("upper", upper, "Fold to upper case")):
        fold_parser = subparsers.add_parser(name, help=text)
        fold_parser.add_argument("path", help="Input file, or - for stdin")
        fold_parser.add_argument("--output", default=None, help="Output file (default: stdout)")
        fold_parser.set_defaults(func=func)

    audit_parser = subparsers.add_parser("audit", help="Audit files and write result artifacts")
    audit_parser.add_argument("paths", nargs="+", help="Files to audit")
    audit_parser.add_argument(
        "--artifacts", default="artifacts", help="Directory where result artifacts are written"
    )
    audit_parser.add_argument(
        "--replacement", default="?", help="Marker used when sizing repaired output"
    )
    audit_parser.add_argument("--notes", default="", help="Optional notes captured in artifacts")
    audit_parser.set_defaults(func=audit)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
