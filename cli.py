from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, TextIO

import uvicorn

from reviewer.beautify import beautify
from reviewer.detect import detect, dialect_from_name
from reviewer.model import AnalysisResult, Dialect, Severity
from reviewer.pipeline import analyze


logger = logging.getLogger("reviewer.cli")

SEVERITY_COLORS = {
	Severity.ERROR: "\033[31m",
	Severity.WARNING: "\033[33m",
	Severity.INFO: "\033[36m",
}
RESET = "\033[0m"


def read_code(path: Optional[str], stdin: TextIO) -> str:
	if path:
		with open(path, "r", encoding="utf-8") as fh:
			return fh.read()
	if stdin.isatty():
		print("Paste your code snippet. Press Ctrl+D (Ctrl+Z then Enter on Windows) to finish.", file=sys.stderr)
	return stdin.read()


def render_report(result: AnalysisResult, dialect: Dialect, color: bool = False) -> str:
	out = ["=== Summary ===", result.summary, "", "=== Language ===", dialect.display_name, "", "=== Issues Found ==="]
	if not result.issues:
		out.append("No issues detected.")
	for n, issue in enumerate(result.issues, start=1):
		line_info = f" (Line {issue.line_number})" if issue.line_number is not None else ""
		text = f"{n}. [{issue.kind}]{line_info}: {issue.message} -> {issue.suggestion}"
		if color:
			text = f"{SEVERITY_COLORS[issue.severity]}{text}{RESET}"
		out.append(text)
	return "\n".join(out)


def cmd_analyze(args: argparse.Namespace) -> int:
	try:
		code = read_code(args.path, sys.stdin)
	except OSError as e:
		args.parser.error(f"cannot read {args.path}: {e}")

	if not code.strip():
		print("No code provided. Pass a file path or pipe code via stdin.", file=sys.stderr)
		return 1

	dialect = dialect_from_name(args.dialect) if args.dialect else detect(code)
	logger.debug("using dialect %s", dialect.value)
	result = analyze(code, dialect)

	if args.json:
		payload = {"language": dialect.display_name, **result.model_dump(mode="json", by_alias=True)}
		if args.beautify:
			payload["beautifiedCode"] = beautify(code, dialect)
		print(json.dumps(payload, indent=2))
		return 0

	print(render_report(result, dialect, color=sys.stdout.isatty()))
	if args.beautify:
		print()
		print("=== Beautified Code ===")
		print(beautify(code, dialect))
	return 0


def cmd_serve(args: argparse.Namespace) -> int:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
	return 0


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="snippet-review")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a snippet from a file or stdin")
	pa.add_argument("path", nargs="?", help="Path to a source file (default: stdin)")
	pa.add_argument("--dialect", choices=[d.value for d in Dialect if d is not Dialect.UNKNOWN], help="Skip detection")
	pa.add_argument("--json", action="store_true", help="Print the result as JSON")
	pa.add_argument("--beautify", action="store_true", help="Also print the re-indented snippet")
	pa.set_defaults(func=cmd_analyze, parser=pa)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)
	return parser


def main(argv: Optional[list] = None) -> int:
	args = build_parser().parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	return args.func(args)


if __name__ == "__main__":
	sys.exit(main())
