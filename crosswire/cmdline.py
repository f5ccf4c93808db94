"""
This is the crosswire component compiler.

{0}

For example:

    crosswire widgets.json -t vue

will classify, analyse, and lower every declaration in widgets.json,
then print an outline of what a Vue-style emitter would receive.

    crosswire -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="crosswire",
	description="Compiler core for declarative UI component classes.",
)
parser.add_argument("tree", help="JSON parse tree of one or more modules.")
parser.add_argument('-t', "--target", default="react", help="One of react, preact, inferno, vue, angular.")
parser.add_argument('-c', "--check", action="store_true", help="Classify and analyse, but do not lower.")
parser.add_argument('-v', "--verbose", action="count", help="Say what is going on along the way.")
parser.add_argument("--max-issues", type=int, default=10, help="Give up after this many problems.")

def run(args):
	from .diagnostics import Report, TooManyIssues, Yuck
	from .front_end import load_file
	from .compiler import Compiler
	from .emission import TARGETS, OutlineEmitter
	if args.target not in TARGETS:
		print("Unknown target %r; try one of: %s" % (args.target, ", ".join(TARGETS)), file=sys.stderr)
		return 2
	report = Report(verbose=args.verbose, max_issues=args.max_issues)
	try:
		try: modules = load_file(Path.cwd() / args.tree, report)
		except Yuck:
			assert report.sick()
			report.complain_to_console()
			return 1
		results = Compiler(modules, report).compile_all(lower=not args.check)
		if report.sick():
			report.complain_to_console()
			return 1
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return 1
	if report.warnings:
		report.complain_to_console()
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
	else:
		emitter = OutlineEmitter(TARGETS[args.target])
		for lowered in results:
			print(emitter.outline(lowered))
	return 0

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
