import sys
import argparse
import logging

from .compiler import transpile_file, run_python
from .errors import TranspileError


def main(argv=None):
    parser = argparse.ArgumentParser(prog="bython2py")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="If set, show full Python traceback on errors"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress messages"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_p = subparsers.add_parser("compile", help="Transpile .by → .py")
    compile_p.add_argument("input", help="Input .by source file")
    compile_p.add_argument(
        "-o", "--output",
        help="Output .py file (default: write to stdout)"
    )

    run_p = subparsers.add_parser("run", help="Transpile a .by file and execute it")
    run_p.add_argument("input", help="Input .by source file")
    run_p.add_argument(
        "--python",
        default=sys.executable,
        help="Interpreter used to execute the generated code"
    )

    args = parser.parse_args(argv)

    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        if args.command == "compile":
            code = transpile_file(args.input, args.output)
            if args.output is None:
                sys.stdout.write(code)
        elif args.command == "run":
            code = transpile_file(args.input)
            sys.exit(run_python(code, args.python))

    except TranspileError as e:
        # If debug, re-raise to see the full traceback
        if args.debug:
            raise
        # e.__str__() is "line:col: message" when the position is known
        print(f"{args.input}:{e}", file=sys.stderr)
        sys.exit(1)

    except OSError as e:
        if args.debug:
            raise
        # the failing path may be the output, not the input
        path = e.filename if e.filename is not None else args.input
        print(f"{path}: {e.strerror or e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
