import sys
import subprocess
from pathlib import Path
import logging

from .parser import parse
from .codegen_py import CodeGen


def transpile(source: str) -> str:
    """
    Parse Bython source and generate Python.
    Either the full text comes back or a TranspileError is raised.
    """
    program = parse(source)
    return CodeGen(program).gen()


def transpile_file(input_path: str, output_path: str | None = None) -> str:
    """
    Read a Bython file and transpile it; write the Python text to disk when
    `output_path` is given. Returns the generated text.
    """
    inp = Path(input_path)
    src = inp.read_text(encoding="utf-8")
    code = transpile(src)

    if output_path is not None:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(code, encoding="utf-8")
        logging.info(f"Generated {out}")
    return code


def run_python(code: str, python: str | None = None) -> int:
    """
    Pipe generated Python into an interpreter, relay its output streams and
    return its exit status.
    """
    exe = python or sys.executable
    logging.debug(f"Running generated code with {exe}")
    try:
        proc = subprocess.run(
            [exe, "-"],
            input=code,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError:
        logging.error(f"Python interpreter not found: {exe}")
        return 127

    sys.stdout.write(proc.stdout)
    sys.stdout.flush()
    sys.stderr.write(proc.stderr)
    sys.stderr.flush()
    if proc.returncode != 0:
        logging.info(f"{exe} exited with status {proc.returncode}")
    return proc.returncode
