# bython_test.py
import subprocess
import tempfile
import os
import sys
import pytest
import textwrap

BYTHON_CMD = [sys.executable, "-m", "bython2py"]
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

def _run(cmd, *, cwd=ROOT, env=None, text=True):
    # unified runner that always captures stdout/stderr
    return subprocess.run(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=env,
        text=text
    )

def compile_bython(src_path: str, out_py: str | None = None, *, fail_on_error: bool = True):
    """Transpile and return CompletedProcess. If fail_on_error, raise with stderr on non-zero."""
    cmd = BYTHON_CMD + ["compile", src_path]
    if out_py is not None:
        cmd += ["-o", out_py]
    res = _run(cmd)
    if fail_on_error and res.returncode != 0:
        pytest.fail(
            f"bython2py compile failed (exit {res.returncode}):\n{res.stderr}"
        )
    return res

def run_file(src_path: str, *, fail_on_error: bool = True):
    """Transpile + execute and return CompletedProcess."""
    res = _run(BYTHON_CMD + ["run", src_path])
    if fail_on_error and res.returncode != 0:
        pytest.fail(
            f"bython2py run failed (exit {res.returncode}):\n{res.stderr}"
        )
    return res

def _write(d: str, src: str) -> str:
    src_path = os.path.join(d, "prog.by")
    with open(src_path, "w", encoding="utf-8") as f:
        f.write(textwrap.dedent(src))
    return src_path

def transpile_bython(src: str) -> str:
    """
    Write `src` to a temp .by, transpile to stdout and return the Python text.
    """
    with tempfile.TemporaryDirectory() as d:
        return compile_bython(_write(d, src)).stdout

def run_bython(src: str) -> list[str]:
    """
    Write `src` to a temp .by, transpile & run, return stdout lines.
    """
    with tempfile.TemporaryDirectory() as d:
        res = run_file(_write(d, src), fail_on_error=True)
        return res.stdout.strip().splitlines()

def compile_error(src: str) -> str:
    """
    Transpile expecting a failure. Return stderr string.
    Fails the test if transpilation unexpectedly succeeds.
    """
    with tempfile.TemporaryDirectory() as d:
        res = compile_bython(_write(d, src), fail_on_error=False)
        if res.returncode == 0:
            pytest.fail("Expected transpilation to fail, but it succeeded.")
        if res.stdout:
            pytest.fail(f"Failed transpilation still produced output:\n{res.stdout}")
        return res.stderr

def runtime_error(src: str) -> str:
    """
    Transpile successfully, then run expecting a runtime failure.
    Return stderr string.
    """
    with tempfile.TemporaryDirectory() as d:
        src_path = _write(d, src)
        compile_bython(src_path, fail_on_error=True)
        rres = run_file(src_path, fail_on_error=False)
        if rres.returncode == 0:
            pytest.fail("Expected program to fail at runtime, but it succeeded.")
        return rres.stderr
