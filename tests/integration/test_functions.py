import pytest
from bython_test import run_bython, compile_error, runtime_error, transpile_bython

# ---------------------------
# OK cases
# ---------------------------

ok_cases = [
("""
def add(a, b) { return a + b }
print(add(2, 3))
""", ["5"]),

# recursion
("""
def fact(n) {
    if n <= 1 { return 1 }
    return n * fact(n - 1)
}
print(fact(5))
""", ["120"]),

# no parameters, empty argument list
("""
def greet() {
    print("hi")
}
greet()
""", ["hi"]),

# empty body
("""
def nothing() { }
print(nothing())
""", ["None"]),

# calls as arguments
("""
def double(x) { return x * 2 }
print(double(double(3)))
""", ["12"]),

# member-qualified calls on builtins
("""
text = "a,b,c"
sep = ","
words = text.split(sep)
print(len(words))
print(sep.join(words))
""", ["3", "a,b,c"]),

# dunder names are plain identifiers
("""
def __helper__(x) { return x + 1 }
print(__helper__(1))
""", ["2"]),

# member access on a call result
("""
z = complex(1, 2).imag
print(z)
""", ["2.0"]),
]

@pytest.mark.parametrize("src,expected", ok_cases)
def test_functions_ok(src, expected):
    assert run_bython(src) == expected


def test_function_def_generated():
    assert transpile_bython("def add(a, b) { return a + b }") == (
        "def add(a, b):\n"
        "    return a + b\n"
    )


def test_member_call_statement_generated():
    assert transpile_bython("obj.method(1, 2)") == "obj.method(1, 2)\n"


# ---------------------------
# ERR cases
# ---------------------------

compile_err_cases = [
# trailing comma in parameters
("""
def f(a,) { return a }
""", "Unexpected"),

# parameters must be names
("""
def f(1) { return 1 }
""", "Unexpected"),

# missing body
("""
def f(a)
""", "Unexpected"),

# keywords are not names
("""
def return(a) { }
""", "Unexpected"),

# unclosed argument list
("""
f(1, 2
""", "Unexpected"),
]

@pytest.mark.parametrize("src,needle", compile_err_cases)
def test_functions_compile_errors(src, needle):
    msg = compile_error(src)
    assert needle in msg


def test_undefined_function_fails_at_runtime():
    err = runtime_error("""
    missing(1)
    """)
    assert "NameError" in err
