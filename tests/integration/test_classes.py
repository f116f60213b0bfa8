import pytest
from bython_test import run_bython, compile_error, runtime_error, transpile_bython

point = """
class Point {
    def __init__(self, x, y) {
        self.x = x
        self.y = y
    }

    def sum(self) {
        return self.x + self.y
    }

    def moved(self, dx, dy) {
        return Point(self.x + dx, self.y + dy)
    }
}
"""


# --- success cases: (src, expected_stdout_lines)
ok_cases = [
# construction, field reads and method calls
(point + """
p = Point(1, 2)
print(p.x)
print(p.y)
print(p.sum())
""", ["1", "2", "3"]),

# instantiation inside a method, chained member access
(point + """
p = Point(1, 2)
q = p.moved(10, 20)
print(q.sum())
print(p.moved(1, 1).x)
""", ["33", "2"]),

# method calls chain on call results
(point + """
print(Point(1, 2).moved(3, 4).moved(1, 1).sum())
total = Point(0, 0).moved(5, 5).x * 2
print(total)
""", ["12", "10"]),

# member assignment from outside the class
(point + """
p = Point(0, 0)
p.x = 7
print(p.sum())
""", ["7"]),

# nested objects give arbitrarily deep member chains
(point + """
class Segment {
    def __init__(self, a, b) {
        self.a = a
        self.b = b
    }
}
s = Segment(Point(1, 2), Point(3, 4))
print(s.b.y)
s.a.x = 9
print(s.a.x + s.b.x)
""", ["4", "12"]),

# empty class body
("""
class Empty { }
e = Empty()
print(type(e).__name__)
""", ["Empty"]),

# class attributes
("""
class Config {
    name = "demo"
    size = 3
}
print(Config.name)
print(Config.size * 2)
""", ["demo", "6"]),
]

@pytest.mark.parametrize("src,expected", ok_cases)
def test_classes_ok(src, expected):
    assert run_bython(src) == expected


def test_class_def_generated():
    assert transpile_bython("class Foo { }") == "class Foo:\n    pass\n"


def test_class_instantiation_generated():
    assert transpile_bython("p = Point(1, 2)") == "p = Point(1, 2)\n"


# --- compile-time error cases
compile_err_cases = [
# class bodies need braces
("""
class Foo
""", "Unexpected"),

# no base-class list
("""
class Foo(Base) { }
""", "Unexpected"),

# class names must be names
("""
class 1 { }
""", "Unexpected"),
]

@pytest.mark.parametrize("src,needle", compile_err_cases)
def test_classes_compile_errors(src, needle):
    msg = compile_error(src)
    assert needle in msg


def test_missing_attribute_fails_at_runtime():
    err = runtime_error(point + """
    p = Point(1, 2)
    print(p.z)
    """)
    assert "AttributeError" in err
