import pytest

from funcfeatures.errors import UnmatchedDelimiterError, NoParameterListError
from funcfeatures.core.scanner import scan, Segments
from funcfeatures.utils import justify


def check_scan(raw, head, params, body, symbol_name=None, implicit=False):
    segments = scan(raw)
    assert segments == Segments(
        symbol_name=symbol_name, head=head, params=params, body=body, implicit=implicit)
    assert segments.head + segments.params + segments.body == justify(raw)


def test_function():
    check_scan(
        "def f(x, y=1):\n    return x + y",
        "def f", "(x, y=1)", ": return x + y")


def test_async_function():
    check_scan(
        "async def f(x):\n    await x",
        "async def f", "(x)", ": await x")


def test_whitespace_is_collapsed():
    check_scan(
        "def  f (\n    x,\n    y):\n\n    return x",
        "def f ", "( x, y)", ": return x")


def test_return_annotation():
    check_scan(
        "def f(x) -> Tuple[int, int]:\n    return x, x",
        "def f", "(x)", " -> Tuple[int, int]: return x, x")


def test_nested_parentheses():
    check_scan(
        "def f(x=(1, (2, 3)), y=g()):\n    pass",
        "def f", "(x=(1, (2, 3)), y=g())", ": pass")


def test_parentheses_in_strings():
    check_scan(
        "def f(a=')', b=\"(\", c='''(\n''', d=\"\"\")\"\"\"):\n    pass",
        "def f", "(a=')', b=\"(\", c='''( ''', d=\"\"\")\"\"\")", ": pass")


def test_escaped_quotes():
    check_scan(
        "def f(a='\\')', b=\"\\\")\"):\n    pass",
        "def f", "(a='\\')', b=\"\\\")\")", ": pass")


def test_regex_default():
    check_scan(
        "def f(pattern=re.compile(r\"a\\(b\\)\")):\n    return pattern",
        "def f", "(pattern=re.compile(r\"a\\(b\\)\"))", ": return pattern")


def test_comments():
    check_scan(
        "def f(a,  # a comment with ) and '\n      b):\n    pass",
        "def f", "(a, # a comment with ) and ' b)", ": pass")


def test_comment_before_definition():
    check_scan(
        "# f(x)\ndef f(y):\n    pass",
        "# f(x) def f", "(y)", ": pass")


def test_type_parameters():
    check_scan(
        "def f[T](x: T) -> T:\n    return x",
        "def f[T]", "(x: T)", " -> T: return x",
        symbol_name="[T]")


def test_type_parameters_with_parentheses():
    check_scan(
        "class A[T: (int, str), *Ts](Base):\n    pass",
        "class A[T: (int, str), *Ts]", "(Base)", ": pass",
        symbol_name="[T: (int, str), *Ts]")


def test_nested_type_parameters():
    check_scan(
        "def f[T: list[int]](x):\n    pass",
        "def f[T: list[int]]", "(x)", ": pass",
        symbol_name="[T: list[int]]")


def test_class_with_bases():
    check_scan(
        "class A(B, metaclass=M):\n    x = (1, 2)",
        "class A", "(B, metaclass=M)", ": x = (1, 2)")


def test_class_without_bases():
    check_scan(
        "class A:\n    def method(self):\n        pass",
        "class A", "", ": def method(self): pass",
        implicit=True)


def test_class_without_bases_with_type_parameters():
    check_scan(
        "class A[T]:\n    pass",
        "class A[T]", "", ": pass",
        symbol_name="[T]", implicit=True)


def test_lambda():
    check_scan(
        "lambda x, y=(1, 2): (x, y)",
        "lambda ", "x, y=(1, 2)", ": (x, y)",
        implicit=True)


def test_lambda_without_parameters():
    check_scan("lambda: 1", "lambda", "", ": 1", implicit=True)


def test_lambda_with_dict_default():
    check_scan(
        "lambda x={'a': 1}: x['a']",
        "lambda ", "x={'a': 1}", ": x['a']",
        implicit=True)


def test_lambda_with_strings():
    check_scan(
        "lambda a=':', b=\")\": a + b",
        "lambda ", "a=':', b=\")\"", ": a + b",
        implicit=True)


def test_lambda_with_lambda_default():
    check_scan(
        "lambda g=lambda y: y: g",
        "lambda ", "g=lambda y: y", ": g",
        implicit=True)
    check_scan(
        "lambda f=lambda: 1, g=(lambda y: y): f() + g(1)",
        "lambda ", "f=lambda: 1, g=(lambda y: y)", ": f() + g(1)",
        implicit=True)


def test_synthesized_stubs():
    check_scan(
        "type('int', (object,), {...})",
        "type", "('int', (object,), {...})", "")
    check_scan(
        "def len(obj, /): ...",
        "def len", "(obj, /)", ": ...")


def test_unclosed_parameter_list():
    with pytest.raises(UnmatchedDelimiterError) as e:
        scan("def f(a, b:\n    pass")
    assert e.value.delimiter == '('


def test_unclosed_symbol_name():
    with pytest.raises(UnmatchedDelimiterError) as e:
        scan("def f[T(x):\n    pass")
    assert e.value.delimiter == '['


def test_unclosed_string():
    with pytest.raises(UnmatchedDelimiterError) as e:
        scan("def f(a='b):\n    pass")
    assert e.value.delimiter == "'"


def test_unclosed_triple_quoted_string():
    with pytest.raises(UnmatchedDelimiterError) as e:
        scan("def f(a=\"\"\"b\"):\n    pass")
    assert e.value.delimiter == '"""'


def test_no_parameter_list():
    with pytest.raises(NoParameterListError):
        scan("x = 1")


def test_header_colon_outside_of_class():
    with pytest.raises(NoParameterListError):
        scan("def f:\n    pass")


def test_lambda_without_colon():
    with pytest.raises(NoParameterListError):
        scan("lambda x")
