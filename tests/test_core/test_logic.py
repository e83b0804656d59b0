from funcfeatures.core.logic import nand, xor, implies, validate


def test_nand():
    rule = nand('a', 'b')
    assert rule(dict(a=True, b=False)) is None
    assert rule(dict(a=False, b=True)) is None
    assert rule(dict(a=False, b=False)) is None
    assert rule(dict(a=True, b=True)) == "'a' and 'b' cannot be both True"


def test_xor():
    rule = xor('a', 'b')
    assert rule(dict(a=True, b=False)) is None
    assert rule(dict(a=False, b=True)) is None
    assert rule(dict(a=True, b=True)) == "'a' and 'b' cannot be both True"
    assert rule(dict(a=False, b=False)) == "'a' and 'b' cannot be both False"


def test_implies():
    rule = implies(dict(a=True), dict(b=True, c=False))
    assert rule(dict(a=False, b=False, c=True)) is None
    assert rule(dict(a=True, b=True, c=False)) is None
    assert rule(dict(a=True, b=False, c=False)) == (
        "As 'a' = True:\n  b is invalid, expected True, got False")
    assert rule(dict(a=True, b=False, c=True)) == (
        "As 'a' = True:\n"
        "  b is invalid, expected True, got False.\n"
        "  c is invalid, expected False, got True")


def test_implies_several_conditions():
    rule = implies(dict(a=True, b=False), dict(c=True))
    assert rule(dict(a=True, b=True, c=False)) is None
    assert rule(dict(a=True, b=False, c=False)) == (
        "As 'a' = True, 'b' = False:\n  c is invalid, expected True, got False")


def test_validate():
    rules = [nand('a', 'b'), implies(dict(a=True), dict(c=True))]
    assert validate(dict(a=False, b=True, c=False), rules) == []
    assert validate(dict(a=True, b=True, c=False), rules) == [
        "'a' and 'b' cannot be both True",
        "As 'a' = True:\n  c is invalid, expected True, got False"]
