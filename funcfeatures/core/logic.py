"""
Declarative consistency rules over feature records.

A rule is a callable taking a mapping of features and returning
a violation message, or ``None`` if the features satisfy the rule.
"""


def _format_features(features):
    return ", ".join(
        "'" + key + "' = " + repr(value) for key, value in features.items())


def nand(a, b):
    """
    The features ``a`` and ``b`` cannot be both true.
    """
    def rule(features):
        if features[a] and features[b]:
            return "'{a}' and '{b}' cannot be both True".format(a=a, b=b)
        return None
    return rule


def xor(a, b):
    """
    Exactly one of the features ``a`` and ``b`` is true.
    """
    def rule(features):
        if bool(features[a]) == bool(features[b]):
            return "'{a}' and '{b}' cannot be both {value}".format(
                a=a, b=b, value=bool(features[a]))
        return None
    return rule


def implies(condition, conclusion):
    """
    If every feature in ``condition`` has the given value,
    every feature in ``conclusion`` must have the given value too.
    All mismatches are reported in a single message.
    """
    def rule(features):
        for key, value in condition.items():
            if features[key] != value:
                return None

        mismatches = [
            "{key} is invalid, expected {expected}, got {actual}".format(
                key=key, expected=repr(value), actual=repr(features[key]))
            for key, value in conclusion.items()
            if features[key] != value]

        if len(mismatches) > 0:
            return "As " + _format_features(condition) + ":\n  " + ".\n  ".join(mismatches)
        return None
    return rule


def validate(features, rules):
    """
    Checks ``features`` against every rule in ``rules``.
    Returns the list of violation messages (empty if the features are consistent).
    """
    violations = []
    for rule in rules:
        violation = rule(features)
        if violation is not None:
            violations.append(violation)
    return violations
