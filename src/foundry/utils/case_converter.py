"""Identifier case conversion for GitHub variable names."""

import re

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER_BOUNDARY = re.compile(r"([a-z])([A-Z])")
# Only split after a digit when a camel word starts; K8S stays K8S.
_DIGIT_WORD_BOUNDARY = re.compile(r"([0-9])([A-Z][a-z])")
_REPEATED_SEPARATOR = re.compile(r"_{2,}")


def to_upper_snake_case(identifier: str) -> str:
    """Convert camelCase, PascalCase, snake_case or kebab-case to UPPER_SNAKE_CASE.

    ``myVariableName`` -> ``MY_VARIABLE_NAME``, ``APIKey`` -> ``API_KEY``,
    ``HTTPSConnection`` -> ``HTTPS_CONNECTION``, ``value123Name`` -> ``VALUE123_NAME``,
    ``k8sCluster`` -> ``K8S_CLUSTER``. The conversion is idempotent.
    """
    if not identifier:
        return ""

    result = _NON_ALNUM.sub("_", identifier)
    result = _ACRONYM_BOUNDARY.sub(r"\1_\2", result)
    result = _LOWER_UPPER_BOUNDARY.sub(r"\1_\2", result)
    result = _DIGIT_WORD_BOUNDARY.sub(r"\1_\2", result)
    result = _REPEATED_SEPARATOR.sub("_", result)
    return result.upper()
