"""Variable macro substitution for configured strings."""

import re
from collections.abc import Mapping

_MACRO = re.compile(r'\$\{([A-Za-z0-9_.]+)\}|\$([A-Za-z0-9_]+)')


def replace_macro(value: str | None, variables: Mapping[str, str]) -> str | None:
    """Expand ``$NAME`` and ``${NAME}`` references in value.

    References to names missing from variables are left as written,
    so Maven still sees ``${project.version}`` style expressions.

    Examples:
        replace_macro("-Dbuild=${BUILD_NUMBER}", {"BUILD_NUMBER": "7"})
        → "-Dbuild=7"
    """
    if value is None:
        return None

    def substitute(match):
        key = match.group(1) or match.group(2)
        if key in variables:
            return variables[key]
        return match.group(0)

    return _MACRO.sub(substitute, value)
