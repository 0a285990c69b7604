"""Message template formatting."""

import re
from typing import Any

_PLACEHOLDER = re.compile(r"{(\d+)}")


def _render(arg: Any) -> str:
    if isinstance(arg, (list, tuple, set, frozenset)):
        return ", ".join(_render(item) for item in arg)
    return str(arg)


def string_format(template: str, *args: Any) -> str:
    """Substitute positional ``{n}`` placeholders in a message template.

    Placeholders without a matching argument are left untouched, so a template
    can be formatted in several passes.

    Args:
        template: Message template, e.g. ``"The minimum value is {0}"``
        *args: Values for the placeholders; sequences render comma-joined

    Returns:
        The formatted message

    Example:
        ```python
        string_format("Expected {0}, received {1}", "int", "str")
        # 'Expected int, received str'
        ```
    """

    def replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(args):
            return _render(args[index])
        return match.group(0)

    return _PLACEHOLDER.sub(replace, template)


sf = string_format
