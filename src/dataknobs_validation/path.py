"""Path resolution over nested object graphs.

A path is a sequence of tokens separated by ``/`` or ``.``. Each token is a
property name, a numeric index, or ``..`` which moves to the logical parent
of the current node::

    "name"               -> root.name
    "address.city"       -> root.address.city
    "items.1.price"      -> root.items[1].price
    "../currency"        -> parent.currency
    "../../settings/max" -> grandparent.settings.max

Parents are never read from the objects themselves. A ``PathAccessor`` is
bound to a node together with its lineage (parent, grandparent, ...), which
the orchestrator builds while walking the graph, so no back-reference is
ever stored on an instance.
"""

import re
from datetime import date, time, timedelta
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Sequence, Tuple

from .constants import COMPARISON_ERROR_MESSAGES
from .exceptions import PathResolutionError
from .strings import sf


PARENT_TOKEN = ".."

_TOKENS = re.compile(r"\.\.|[^/.]+")

_PRIMITIVES = (str, bytes, bytearray, bool, int, float, complex, Decimal, date, time, timedelta)


class _Missing:
    """Marker for a property that does not exist (as opposed to one set to None)."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def is_object(value: Any) -> bool:
    """Check whether a value can hold properties (model, mapping, sequence, ...)."""
    return value is not None and not isinstance(value, _PRIMITIVES)


def get_property(node: Any, name: str) -> Any:
    """Read a single property from a node.

    Mappings are read by key, sequences by decimal index and any other object
    by attribute.

    Args:
        node: Node to read from
        name: Property name or index

    Returns:
        The property value, or ``MISSING`` when the property does not exist
    """
    if not is_object(node):
        return MISSING
    if isinstance(node, Mapping):
        if name in node:
            return node[name]
        if name.isdecimal() and int(name) in node:
            return node[int(name)]
        return MISSING
    if isinstance(node, Sequence):
        if name.isdecimal() and int(name) < len(node):
            return node[int(name)]
        return MISSING
    try:
        return getattr(node, name)
    except AttributeError:
        return MISSING


def parse_path(path: Any) -> List[str]:
    """Split a path string into tokens.

    Args:
        path: Path string

    Returns:
        List of tokens

    Raises:
        PathResolutionError: If the path is not a non-empty string
    """
    if not isinstance(path, str) or not path.strip():
        raise PathResolutionError(sf(COMPARISON_ERROR_MESSAGES["INVALID_PATH"], path), path=path)
    tokens = _TOKENS.findall(path.strip())
    if not tokens:
        raise PathResolutionError(sf(COMPARISON_ERROR_MESSAGES["INVALID_PATH"], path), path=path)
    return tokens


class PathAccessor:
    """Resolves paths against a node and its ancestors.

    Args:
        root: Node the paths start from
        lineage: Ancestors of the root, nearest first (parent, grandparent, ...)
        ignore_none: If True, intermediate or final ``None`` values are returned
            instead of raising an "invalid property" error
        getter: Property reader, defaults to ``get_property``; must return
            ``MISSING`` for absent properties

    Example:
        ```python
        accessor = PathAccessor(child, lineage=(parent, grandparent))
        accessor.resolve("../../name")  # grandparent.name
        ```
    """

    def __init__(
        self,
        root: Any,
        lineage: Sequence[Any] = (),
        ignore_none: bool = False,
        getter: Callable[[Any, str], Any] | None = None,
    ):
        self._root = root
        self._lineage: Tuple[Any, ...] = tuple(lineage)
        self._ignore_none = ignore_none
        self._getter = getter or get_property

    @property
    def root(self) -> Any:
        """The node paths are resolved from."""
        return self._root

    @property
    def lineage(self) -> Tuple[Any, ...]:
        """Ancestors of the root, nearest first."""
        return self._lineage

    @property
    def parent(self) -> Any:
        """The root's parent, or None for a top-level node."""
        return self._lineage[0] if self._lineage else None

    def child(self, node: Any) -> "PathAccessor":
        """Create an accessor for a child node, recording this root as its parent."""
        return PathAccessor(
            node,
            (self._root, *self._lineage),
            ignore_none=self._ignore_none,
            getter=self._getter,
        )

    def resolve(self, path: str) -> Any:
        """Resolve a path to a value.

        Args:
            path: Path string, e.g. ``"../items.0.name"``

        Returns:
            The resolved value

        Raises:
            PathResolutionError: If the path is invalid or cannot be resolved
        """
        tokens = parse_path(path)
        # oldest ancestor first, current node last
        trail = [*reversed(self._lineage), self._root]
        hops = 0

        for step, token in enumerate(tokens, start=1):
            current = trail[-1]
            if token == PARENT_TOKEN:
                if not is_object(current):
                    raise PathResolutionError(
                        sf(COMPARISON_ERROR_MESSAGES["CONTEXT_NOT_OBJECT"], step, path),
                        path=path,
                        step=step,
                    )
                if len(trail) < 2 or trail[-2] is None:
                    raise PathResolutionError(
                        sf(COMPARISON_ERROR_MESSAGES["NO_PARENT"], step, path),
                        path=path,
                        step=step,
                    )
                if not is_object(trail[-2]):
                    raise PathResolutionError(
                        sf(COMPARISON_ERROR_MESSAGES["CONTEXT_NOT_OBJECT"], step, path),
                        path=path,
                        step=step,
                    )
                trail.pop()
                hops += 1
                continue

            value = self._getter(current, token)
            if value is MISSING:
                raise PathResolutionError(self._missing_message(path, token, hops), path=path, step=step)
            if value is None and not self._ignore_none:
                raise PathResolutionError(
                    sf(COMPARISON_ERROR_MESSAGES["PROPERTY_INVALID"], path, token),
                    path=path,
                    step=step,
                )
            trail.append(value)

        return trail[-1]

    @staticmethod
    def _missing_message(path: str, token: str, hops: int) -> str:
        if hops == 0:
            return sf(COMPARISON_ERROR_MESSAGES["PROPERTY_NOT_EXIST"], path, token)
        if hops == 1:
            return sf(COMPARISON_ERROR_MESSAGES["PROPERTY_NOT_EXIST_ON_PARENT"], path, token)
        return sf(COMPARISON_ERROR_MESSAGES["PROPERTY_NOT_EXIST_AFTER_PARENTS"], path, token, hops)

    def __repr__(self) -> str:
        return f"PathAccessor(root={type(self._root).__name__}, depth={len(self._lineage)})"


def get_value_by_path(
    obj: Any,
    path: str,
    lineage: Sequence[Any] = (),
    ignore_none: bool = False,
) -> Any:
    """Resolve a path against an object without keeping an accessor around.

    Args:
        obj: Root object
        path: Path string
        lineage: Ancestors of ``obj``, nearest first
        ignore_none: Whether ``None`` values are accepted along the path

    Returns:
        The resolved value

    Raises:
        PathResolutionError: If the path cannot be resolved
    """
    return PathAccessor(obj, lineage, ignore_none=ignore_none).resolve(path)
