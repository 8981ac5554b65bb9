from typing import Any, Iterable, List


def field_value(item: Any, field: str):
    """Read ``field`` from a mapping or an object attribute."""
    if isinstance(item, dict):
        return item[field]
    return getattr(item, field)


def top_n(items: Iterable[Any], field: str, n: int) -> List[Any]:
    """
    The ``n`` items with the largest ``field``, descending.

    ``sorted`` is stable, so equal values keep their input order.
    """
    if n <= 0:
        return []
    ranked = sorted(items, key=lambda item: field_value(item, field), reverse=True)
    return ranked[:n]
