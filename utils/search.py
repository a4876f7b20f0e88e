from typing import Any, Dict, Iterable, List, Sequence


def filter_by_availability(items: Iterable[Any], available: bool) -> List[Any]:
    return [item for item in items if item.is_available == available]


def binary_search(values: Sequence[Any], target: Any) -> int:
    """Index of ``target`` in the sorted sequence ``values``, or -1."""
    low, high = 0, len(values) - 1
    while low <= high:
        mid = (low + high) // 2
        if values[mid] == target:
            return mid
        if values[mid] > target:
            high = mid - 1
        else:
            low = mid + 1
    return -1


def find_all_subcategories(category: str, hierarchy: Dict[str, List[str]]) -> List[str]:
    """Every descendant of ``category`` in depth-first pre-order.

    ``hierarchy`` maps a category to its direct children. Categories already
    visited are skipped so a cyclic hierarchy terminates.
    """
    result: List[str] = []
    seen = {category}
    stack = list(reversed(hierarchy.get(category, [])))
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        result.append(current)
        stack.extend(reversed(hierarchy.get(current, [])))
    return result
