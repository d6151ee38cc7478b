import json
import logging
from typing import Any, List, Mapping

from cblm.errors import InvalidGroupingFile, MalformedGroupingData
from cblm.grouping.schema import CodeGroup, Grouping, SHAPE_FLAT, SHAPE_SORTED
from cblm.utils.io import load_json

log = logging.getLogger(__name__)

SORTED_KEY = "sorted"
TITLE_KEY = "title"
ITEMS_KEY = "textItems"


def _names_for(code: Any, value: Any) -> CodeGroup:
    if not isinstance(code, str):
        raise MalformedGroupingData(f"code names must be strings, got {type(code).__name__}", code=str(code))
    if not isinstance(value, list):
        raise MalformedGroupingData(f"expected a list of node names, got {type(value).__name__}", code=code)
    for name in value:
        if not isinstance(name, str):
            raise MalformedGroupingData(
                f"node names must be strings, got {type(name).__name__} ({name!r})", code=code
            )
    return CodeGroup(code=code, names=tuple(value))


def _is_sorted_shape(data: Mapping) -> bool:
    return len(data) == 1 and SORTED_KEY in data and isinstance(data[SORTED_KEY], dict)


def _from_sorted(block: Mapping) -> List[CodeGroup]:
    titles = block.get(TITLE_KEY)
    items = block.get(ITEMS_KEY)
    if not isinstance(titles, list) or not isinstance(items, list):
        raise MalformedGroupingData(
            f"'{SORTED_KEY}' block needs '{TITLE_KEY}' and '{ITEMS_KEY}' arrays"
        )
    if len(titles) != len(items):
        raise MalformedGroupingData(
            f"'{TITLE_KEY}' has {len(titles)} entries but '{ITEMS_KEY}' has {len(items)}"
        )
    return [_names_for(code, names) for code, names in zip(titles, items)]


# ---- public API ----
def normalize_grouping(data: Any) -> Grouping:
    """
    Turn decoded grouping JSON into a `Grouping`.

    Accepts the flat shape ``{code: [names...]}`` and the wrapped shape
    ``{"sorted": {"title": [codes...], "textItems": [[names...], ...]}}``.
    Code order is kept exactly as decoded.
    """
    if isinstance(data, Grouping):
        return data
    if not isinstance(data, dict):
        raise MalformedGroupingData(f"top-level value must be an object, got {type(data).__name__}")

    if _is_sorted_shape(data):
        groups = _from_sorted(data[SORTED_KEY])
        shape = SHAPE_SORTED
    else:
        groups = [_names_for(code, names) for code, names in data.items()]
        shape = SHAPE_FLAT
    return Grouping(groups=tuple(groups), shape=shape)


def load_grouping(path: str, encoding: str = "utf-8") -> Grouping:
    """
    Read and normalize a grouping file. Raises InvalidGroupingFile when the
    file can't be read or decoded, MalformedGroupingData when the JSON has
    the wrong shape.
    """
    try:
        data = load_json(path, encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidGroupingFile(path, str(e)) from e
    except json.JSONDecodeError as e:
        raise InvalidGroupingFile(path, f"not valid JSON ({e})") from e

    grouping = normalize_grouping(data)
    log.info("Loaded grouping %s: %d codes, %d names (%s shape)",
             path, len(grouping), grouping.n_names, grouping.shape)
    return grouping
