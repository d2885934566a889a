"""
Helpers for Notion's nested property representation.

Notion returns every page property as a typed wrapper, e.g.

    {"Name": {"type": "title", "title": [{"plain_text": "Attention"}]},
     "Status": {"type": "select", "select": {"name": "Pending"}}}

The readers below flatten those wrappers into plain Python values and never
raise on missing or oddly-shaped properties. The builders produce the
wrappers expected by the create and update endpoints, and the filter helpers
produce database query filters.
"""

from typing import Any, Dict, Iterable, List, Optional

Properties = Dict[str, Any]


# --- Readers ---


def _fragments_text(fragments: Any) -> str:
    if not isinstance(fragments, list):
        return ""
    parts = []
    for fragment in fragments:
        if not isinstance(fragment, dict):
            continue
        text = fragment.get("plain_text")
        if text is None:
            text = (fragment.get("text") or {}).get("content")
        if text:
            parts.append(text)
    return "".join(parts)


def _prop(properties: Properties, name: str) -> Dict[str, Any]:
    value = properties.get(name) if isinstance(properties, dict) else None
    return value if isinstance(value, dict) else {}


def read_title(properties: Properties, *names: str) -> str:
    """Text of the first named title property that has any."""
    for name in names:
        text = _fragments_text(_prop(properties, name).get("title"))
        if text:
            return text
    return ""


def find_title(properties: Properties) -> str:
    """Text of whichever property is the page title, whatever it is called."""
    if not isinstance(properties, dict):
        return ""
    for value in properties.values():
        if isinstance(value, dict) and isinstance(value.get("title"), list):
            return _fragments_text(value["title"])
    return ""


def read_rich_text(properties: Properties, name: str) -> str:
    return _fragments_text(_prop(properties, name).get("rich_text"))


def read_select(properties: Properties, name: str) -> Optional[str]:
    select = _prop(properties, name).get("select")
    if isinstance(select, dict):
        return select.get("name") or None
    return None


def read_multi_select(properties: Properties, name: str) -> List[str]:
    options = _prop(properties, name).get("multi_select")
    if not isinstance(options, list):
        return []
    return [o["name"] for o in options if isinstance(o, dict) and o.get("name")]


def read_url(properties: Properties, name: str) -> Optional[str]:
    url = _prop(properties, name).get("url")
    return url if isinstance(url, str) and url else None


def read_checkbox(properties: Properties, name: str, default: bool = False) -> bool:
    value = _prop(properties, name).get("checkbox")
    return value if isinstance(value, bool) else default


def read_date_start(properties: Properties, name: str) -> Optional[str]:
    date = _prop(properties, name).get("date")
    if isinstance(date, dict):
        return date.get("start") or None
    return None


def read_text(properties: Properties, name: str) -> str:
    """Text of a title, rich text or url property, whichever it turns out to be."""
    prop = _prop(properties, name)
    if isinstance(prop.get("title"), list):
        return _fragments_text(prop["title"])
    if isinstance(prop.get("rich_text"), list):
        return _fragments_text(prop["rich_text"])
    if isinstance(prop.get("url"), str):
        return prop["url"]
    return ""


# --- Builders ---


def title_value(text: str) -> Dict[str, Any]:
    return {"title": [{"text": {"content": text}}]}


def rich_text_value(text: Optional[str], limit: Optional[int] = None) -> Dict[str, Any]:
    """An empty or missing text clears the property."""
    if not text:
        return {"rich_text": []}
    if limit is not None:
        text = text[:limit]
    return {"rich_text": [{"text": {"content": text}}]}


def select_value(name: Optional[str]) -> Dict[str, Any]:
    return {"select": {"name": name} if name else None}


def multi_select_value(names: Iterable[str]) -> Dict[str, Any]:
    return {"multi_select": [{"name": n} for n in names if n]}


def url_value(url: Optional[str]) -> Dict[str, Any]:
    return {"url": url or None}


def checkbox_value(checked: bool) -> Dict[str, Any]:
    return {"checkbox": bool(checked)}


def date_value(start: str) -> Dict[str, Any]:
    return {"date": {"start": start}}


# --- Query filters and sorts ---


def select_equals(name: str, value: str) -> Dict[str, Any]:
    return {"property": name, "select": {"equals": value}}


def checkbox_equals(name: str, value: bool) -> Dict[str, Any]:
    return {"property": name, "checkbox": {"equals": value}}


def title_equals(name: str, value: str) -> Dict[str, Any]:
    return {"property": name, "title": {"equals": value}}


def title_contains(name: str, value: str) -> Dict[str, Any]:
    return {"property": name, "title": {"contains": value}}


def all_of(filters: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """AND-combines filters; None when there is nothing to filter on."""
    if not filters:
        return None
    return {"and": filters}


CREATED_TIME_DESCENDING: List[Dict[str, str]] = [
    {"timestamp": "created_time", "direction": "descending"}
]
CREATED_TIME_ASCENDING: List[Dict[str, str]] = [
    {"timestamp": "created_time", "direction": "ascending"}
]


def property_sort(name: str, direction: str = "ascending") -> List[Dict[str, str]]:
    return [{"property": name, "direction": direction}]
