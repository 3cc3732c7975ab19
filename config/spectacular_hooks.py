"""Custom OpenAPI schema hooks for drf-spectacular.

Groups endpoints under feature sections instead of the generic
``api`` tag derived from the URL prefix.
"""

from __future__ import annotations

from typing import Any

# Method names that contain operations in the OpenAPI path item
_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "options", "head"}


PATTERN_TAGS = [
    ("/api/v1/attendance/daily-run", "Attendance Batch"),
    ("/api/v1/attendance/fix-holidays", "Attendance Batch"),
    ("/api/v1/attendance", "Attendance"),
    ("/api/v1/leaves/holidays", "Holidays"),
    ("/api/v1/leaves", "Leaves"),
    ("/api/v1/payroll/settings", "Payroll Settings"),
    ("/api/v1/payroll", "Payroll"),
    ("/api/v1/auth/jwt", "JWT Authentication"),
]

ALL_TAGS = list(dict.fromkeys(t for _, t in PATTERN_TAGS))


def assign_group_tag(path: str) -> str | None:
    """Return the first matching tag name for a given path."""
    for prefix, tag in PATTERN_TAGS:
        if path.startswith(prefix):
            return tag
    return None


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Post-processing hook that pins every operation to exactly one group."""
    paths = result.get("paths", {})
    for path, path_item in paths.items():
        tag = assign_group_tag(path)
        if not tag:
            continue
        for method, op_obj in path_item.items():
            if method.lower() not in _HTTP_METHODS:
                continue
            if not isinstance(op_obj, dict):
                continue
            op_obj["tags"] = [tag]

    existing = {t.get("name") for t in result.get("tags", [])}
    tag_list = result.setdefault("tags", [])
    for tag in ALL_TAGS:
        if tag not in existing:
            tag_list.append({"name": tag})
    return result
