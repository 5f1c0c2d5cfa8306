"""Argument vectors for tagfs subcommands.

Each builder returns the argv that follows the executable name. Arguments
are passed without a shell, so tag names and paths are never interpreted.
"""

from tagfs_client.types import FileId


def init() -> list[str]:
    return ["init"]


def list_tags() -> list[str]:
    return ["lstags"]


def add_tag(tag: str) -> list[str]:
    return ["addtags", tag]


def link_tags(child: str, parent: str) -> list[str]:
    return ["linktags", child, parent]


def add_resource(file_id: FileId) -> list[str]:
    return ["addresource", file_id]


def tag_resource(file_id: FileId, tag: str) -> list[str]:
    return ["tagresource", file_id, tag]


def untag_resource(file_id: FileId, tag: str) -> list[str]:
    return ["untagresource", file_id, tag]


def get_resource_tags(file_id: FileId) -> list[str]:
    return ["getresourcetags", file_id]


def list_resources(tag_expr: str) -> list[str]:
    """The expression is opaque; whitespace separates its words."""
    return ["lsresources", *tag_expr.split()]


def move_resource(old: FileId, new: FileId) -> list[str]:
    return ["mvresource", old, new]


def remove_resource(file_id: FileId) -> list[str]:
    return ["rmresource", file_id]


def parse_lines(output: str) -> list[str]:
    """Split listing output into distinct, non-empty, trimmed records."""
    seen: set[str] = set()
    records: list[str] = []
    for line in output.splitlines():
        record = line.strip()
        if record and record not in seen:
            seen.add(record)
            records.append(record)
    return records
