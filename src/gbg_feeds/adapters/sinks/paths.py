"""Path handling shared by key-value store adapters."""


def split_path(path: str) -> list[str]:
    """Split a slash-separated path into segments, ignoring empty ones."""
    return [segment for segment in path.split("/") if segment]


def paths_overlap(a: list[str], b: list[str]) -> bool:
    """Whether one path is an ancestor of, descendant of, or equal to the other."""
    shortest = min(len(a), len(b))
    return a[:shortest] == b[:shortest]
