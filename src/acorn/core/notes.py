"""Release notes merging."""

from acorn.models.version import Version


def merge_notes(versions: list[Version], include_tag: bool = True) -> str:
    """Concatenate the notes of several versions, in the given order.

    With `include_tag` each block gets a "## <tag>" title and a blank line
    after it. Versions without notes are skipped.
    """
    merged = ""
    for version in versions:
        if not version.notes:
            continue

        if include_tag:
            merged += f"## {version.tag}\n"
        merged += version.notes + "\n"
        if include_tag:
            merged += "\n"
    return merged
