import re
from dataclasses import dataclass

from yii_locator.core.source import SourceText
from yii_locator.core.tokenizer import find_array_keys, find_body_bounds
from yii_locator.models import UNBOUNDED, ActionRecord, ConventionConfig


def _action_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"function\s+({re.escape(prefix)}[A-Z]\w*)\s*\(")


def _record_for(doc: SourceText, name: str, declaration_offset: int, search_from: int) -> ActionRecord:
    open_offset, end_offset = find_body_bounds(doc.text, search_from)
    if open_offset == UNBOUNDED:
        # abstract or interface declaration
        body_start = end_offset = search_from
    else:
        body_start = open_offset
    return ActionRecord(
        name=name,
        declaration_offset=declaration_offset,
        body_start_offset=body_start,
        body_end_offset=end_offset,
        position=doc.position_at(declaration_offset),
    )


def find_all_actions(doc: SourceText, config: ConventionConfig) -> list[ActionRecord]:
    """All action methods of ``doc`` in declaration order."""
    return [
        _record_for(doc, match.group(1), match.start(), match.end())
        for match in _action_pattern(config.action_prefix).finditer(doc.text)
    ]


def find_action_at_position(doc: SourceText, offset: int, config: ConventionConfig) -> ActionRecord | None:
    for record in find_all_actions(doc, config):
        if record.contains(offset):
            return record
    return None


def find_action_by_name(doc: SourceText, name: str, config: ConventionConfig) -> ActionRecord | None:
    for record in find_all_actions(doc, config):
        if record.name == name:
            return record
    return None


def action_body(doc: SourceText, record: ActionRecord) -> str:
    end = record.body_end_offset if record.is_bounded else len(doc)
    return doc.text[record.body_start_offset : end]


_ACTIONS_METHOD_PATTERN = re.compile(r"function\s+actions\s*\(", re.IGNORECASE)
_RETURN_ARRAY_PATTERN = re.compile(r"return\s+(?:array\s*\(|\[)", re.IGNORECASE)


@dataclass(frozen=True)
class ActionMapKey:
    """A key of the array returned by ``actions()``."""

    name: str
    offset: int


def find_action_map_keys(doc: SourceText) -> list[ActionMapKey]:
    """Keys of the array literal returned by the controller's ``actions()`` method."""
    method = _ACTIONS_METHOD_PATTERN.search(doc.text)
    if method is None:
        return []
    open_offset, end_offset = find_body_bounds(doc.text, method.end())
    if open_offset == UNBOUNDED or end_offset == UNBOUNDED:
        return []
    returned = _RETURN_ARRAY_PATTERN.search(doc.text, open_offset, end_offset)
    if returned is None:
        return []
    return [ActionMapKey(name, offset) for name, offset in find_array_keys(doc.text, returned.end(), end_offset)]
