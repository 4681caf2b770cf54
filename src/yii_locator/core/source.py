import bisect

from yii_locator.models import Position


class SourceText:
    """Immutable document text with offset <-> line/column mapping."""

    __slots__ = ("_line_starts", "_text")

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                starts.append(index + 1)
        self._line_starts = starts

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position_at(self, offset: int) -> Position:
        offset = max(0, min(offset, len(self._text)))
        row = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(row=row, column=offset - self._line_starts[row])

    def offset_at(self, position: Position) -> int:
        if position.row < 0:
            return 0
        if position.row >= len(self._line_starts):
            return len(self._text)
        line_start = self._line_starts[position.row]
        if position.row + 1 < len(self._line_starts):
            line_end = self._line_starts[position.row + 1] - 1
        else:
            line_end = len(self._text)
        return min(line_start + max(0, position.column), line_end)
