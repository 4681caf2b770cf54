from collections.abc import Iterator
from typing import Protocol


class FileSystem(Protocol):
    def exists(self, path: str) -> bool: ...

    def read_text(self, path: str) -> str: ...

    def iter_files(self, directory: str, suffix: str = "") -> Iterator[str]: ...
