import posixpath
from collections.abc import Iterable, Iterator, Mapping


class InMemoryFileSystem:
    """``FileSystem`` over a dict of POSIX path -> contents.

    Parent directories of every file count as existing.
    """

    def __init__(self, files: Mapping[str, str] | None = None, directories: Iterable[str] = ()) -> None:
        self.files: dict[str, str] = {}
        self.directories: set[str] = set()
        for directory in directories:
            self.add_directory(directory)
        for path, content in (files or {}).items():
            self.add_file(path, content)

    def add_file(self, path: str, content: str = "") -> None:
        normalized = posixpath.normpath(path)
        self.files[normalized] = content
        self.add_directory(posixpath.dirname(normalized))

    def add_directory(self, path: str) -> None:
        current = posixpath.normpath(path)
        while current and current not in self.directories:
            self.directories.add(current)
            parent = posixpath.dirname(current)
            if parent == current:
                break
            current = parent

    def exists(self, path: str) -> bool:
        normalized = posixpath.normpath(path)
        return normalized in self.files or normalized in self.directories

    def read_text(self, path: str) -> str:
        try:
            return self.files[posixpath.normpath(path)]
        except KeyError:
            raise FileNotFoundError(f"File not found: {path}") from None

    def iter_files(self, directory: str, suffix: str = "") -> Iterator[str]:
        prefix = posixpath.normpath(directory).rstrip("/") + "/"
        for path in sorted(self.files):
            if path.startswith(prefix) and path.endswith(suffix):
                yield path
