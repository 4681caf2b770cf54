from yii_locator.fs.local import LocalFileSystem
from yii_locator.fs.memory import InMemoryFileSystem

__all__ = [
    "InMemoryFileSystem",
    "LocalFileSystem",
]
