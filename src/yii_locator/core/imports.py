"""``Yii::import()`` calls and the files or directories they name."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.views import normalize_path, resolve_alias
from yii_locator.models import ConventionConfig

logger = logging.getLogger(__name__)

IMPORT_CALL_PATTERN = re.compile(r"""Yii\s*::\s*import\s*\(\s*(['"])([^'"]+)\1""")

_WILDCARD = ".*"


@dataclass(frozen=True)
class ImportCall:
    alias: str
    offset: int

    @property
    def is_wildcard(self) -> bool:
        return self.alias.endswith(_WILDCARD)


def find_import_calls(text: str) -> list[ImportCall]:
    return [ImportCall(alias=m.group(2), offset=m.start(2)) for m in IMPORT_CALL_PATTERN.finditer(text)]


def resolve_import(alias: str, workspace_root: str, *, config: ConventionConfig, fs: FileSystem) -> str | None:
    """Path an import alias points at, or ``None`` for an unknown alias root.

    ``application.models.*`` names a directory. Without the wildcard the class
    file is preferred, then a directory of that name; when neither exists the
    expected class file is returned.
    """
    wildcard = alias.endswith(_WILDCARD)
    base = resolve_alias(alias[: -len(_WILDCARD)] if wildcard else alias, workspace_root, config)
    if base is None:
        return None
    base = normalize_path(base)
    if wildcard:
        return base

    class_file = base + config.view_extension
    if not fs.exists(class_file) and fs.exists(base):
        logger.debug("Import %s resolved to directory %s", alias, base)
        return base
    return class_file
