import os
import re
from dataclasses import dataclass

from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.views import module_from_path, normalize_path
from yii_locator.models import ConventionConfig

LAYOUT_ASSIGNMENT_PATTERN = re.compile(
    r"""(?:\$this\s*->\s*layout|(?:public|protected|private)\s+\$layout)\s*=\s*(['"])([^'"]+)\1"""
)

_LAYOUTS_DIR = "layouts"


@dataclass(frozen=True)
class LayoutAssignment:
    name: str
    offset: int


def find_layout_assignments(text: str) -> list[LayoutAssignment]:
    return [LayoutAssignment(name=m.group(2), offset=m.start(2)) for m in LAYOUT_ASSIGNMENT_PATTERN.finditer(text)]


def resolve_layout(
    name: str,
    document_path: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    workspace_root: str,
) -> str:
    """Layout file for ``name``; the expected path is returned even when it is missing.

    ``//name`` always lives in the application views; a bare name prefers the
    current module's ``layouts`` directory when that file exists.
    """
    extension = config.view_extension
    app_views = config.views_directory(workspace_root)
    if name.startswith("//"):
        return normalize_path(os.path.join(app_views, name[2:] + extension))

    module = module_from_path(document_path, workspace_root, config)
    app_layout = normalize_path(os.path.join(app_views, _LAYOUTS_DIR, name + extension))
    if module is None:
        return app_layout

    module_layout = normalize_path(
        os.path.join(config.views_directory(workspace_root, module), _LAYOUTS_DIR, name + extension)
    )
    if fs.exists(module_layout):
        return module_layout
    if fs.exists(app_layout):
        return app_layout
    return module_layout


def layout_at(text: str, offset: int) -> LayoutAssignment | None:
    for assignment in find_layout_assignments(text):
        if assignment.offset - 1 <= offset <= assignment.offset + len(assignment.name):
            return assignment
    return None
