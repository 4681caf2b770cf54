from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

UNBOUNDED = -1


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    column: int


class ActionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    declaration_offset: int
    body_start_offset: int
    body_end_offset: int = UNBOUNDED
    position: Position

    @model_validator(mode="after")
    def _check_offsets(self) -> "ActionRecord":
        if self.body_start_offset < self.declaration_offset:
            raise ValueError("body_start_offset precedes declaration_offset")
        if self.is_bounded and self.body_end_offset < self.body_start_offset:
            raise ValueError("body_end_offset precedes body_start_offset")
        return self

    @property
    def is_bounded(self) -> bool:
        return self.body_end_offset != UNBOUNDED

    @property
    def has_body(self) -> bool:
        return not self.is_bounded or self.body_end_offset > self.body_start_offset

    def contains(self, offset: int) -> bool:
        if not self.has_body or offset < self.body_start_offset:
            return False
        return not self.is_bounded or offset <= self.body_end_offset


class ViewKind(str, Enum):
    ROOT_ABSOLUTE = "root_absolute"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    DOT_NOTATION = "dot_notation"
    BARE = "bare"


class ViewReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_name: str
    kind: ViewKind
    is_partial: bool = False


class RenderCall(BaseModel):
    """A ``render``/``renderPartial`` call with a literal view name."""

    model_config = ConfigDict(frozen=True)

    reference: ViewReference
    offset: int
    name_offset: int


class ResolvedView(BaseModel):
    reference: ViewReference
    path: str
    exists: bool


class ControllerMatch(BaseModel):
    controller_path: str
    action_name: str | None = None


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


class Diagnostic(BaseModel):
    code: str
    severity: Severity
    message: str
    start: Position
    end: Position


class ConventionConfig(BaseModel):
    """Directory and naming conventions of the target project.

    Every field is required here; defaults belong to whoever builds the
    config (see ``yii_locator.config``).
    """

    model_config = ConfigDict(frozen=True)

    protected_dir: str = Field(min_length=1)
    views_dir: str = Field(min_length=1)
    controllers_dir: str = Field(min_length=1)
    modules_dir: str = Field(min_length=1)
    framework_dir: str = Field(min_length=1)
    view_extension: str = Field(pattern=r"^\.\w+$")
    controller_suffix: str = Field(min_length=1)
    action_prefix: str = Field(min_length=1)

    def views_directory(self, workspace_root: str, module: str | None = None) -> str:
        if module:
            return str(Path(workspace_root, self.protected_dir, self.modules_dir, module, self.views_dir))
        return str(Path(workspace_root, self.protected_dir, self.views_dir))

    def controllers_directory(self, workspace_root: str, module: str | None = None) -> str:
        if module:
            return str(Path(workspace_root, self.protected_dir, self.modules_dir, module, self.controllers_dir))
        return str(Path(workspace_root, self.protected_dir, self.controllers_dir))
