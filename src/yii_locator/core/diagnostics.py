"""Diagnostics for ``render``/``renderPartial`` view paths, ``Yii::import()`` aliases and ``actions()`` maps."""

import logging
import os
from collections import Counter

from yii_locator.core.actions import action_body, find_action_map_keys, find_all_actions
from yii_locator.core.controllers import controller_class_name
from yii_locator.core.imports import find_import_calls, resolve_import
from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.project import is_controller_file, is_view_file
from yii_locator.core.source import SourceText
from yii_locator.core.views import ViewDirs, find_render_calls, resolve_view_reference, view_dirs_for
from yii_locator.models import ConventionConfig, Diagnostic, RenderCall, Severity

logger = logging.getLogger(__name__)

UNRESOLVED = "view-path-unresolved"
ALTERNATIVE_PATH = "view-alternative-path"
FILE_MISSING = "view-file-missing"
IMPORT_NOT_FOUND = "import-not-found"
IMPORT_DUPLICATE = "import-duplicate"
ACTION_METHOD_MISSING = "action-method-missing"


def _toggle_underscore(path: str) -> str:
    directory, name = os.path.split(path)
    return os.path.join(directory, name[1:] if name.startswith("_") else f"_{name}")


def _span(doc: SourceText, offset: int, length: int, code: str, severity: Severity, message: str) -> Diagnostic:
    return Diagnostic(
        code=code,
        severity=severity,
        message=message,
        start=doc.position_at(offset),
        end=doc.position_at(offset + length),
    )


def _diagnostic(doc: SourceText, call: RenderCall, code: str, severity: Severity, message: str) -> Diagnostic:
    return _span(doc, call.name_offset, len(call.reference.raw_name), code, severity, message)


def _check_call(
    doc: SourceText,
    call: RenderCall,
    dirs: ViewDirs,
    workspace_root: str,
    config: ConventionConfig,
    fs: FileSystem,
) -> Diagnostic | None:
    reference = call.reference
    partial_note = " (partial)" if reference.is_partial else ""
    outcome = resolve_view_reference(reference, dirs, workspace_root, config=config, fs=fs)
    if not outcome.ok:
        return _diagnostic(
            doc,
            call,
            UNRESOLVED,
            Severity.WARNING,
            f'Cannot resolve view path: "{reference.raw_name}"{partial_note}. Check path format.',
        )

    resolved = outcome.unwrap()
    if resolved.exists:
        return None

    alternative = _toggle_underscore(resolved.path)
    if fs.exists(alternative):
        relative = os.path.relpath(alternative, workspace_root)
        return _diagnostic(
            doc, call, ALTERNATIVE_PATH, Severity.INFORMATION, f"View exists at: {relative}{partial_note}"
        )

    checked = [os.path.relpath(resolved.path, workspace_root)]
    if reference.is_partial:
        checked.append(os.path.relpath(alternative, workspace_root))
        message = f"View file does not exist. Checked paths: {', '.join(checked)}"
    else:
        message = f"View file does not exist: {checked[0]}"
    return _diagnostic(doc, call, FILE_MISSING, Severity.ERROR, message)


def check_view_paths(
    doc: SourceText,
    document_path: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    workspace_root: str,
) -> list[Diagnostic]:
    """Diagnostics for render calls whose view file cannot be found.

    View files are checked as a whole, controllers action by action. Other
    files produce no diagnostics.
    """
    dirs = view_dirs_for(document_path, workspace_root, config)
    if dirs is None:
        return []

    if is_view_file(document_path, workspace_root, config):
        calls = find_render_calls(doc.text)
    else:
        calls = [
            call
            for record in find_all_actions(doc, config)
            for call in find_render_calls(action_body(doc, record), record.body_start_offset)
        ]

    diagnostics = []
    for call in calls:
        diagnostic = _check_call(doc, call, dirs, workspace_root, config, fs)
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    logger.info("%d view path diagnostic(s) for %s", len(diagnostics), document_path)
    return diagnostics


def check_imports(
    doc: SourceText,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    workspace_root: str,
) -> list[Diagnostic]:
    """Errors for ``Yii::import()`` aliases that point nowhere, warnings for repeated imports."""
    calls = find_import_calls(doc.text)
    diagnostics = []
    for call in calls:
        path = resolve_import(call.alias, workspace_root, config=config, fs=fs)
        if path is None or not fs.exists(path):
            message = f"Import path not found: {call.alias}"
            diagnostics.append(_span(doc, call.offset, len(call.alias), IMPORT_NOT_FOUND, Severity.ERROR, message))

    counts = Counter(call.alias for call in calls)
    for call in calls:
        if counts[call.alias] > 1:
            diagnostics.append(
                _span(
                    doc,
                    call.offset,
                    len(call.alias),
                    IMPORT_DUPLICATE,
                    Severity.WARNING,
                    f"Duplicate import: {call.alias} (found {counts[call.alias]} times)",
                )
            )
    return diagnostics


def check_action_map(doc: SourceText, config: ConventionConfig) -> list[Diagnostic]:
    """Warnings for ``actions()`` keys that have no matching action method in the same class."""
    declared = {record.name.lower() for record in find_all_actions(doc, config)}
    diagnostics = []
    for key in find_action_map_keys(doc):
        method = config.action_prefix + controller_class_name(key.name)
        if method.lower() not in declared:
            diagnostics.append(
                _span(
                    doc,
                    key.offset,
                    len(key.name),
                    ACTION_METHOD_MISSING,
                    Severity.WARNING,
                    f'Action method "{method}" not found. Expected method: function {method}()',
                )
            )
    return diagnostics


def check_document(
    doc: SourceText,
    document_path: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    workspace_root: str,
) -> list[Diagnostic]:
    """Every check that applies to ``document_path``, ordered by position."""
    diagnostics = check_view_paths(doc, document_path, config=config, fs=fs, workspace_root=workspace_root)
    diagnostics.extend(check_imports(doc, config=config, fs=fs, workspace_root=workspace_root))
    if is_controller_file(document_path, workspace_root, config):
        diagnostics.extend(check_action_map(doc, config))
    return sorted(diagnostics, key=lambda d: (d.start.row, d.start.column))
