"""Tests for view -> controller/action lookup."""

import pytest

from yii_locator.core.controllers import (
    controller_class_name,
    find_action_for_view,
    find_controller_and_action,
    find_controller_file,
    matches_view_name,
)
from yii_locator.core.result import ErrorKind, LocatorFailure
from yii_locator.core.source import SourceText
from yii_locator.fs import InMemoryFileSystem
from yii_locator.models import ConventionConfig


@pytest.mark.parametrize(
    ("short_name", "expected"),
    [("post", "Post"), ("sow_info", "SowInfo"), ("sow-info", "SowInfo"), ("sowInfo", "SowInfo")],
)
def test_controller_class_name(short_name: str, expected: str) -> None:
    assert controller_class_name(short_name) == expected


def test_controller_class_name_lower_first() -> None:
    assert controller_class_name("sow_info", lower_first=True) == "sowInfo"


class TestMatchesViewName:
    def test_case_insensitive(self, config: ConventionConfig) -> None:
        assert matches_view_name("actionShowAll", "showall", config)
        assert matches_view_name("actionShowAll", "showAll", config)

    def test_snake_case(self, config: ConventionConfig) -> None:
        assert matches_view_name("actionShowAll", "show_all", config)

    def test_different_name(self, config: ConventionConfig) -> None:
        assert not matches_view_name("actionShow", "index", config)


class TestFindActionForView:
    def test_prefers_render_call(self, config: ConventionConfig) -> None:
        doc = SourceText(
            "function actionOverview() { $this->render('list'); }\nfunction actionList() { $this->render('grid'); }"
        )
        assert find_action_for_view(doc, "list", config) == "actionOverview"

    def test_matches_partial_with_underscore(self, config: ConventionConfig) -> None:
        doc = SourceText("function actionView() { $this->renderPartial('_detail'); }")
        assert find_action_for_view(doc, "detail", config) == "actionView"

    def test_falls_back_to_naming_convention(self, config: ConventionConfig) -> None:
        doc = SourceText("function actionShowAll() { $this->render($view); }")
        assert find_action_for_view(doc, "show_all", config) == "actionShowAll"

    def test_skips_abstract_declaration(self, config: ConventionConfig) -> None:
        doc = SourceText(
            "abstract public function actionBase();\n public function actionReal() { $this->render('x'); }"
        )
        assert find_action_for_view(doc, "x", config) == "actionReal"

    def test_nothing_matches(self, config: ConventionConfig) -> None:
        assert find_action_for_view(SourceText("function actionA() {}"), "b", config) is None


class TestFindControllerFile:
    def test_lower_camel_fallback(self, config: ConventionConfig) -> None:
        fs = InMemoryFileSystem({"/ws/protected/controllers/sowInfoController.php": ""})
        path = find_controller_file("/ws/protected/controllers", "sowInfo", config=config, fs=fs)
        assert path == "/ws/protected/controllers/sowInfoController.php"

    def test_pascal_case_wins(self, config: ConventionConfig) -> None:
        fs = InMemoryFileSystem(
            {
                "/ws/protected/controllers/SowInfoController.php": "",
                "/ws/protected/controllers/sowInfoController.php": "",
            }
        )
        path = find_controller_file("/ws/protected/controllers", "sow_info", config=config, fs=fs)
        assert path == "/ws/protected/controllers/SowInfoController.php"


class TestFindControllerAndAction:
    def test_view_to_controller_and_action(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        match = find_controller_and_action(
            "/ws/protected/views/post/show.php", config=config, fs=memory_fs, workspace_root="/ws"
        ).unwrap()
        assert match.controller_path == "/ws/protected/controllers/PostController.php"
        assert match.action_name == "actionShow"

    def test_without_workspace_root(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        match = find_controller_and_action("/ws/protected/views/post/index.php", config=config, fs=memory_fs).unwrap()
        assert match.controller_path == "/ws/protected/controllers/PostController.php"
        assert match.action_name == "actionIndex"

    def test_partial_view(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        match = find_controller_and_action(
            "/ws/protected/views/post/_comments.php", config=config, fs=memory_fs, workspace_root="/ws"
        ).unwrap()
        assert match.action_name == "actionShow"

    def test_module_view(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        match = find_controller_and_action(
            "/ws/protected/modules/blog/views/entry/list.php", config=config, fs=memory_fs, workspace_root="/ws"
        ).unwrap()
        assert match.controller_path == "/ws/protected/modules/blog/controllers/EntryController.php"
        assert match.action_name == "actionList"

    def test_action_not_found_is_still_a_match(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        memory_fs.add_file("/ws/protected/views/post/archive.php")
        match = find_controller_and_action(
            "/ws/protected/views/post/archive.php", config=config, fs=memory_fs, workspace_root="/ws"
        ).unwrap()
        assert match.controller_path.endswith("PostController.php")
        assert match.action_name is None

    def test_not_in_views_directory(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        outcome = find_controller_and_action(
            "/ws/protected/components/Menu.php", config=config, fs=memory_fs, workspace_root="/ws"
        )
        assert outcome.error is not None
        assert outcome.error.kind is ErrorKind.NOT_IN_CONVENTION_DIRECTORY

    def test_view_directly_under_views(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        outcome = find_controller_and_action(
            "/ws/protected/views/index.php", config=config, fs=memory_fs, workspace_root="/ws"
        )
        assert outcome.error is not None
        assert outcome.error.kind is ErrorKind.NOT_IN_CONVENTION_DIRECTORY

    def test_controller_not_found(self, config: ConventionConfig, memory_fs: InMemoryFileSystem) -> None:
        outcome = find_controller_and_action(
            "/ws/protected/views/comment/index.php", config=config, fs=memory_fs, workspace_root="/ws"
        )
        assert outcome.error is not None
        assert outcome.error.kind is ErrorKind.RESOURCE_NOT_FOUND
        with pytest.raises(LocatorFailure, match="CommentController"):
            outcome.unwrap()

    def test_lower_camel_controller_file(self, config: ConventionConfig) -> None:
        fs = InMemoryFileSystem(
            {
                "/ws/protected/controllers/postController.php": "<?php function actionShow(){ $this->render('show'); }",
                "/ws/protected/views/post/show.php": "",
            }
        )
        match = find_controller_and_action("/ws/protected/views/post/show.php", config=config, fs=fs).unwrap()
        assert match.controller_path == "/ws/protected/controllers/postController.php"
        assert match.action_name == "actionShow"


class TestControllersDirectory:
    def test_themed_view_uses_application_controllers(
        self, config: ConventionConfig, memory_fs: InMemoryFileSystem
    ) -> None:
        memory_fs.add_file("/ws/themes/classic/views/post/show.php")
        match = find_controller_and_action(
            "/ws/themes/classic/views/post/show.php", config=config, fs=memory_fs, workspace_root="/ws"
        ).unwrap()
        assert match.controller_path == "/ws/protected/controllers/PostController.php"
        assert match.action_name == "actionShow"

    def test_checkout_under_a_views_directory(self, config: ConventionConfig, post_controller: str) -> None:
        fs = InMemoryFileSystem(
            {
                "/srv/views/app/protected/controllers/PostController.php": post_controller,
                "/srv/views/app/protected/views/post/show.php": "",
            }
        )
        match = find_controller_and_action("/srv/views/app/protected/views/post/show.php", config=config, fs=fs)
        assert match.unwrap().controller_path == "/srv/views/app/protected/controllers/PostController.php"

    def test_checkout_under_a_modules_directory(self, config: ConventionConfig, post_controller: str) -> None:
        fs = InMemoryFileSystem({"/home/u/modules/app/protected/controllers/PostController.php": post_controller})
        match = find_controller_and_action("/home/u/modules/app/protected/views/post/index.php", config=config, fs=fs)
        assert match.unwrap().controller_path == "/home/u/modules/app/protected/controllers/PostController.php"
