"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from yii_locator.config import load_convention_config
from yii_locator.fs import InMemoryFileSystem
from yii_locator.models import ConventionConfig

_REPO_ROOT = Path(__file__).parent.parent
_ENV_VARS = (
    "YII_PROTECTED_DIR",
    "YII_VIEWS_DIR",
    "YII_CONTROLLERS_DIR",
    "YII_MODULES_DIR",
    "YII_FRAMEWORK_DIR",
    "YII_VIEW_EXTENSION",
    "YII_CONTROLLER_SUFFIX",
    "YII_ACTION_PREFIX",
)

WORKSPACE = "/ws"

POST_CONTROLLER = """<?php
class PostController extends Controller
{
    public $layout = 'column2';

    public function actions()
    {
        return array('captcha' => 'CCaptchaAction');
    }

    public function actionIndex()
    {
        $this->render('index', array('posts' => $posts));
    }

    protected function helperFoo()
    {
        return '}';
    }

    public function actionShow($id)
    {
        $this->render("show", array('id' => $id));
        $this->renderPartial('_comments');
    }

    public function actionEdit($id)
    {
        $this->render('//site/error');
    }
}
"""


# ---------------------------------------------------------------------------
# Auto-marker: every test under tests/ is a unit test
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> ConventionConfig:
    """Stock Yii 1.1 conventions, independent of the caller's environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return load_convention_config()


@pytest.fixture
def memory_fs() -> InMemoryFileSystem:
    """A small Yii application with one module, rooted at ``/ws``."""
    return InMemoryFileSystem(
        {
            f"{WORKSPACE}/index.php": "<?php\nrequire_once dirname(__FILE__).'/framework/yii.php';\n",
            f"{WORKSPACE}/framework/Yii.php": "<?php\nclass Yii extends YiiBase {}\n",
            f"{WORKSPACE}/protected/controllers/PostController.php": POST_CONTROLLER,
            f"{WORKSPACE}/protected/views/post/index.php": "<h1>Posts</h1>",
            f"{WORKSPACE}/protected/views/post/show.php": "<?php $this->renderPartial('_comments'); ?>",
            f"{WORKSPACE}/protected/views/post/_comments.php": "",
            f"{WORKSPACE}/protected/views/site/error.php": "",
            f"{WORKSPACE}/protected/views/layouts/main.php": "",
            f"{WORKSPACE}/protected/views/layouts/column2.php": "",
            f"{WORKSPACE}/protected/modules/blog/controllers/EntryController.php": (
                "<?php\nclass EntryController extends Controller\n{\n"
                "    public function actionList()\n    {\n        $this->render('list');\n    }\n}\n"
            ),
            f"{WORKSPACE}/protected/modules/blog/views/entry/list.php": "",
            f"{WORKSPACE}/protected/modules/blog/views/layouts/blog.php": "",
        }
    )


@pytest.fixture
def yii_project(tmp_path: Path) -> Path:
    """The same application as ``memory_fs``, written to disk."""
    files = {
        "index.php": "<?php\nrequire_once dirname(__FILE__).'/framework/yii.php';\n",
        "protected/config/main.php": "<?php\nreturn array();\n",
        "protected/controllers/PostController.php": POST_CONTROLLER,
        "protected/views/post/index.php": "<h1>Posts</h1>",
        "protected/views/post/show.php": "",
        "protected/views/post/_comments.php": "",
        "protected/views/site/error.php": "",
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def post_controller() -> str:
    return POST_CONTROLLER
