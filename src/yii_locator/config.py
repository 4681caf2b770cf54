import os

from yii_locator.models import ConventionConfig

_ENV_DEFAULTS = {
    "protected_dir": ("YII_PROTECTED_DIR", "protected"),
    "views_dir": ("YII_VIEWS_DIR", "views"),
    "controllers_dir": ("YII_CONTROLLERS_DIR", "controllers"),
    "modules_dir": ("YII_MODULES_DIR", "modules"),
    "framework_dir": ("YII_FRAMEWORK_DIR", "framework"),
    "view_extension": ("YII_VIEW_EXTENSION", ".php"),
    "controller_suffix": ("YII_CONTROLLER_SUFFIX", "Controller"),
    "action_prefix": ("YII_ACTION_PREFIX", "action"),
}


def load_convention_config(**overrides: str) -> ConventionConfig:
    """Build a ``ConventionConfig`` from ``YII_*`` environment variables.

    Keyword overrides win over the environment, the environment wins over the
    stock Yii 1.1 layout.
    """
    values = {field: os.getenv(env_var, default) for field, (env_var, default) in _ENV_DEFAULTS.items()}
    values.update({k: v for k, v in overrides.items() if v is not None})
    return ConventionConfig(**values)
