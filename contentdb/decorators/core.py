"""
ContentDB Decorators — @content_model, @datafile_model.

These decorators:
1. Build the model's immutable ModelConfig (merged over the parent class's)
2. Install a Variable descriptor for every declared variable
3. Register the class in the model registry

Variables can be listed in the decorator, declared in the class body as
``Variable()`` attributes, or both.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Type

from contentdb.engine.config import ModelConfig
from contentdb.engine.errors import ContentDBConfigError
from contentdb.engine.registry import RegisteredModel, model_registry
from contentdb.models.attributes import Variable
from contentdb.models.base import Record
from contentdb.models.datafile import DatafileModel
from contentdb.models.document import ContentModel
from contentdb.utilities.utils import to_snake

logger = logging.getLogger("contentdb.decorators")


# ---------------------------------------------------------------------------
# Helper to build config + register
# ---------------------------------------------------------------------------

def _class_variables(cls: type) -> Tuple[str, ...]:
    """Variable descriptors declared in the class body, in definition order."""
    return tuple(
        attr.name for attr in cls.__dict__.values()
        if isinstance(attr, Variable)
    )


def _register_model(
    cls: type,
    kind: str,
    options: Dict[str, Any],
    register: bool = True,
) -> type:
    """Attach a ModelConfig to a model class, install variables and register it."""
    parent: ModelConfig = cls._config

    variables = list(parent.variables)
    for name in (*options.get("variables", ()), *_class_variables(cls)):
        if name not in variables:
            variables.append(name)

    try:
        config = ModelConfig(
            base_path=options.get("base_path") or parent.base_path,
            folder_path=parent.folder_path if options.get("folder") is None else options["folder"],
            variables=tuple(variables),
            include_root=parent.include_root if options.get("include_root") is None else options["include_root"],
            root_name=options.get("root_name") or parent.root_name,
            protected=(*parent.protected, *options.get("protected", ())),
        )
    except ValueError as e:
        raise ContentDBConfigError(
            f"Invalid configuration for {cls.__name__}: {e}", model=cls.__name__
        ) from e

    for name in config.variables:
        if isinstance(getattr(cls, name, None), Variable):
            continue
        if name in Record.RESERVED_NAMES or hasattr(cls, name):
            raise ContentDBConfigError(
                f"Variable '{name}' would shadow {cls.__name__}.{name}",
                model=cls.__name__,
            )
        setattr(cls, name, Variable(name))

    cls._config = config

    if register:
        model_registry.register(RegisteredModel(
            name=options.get("name") or to_snake(cls.__name__),
            kind=kind,
            model_class=cls,
            config=config,
        ))

    logger.debug(f"Declared {kind} model {cls.__name__}: {list(config.variables)}")
    return cls


def _model_decorator(
    base: Type[Record],
    kind: str,
    cls: Optional[type],
    options: Dict[str, Any],
) -> Any:
    def decorator(klass: type) -> type:
        if not issubclass(klass, base):
            raise ContentDBConfigError(
                f"@{kind}_model requires a subclass of {base.__name__}, got {klass.__name__}",
                model=klass.__name__,
            )
        return _register_model(klass, kind, options, register=options.get("register", True))

    if cls is not None:
        return decorator(cls)
    return decorator


# ---------------------------------------------------------------------------
# @content_model
# ---------------------------------------------------------------------------

def content_model(
    cls: Optional[type] = None,
    *,
    name: Optional[str] = None,
    base_path: str = "",
    folder: Optional[str] = None,
    variables: Iterable[str] = (),
    include_root: Optional[bool] = None,
    root_name: Optional[str] = None,
    protected: Iterable[str] = (),
    register: bool = True,
) -> Any:
    """
    Decorator for front-matter models.

    Can be used bare (@content_model) or with args (@content_model(folder="_posts")).
    """
    options = {
        "name": name,
        "base_path": base_path,
        "folder": folder,
        "variables": tuple(variables),
        "include_root": include_root,
        "root_name": root_name,
        "protected": tuple(protected),
        "register": register,
    }
    return _model_decorator(ContentModel, "content", cls, options)


# ---------------------------------------------------------------------------
# @datafile_model
# ---------------------------------------------------------------------------

def datafile_model(
    cls: Optional[type] = None,
    *,
    name: Optional[str] = None,
    base_path: str = "",
    folder: Optional[str] = None,
    variables: Iterable[str] = (),
    include_root: Optional[bool] = None,
    root_name: Optional[str] = None,
    protected: Iterable[str] = (),
    register: bool = True,
) -> Any:
    """
    Decorator for data file entry models.

    Can be used bare (@datafile_model) or with args (@datafile_model(folder="_data")).
    """
    options = {
        "name": name,
        "base_path": base_path,
        "folder": folder,
        "variables": tuple(variables),
        "include_root": include_root,
        "root_name": root_name,
        "protected": tuple(protected),
        "register": register,
    }
    return _model_decorator(DatafileModel, "datafile", cls, options)


# ---------------------------------------------------------------------------
# Ad-hoc models
# ---------------------------------------------------------------------------

def define_model(
    class_name: str,
    kind: str = "content",
    **options: Any,
) -> type:
    """
    Create and configure a model class at runtime (used by the CLI).

    Not registered unless ``register=True`` is passed.
    """
    options.setdefault("register", False)
    if kind == "content":
        return content_model(type(class_name, (ContentModel,), {}), **options)
    if kind == "datafile":
        return datafile_model(type(class_name, (DatafileModel,), {}), **options)
    raise ValueError(f"Unknown model kind '{kind}'")
