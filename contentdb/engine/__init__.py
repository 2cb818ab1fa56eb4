"""ContentDB Engine — configuration, errors, logging, registry, callbacks."""

from contentdb.engine.callbacks import CallbackRegistry, HaltCallbacks, get_callback_registry  # noqa: F401
from contentdb.engine.config import ModelConfig, StoreConfig, get_store_config, load_store_config  # noqa: F401
from contentdb.engine.registry import ModelRegistry, model_registry  # noqa: F401

__all__ = [
    "CallbackRegistry",
    "HaltCallbacks",
    "get_callback_registry",
    "ModelConfig",
    "StoreConfig",
    "get_store_config",
    "load_store_config",
    "ModelRegistry",
    "model_registry",
]
