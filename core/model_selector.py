"""
Model selection policy shared by all routes.
"""
from enum import Enum
from typing import Optional

from core.config_manager import ServiceConfig


class RequestKind(str, Enum):
    SUGGEST = "suggest"
    EVALUATE = "evaluate"
    RAW = "raw"


def pick_model(kind: RequestKind, override: Optional[str], config: ServiceConfig) -> str:
    """
    Resolve the model identifier for a call.

    An explicit override always wins. Otherwise MODEL_MODE decides: "full" and
    "mini" pin one model; "auto" sends bulk, re-rollable suggestions to the
    fast model and one-shot evaluations to the full model.
    """
    if override:
        return override

    if kind == RequestKind.RAW:
        return config.default_model

    if config.model_mode == "full":
        return config.full_model
    if config.model_mode == "mini":
        return config.mini_model

    if kind == RequestKind.SUGGEST:
        return config.mini_model
    if kind == RequestKind.EVALUATE:
        return config.full_model
    return config.default_model
