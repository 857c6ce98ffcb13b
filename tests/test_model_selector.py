from dataclasses import replace

from core.config_manager import ServiceConfig
from core.model_selector import RequestKind, pick_model


def _config(mode):
    return replace(ServiceConfig(), model_mode=mode, default_model="default-x")


def test_auto_mode_prefers_fast_model_for_suggestions():
    assert pick_model(RequestKind.SUGGEST, None, _config("auto")) == "gpt-5-mini"


def test_auto_mode_prefers_full_model_for_evaluations():
    assert pick_model(RequestKind.EVALUATE, None, _config("auto")) == "gpt-5"


def test_fixed_modes():
    for kind in (RequestKind.SUGGEST, RequestKind.EVALUATE):
        assert pick_model(kind, None, _config("full")) == "gpt-5"
        assert pick_model(kind, None, _config("mini")) == "gpt-5-mini"


def test_override_always_wins():
    for mode in ("auto", "full", "mini"):
        for kind in RequestKind:
            assert pick_model(kind, "custom-model", _config(mode)) == "custom-model"


def test_raw_uses_default_model():
    assert pick_model(RequestKind.RAW, None, _config("mini")) == "default-x"
