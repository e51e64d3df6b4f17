from src.modules.inference.models import (
    DEFAULT_MODEL,
    FREE_MODELS,
    find_model,
    is_model_allowed,
)


def test_registry_ids_are_unique():
    ids = [model.id for model in FREE_MODELS]
    assert len(ids) == len(set(ids))


def test_default_model_is_first_in_fallback_order():
    assert DEFAULT_MODEL == FREE_MODELS[0].id


def test_find_model():
    assert find_model("qwen/qwen3-coder:free").name == "Qwen3 Coder"
    assert find_model("not/a-model") is None
    assert find_model("") is None
    assert find_model(None) is None


def test_is_model_allowed():
    assert is_model_allowed(DEFAULT_MODEL)
    assert not is_model_allowed("not/a-model")
    assert not is_model_allowed(None)
    assert not is_model_allowed(DEFAULT_MODEL, registry=FREE_MODELS[1:])
