import pytest

from cryptalearn.config import HESettings, get_settings
from cryptalearn.errors import ConfigValidationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CRYPTALEARN_HE_KEY_BITS",
        "CRYPTALEARN_HE_BATCH_WORKERS",
        "CRYPTALEARN_HE_BATCH_EXECUTOR",
        "CRYPTALEARN_HE_ENCODING_SCALE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert isinstance(settings, HESettings)
    assert settings.key_bits == 2048
    assert settings.primality_rounds == 20
    assert settings.batch_workers == 4
    assert settings.batch_executor == "thread"
    assert settings.rotation_period_seconds == 86400.0
    assert settings.encoding_scale == 2**16


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CRYPTALEARN_HE_KEY_BITS", "1024")
    monkeypatch.setenv("CRYPTALEARN_HE_BATCH_EXECUTOR", "process")
    settings = get_settings()
    assert settings.key_bits == 1024
    assert settings.batch_executor == "process"


def test_explicit_overrides_win(monkeypatch):
    monkeypatch.setenv("CRYPTALEARN_HE_BATCH_WORKERS", "8")
    assert get_settings(batch_workers=2).batch_workers == 2


def test_none_and_unknown_overrides_ignored():
    settings = get_settings(batch_workers=None, not_a_setting=1)
    assert settings.batch_workers == 4


@pytest.mark.parametrize(
    "overrides,key",
    [
        ({"batch_workers": 0}, "batch_workers"),
        ({"key_bits": 8}, "key_bits"),
        ({"batch_executor": "gpu"}, "batch_executor"),
        ({"rotation_period_seconds": -1}, "rotation_period_seconds"),
    ],
)
def test_invalid_overrides(overrides, key):
    with pytest.raises(ConfigValidationError) as exc_info:
        get_settings(**overrides)
    assert exc_info.value.details["config_key"] == key


def test_invalid_environment(monkeypatch):
    monkeypatch.setenv("CRYPTALEARN_HE_ENCODING_SCALE", "0")
    with pytest.raises(ConfigValidationError):
        get_settings()
