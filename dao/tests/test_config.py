import pytest

from dao.config import (DEFAULT_DAO_ACCOUNT_ADDRESS, get_config, load_config,
                        summary)


def test_defaults():
    cfg = load_config(env={})
    assert cfg.dao_account_address == DEFAULT_DAO_ACCOUNT_ADDRESS == "0" * 64
    assert cfg.windows.proposals == cfg.windows.voting == 60_000
    assert cfg.windows.grace == cfg.windows.apply == 60_000
    assert cfg.global_msg_delay == 10_000


@pytest.mark.parametrize(
    "raw, ms",
    [("250ms", 250), ("30", 30_000), ("30s", 30_000), ("5m", 300_000), ("3h", 10_800_000), ("1d", 86_400_000), ("1.5s", 1500)],
)
def test_env_durations(raw, ms):
    cfg = load_config(env={"DAO_TIME_FOR_GRACE": raw})
    assert cfg.windows.grace == ms


def test_env_overrides():
    cfg = load_config(
        env={
            "DAO_ACCOUNT_ADDRESS": "abc",
            "DAO_TIME_FOR_PROPOSALS": "1s",
            "DAO_GLOBAL_MSG_DELAY": "2s",
            "DAO_TIME_FOR_APPLY": "  ",
        }
    )
    assert cfg.dao_account_address == "abc"
    assert cfg.windows.proposals == 1000
    assert cfg.windows.apply == 60_000
    assert cfg.global_msg_delay == 2000


def test_programmatic_numbers_are_milliseconds():
    cfg = load_config(env={"DAO_TIME_FOR_VOTING": "9m"}, overrides={"time_for_voting": 1500})
    assert cfg.windows.voting == 1500


@pytest.mark.parametrize("raw", ["-5", "soon", "5 weeks"])
def test_bad_durations(raw):
    with pytest.raises(ValueError):
        load_config(env={"DAO_TIME_FOR_VOTING": raw})


def test_negative_and_bool_overrides_rejected():
    with pytest.raises(ValueError):
        load_config(env={}, overrides={"global_msg_delay": -1})
    with pytest.raises(TypeError):
        load_config(env={}, overrides={"time_for_grace": True})


def test_empty_address_rejected():
    with pytest.raises(ValueError):
        load_config(env={}, overrides={"dao_account_address": "  "})


def test_summary():
    s = summary(load_config(env={}))
    assert s.startswith("dao{network=000000000000…")
    assert "propose=1m" in s
    assert "global_delay=10s" in s


def test_get_config_is_cached():
    assert get_config() is get_config()
