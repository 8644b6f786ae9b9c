import logging

import pytest

from ledger_dashboard.colors import DEFAULT_PALETTE
from ledger_dashboard.config import EngineSettings


def test_defaults_from_empty_environment():
    s = EngineSettings.from_env({})
    assert s == EngineSettings()
    assert s.recent_limit == 8
    assert s.palette == DEFAULT_PALETTE
    assert s.count_uncategorized_as_spend is False
    assert s.cache_size == 32


def test_values_are_read_from_environment():
    s = EngineSettings.from_env(
        {
            "LEDGER_DASHBOARD_RECENT_LIMIT": "3",
            "LEDGER_DASHBOARD_PALETTE": "#AABBCC, #112233",
            "LEDGER_DASHBOARD_COUNT_UNCATEGORIZED": "yes",
            "LEDGER_DASHBOARD_CACHE_SIZE": "0",
        }
    )
    assert s.recent_limit == 3
    assert s.palette == ("#aabbcc", "#112233")
    assert s.count_uncategorized_as_spend is True
    assert s.cache_size == 0


def test_reads_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("LEDGER_DASHBOARD_RECENT_LIMIT", "5")
    assert EngineSettings.from_env().recent_limit == 5


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("LEDGER_DASHBOARD_RECENT_LIMIT", "lots"),
        ("LEDGER_DASHBOARD_RECENT_LIMIT", "0"),
        ("LEDGER_DASHBOARD_PALETTE", "#abc,red"),
        ("LEDGER_DASHBOARD_COUNT_UNCATEGORIZED", "maybe"),
        ("LEDGER_DASHBOARD_CACHE_SIZE", "-1"),
    ],
)
def test_invalid_values_fall_back_with_warning(name, value, caplog):
    with caplog.at_level(logging.WARNING, logger="ledger_dashboard"):
        s = EngineSettings.from_env({name: value})
    assert s == EngineSettings()
    assert name in caplog.text


def test_direct_construction_validates():
    with pytest.raises(ValueError):
        EngineSettings(recent_limit=-1)
    with pytest.raises(ValueError):
        EngineSettings(palette=())
    with pytest.raises(ValueError):
        EngineSettings(month_names=("Jan",))
