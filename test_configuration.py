"""
Configuration Tests

Validates loading the persisted service configuration:
1. PascalCase JSON is parsed into Configuration / BoardMapping models
2. Defaults match the service defaults (polling, earliest sync date)
3. Credentials can be overridden from the environment / a .env file
4. Summaries never print passwords
"""

import json
from datetime import datetime

import pytest
from pydantic import ValidationError

from core.config import Configuration, ServerConfiguration, load_configuration

CONFIG = {
    "PollingFrequency": 30000,
    "LocalStoragePath": "/var/lib/integration",
    "LeanKit": {"Protocol": "https", "Host": "acme.leankit.com", "User": "sync@acme.com", "Password": "lk-pass"},
    "Target": {
        "Type": "TFS",
        "Protocol": "https",
        "Host": "tfs.acme.local/tfs/DefaultCollection",
        "User": "svc-sync",
        "Password": "tfs-pass",
    },
    "Mappings": [
        {
            "Identity": {"LeanKit": 101, "LeanKitTitle": "Team Board", "Target": "Fabrikam"},
            "LaneToStatesMap": {"10": ["New"], "20": ["Active"], "30": ["Closed"]},
            "Types": ["Bug", "Task"],
            "Query": "[System.AreaPath] UNDER 'Fabrikam\\Web'",
            "IterationPath": "\\Fabrikam\\Sprint 1",
            "UpdateCardLanes": True,
        }
    ],
}


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG), encoding="utf-8")
    return path


@pytest.fixture
def clean_env(monkeypatch):
    """Make sure credential overrides from the outer environment do not leak in or out."""
    for name in ("TARGET_USER", "TARGET_PASSWORD", "LEANKIT_USER", "LEANKIT_PASSWORD"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_load_configuration(config_file, clean_env):
    config = load_configuration(config_file)

    assert config.polling_frequency == 30000
    assert config.local_storage_path == "/var/lib/integration"
    assert config.target.type == "TFS"
    assert config.target.password == "tfs-pass"
    assert config.leankit.host == "acme.leankit.com"

    mapping = config.get_mapping(101)
    assert mapping is not None
    assert mapping.identity.target == "Fabrikam"
    assert mapping.lane_to_states_map[20] == ["Active"]
    assert mapping.iteration_path == "\\Fabrikam\\Sprint 1"
    assert mapping.update_card_lanes is True
    assert mapping.create_cards is False


def test_defaults():
    config = Configuration()
    assert config.polling_frequency == 60000
    assert config.earliest_sync_date == datetime(2013, 1, 1)
    assert config.mappings == []
    assert config.target.protocol == "https"


def test_unknown_board_has_no_mapping(config_file, clean_env):
    assert load_configuration(config_file).get_mapping(999) is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_configuration(tmp_path / "missing.json")


def test_invalid_polling_frequency(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"PollingFrequency": 0}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_configuration(path)


def test_mapping_requires_identity(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"Mappings": [{"Types": ["Bug"]}]}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_configuration(path)


def test_environment_overrides_credentials(config_file, clean_env):
    clean_env.setenv("TARGET_PASSWORD", "from-env")
    clean_env.setenv("LEANKIT_USER", "bot@acme.com")

    config = load_configuration(config_file)
    assert config.target.password == "from-env"
    assert config.target.user == "svc-sync"
    assert config.leankit.user == "bot@acme.com"


def test_env_file_overrides_credentials(config_file, tmp_path, clean_env):
    env_file = tmp_path / ".env"
    env_file.write_text("TARGET_USER=env-user\nTARGET_PASSWORD=env-pass\n", encoding="utf-8")

    # Register the variables so monkeypatch removes what load_dotenv sets
    clean_env.setenv("TARGET_USER", "")
    clean_env.delenv("TARGET_USER")
    clean_env.setenv("TARGET_PASSWORD", "")
    clean_env.delenv("TARGET_PASSWORD")

    config = load_configuration(config_file, env_file=env_file)
    assert config.target.user == "env-user"
    assert config.target.password == "env-pass"


def test_summary_masks_passwords(config_file, clean_env):
    summary = load_configuration(config_file).summary()
    assert "tfs-pass" not in summary
    assert "lk-pass" not in summary
    assert "********" in summary
    assert "PollingFrequency :        30000" in summary
    assert "WorkItemType : Bug" in summary


def test_server_configuration_repr_hides_password():
    server = ServerConfiguration(host="tfs.acme.local", password="hunter2")
    assert "hunter2" not in repr(server)
