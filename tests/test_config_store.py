import json

import pytest

from lead_scoring.config_store import ConfigStore
from lead_scoring.models.scoring_config import (
    ScoreWeights,
    ScoringConfig,
    ScoringConfigError,
    create_relationship_scoring_config,
)


def test_in_memory_defaults():
    config, source, last_modified = ConfigStore().load()
    assert source == "default"
    assert last_modified is None
    assert config == ScoringConfig()


def test_in_memory_save_and_reset():
    store = ConfigStore()
    saved = create_relationship_scoring_config()
    timestamp = store.save(saved)

    config, source, last_modified = store.load()
    assert config == saved
    assert source == "saved"
    assert last_modified == timestamp

    store.reset()
    assert store.load()[1] == "default"


def test_invalid_config_never_replaces_active():
    store = ConfigStore()
    good = create_relationship_scoring_config()
    store.save(good)

    with pytest.raises(ScoringConfigError):
        store.save(ScoringConfig(weights=ScoreWeights(person=0.9, company=0.9)))

    assert store.load()[0] == good


def test_file_store_persists(tmp_path):
    path = tmp_path / "icp.json"
    store = ConfigStore(str(path))
    saved = create_relationship_scoring_config()
    store.save(saved)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["config"]["name"] == "Relationship ICP"
    assert payload["config"]["growth_tiers"][-1] == {"min": None, "score": 10}

    config, source, _ = ConfigStore(str(path)).load()
    assert source == "saved"
    assert config == saved


def test_file_store_missing_file_is_default(tmp_path):
    config, source, _ = ConfigStore(str(tmp_path / "absent.json")).load()
    assert source == "default"
    assert config == ScoringConfig()


def test_file_store_reset_removes_file(tmp_path):
    path = tmp_path / "icp.json"
    store = ConfigStore(str(path))
    store.save(create_relationship_scoring_config())
    store.reset()
    assert not path.exists()
    assert store.load()[1] == "default"


def test_file_store_picks_up_external_delete(tmp_path):
    path = tmp_path / "icp.json"
    store = ConfigStore(str(path))
    store.save(create_relationship_scoring_config())
    path.unlink()
    assert store.load()[1] == "default"
