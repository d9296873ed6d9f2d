import pytest

import main
from lead_scoring.config.settings import API_CONFIG


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def test_multiple_workers_need_shared_config_file(monkeypatch, uvicorn_calls):
    monkeypatch.setitem(API_CONFIG, "icp_config_path", "")
    with pytest.raises(SystemExit):
        main.main(["--workers", "2"])
    assert uvicorn_calls == []


def test_multiple_workers_with_config_file(monkeypatch, uvicorn_calls, tmp_path):
    monkeypatch.setitem(API_CONFIG, "icp_config_path", str(tmp_path / "icp.json"))
    main.main(["--workers", "2", "--port", "8100"])
    app, kwargs = uvicorn_calls[0]
    assert app == "lead_scoring.api.endpoints:app"
    assert kwargs["workers"] == 2
    assert kwargs["port"] == 8100


def test_single_worker_in_memory(monkeypatch, uvicorn_calls):
    monkeypatch.setitem(API_CONFIG, "icp_config_path", "")
    main.main([])
    assert uvicorn_calls[0][1]["workers"] == 1
