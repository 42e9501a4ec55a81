import pytest

from flakeid import ConfigError
from flakeid.settings import create_worker, get_config, worker_options


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    return tmp_path


def write_conf(project, env, text):
    (project / "config" / f"conf.{env}.yaml").write_text(text, encoding="utf-8")


def test_no_env_means_empty_config():
    assert get_config(None) == {}


def test_missing_config_file(project):
    assert get_config("nope") == {}
    assert worker_options("nope") == {"worker_id": 0, "datacenter_id": 0}


def test_snowflake_section(project):
    write_conf(
        project,
        "test",
        "snowflake:\n  worker_id: 3\n  datacenter_id: 7\n  unknown: 1\nother: 2\n",
    )
    options = worker_options("test")
    assert options == {"worker_id": 3, "datacenter_id": 7}
    assert options.worker_id == 3


def test_overrides_win_unless_none(project):
    write_conf(project, "test", "snowflake:\n  worker_id: 3\n  datacenter_id: 7\n")
    options = worker_options("test", worker_id=5, datacenter_id=None)
    assert options.worker_id == 5
    assert options.datacenter_id == 7


def test_environment_substitution(project, monkeypatch):
    monkeypatch.setenv("FLAKEID_WORKER_ID", "9")
    write_conf(
        project,
        "prod",
        'snowflake:\n  worker_id: "${FLAKEID_WORKER_ID}"\n  datacenter_id: 1\n',
    )
    assert worker_options("prod").worker_id == 9


def test_create_worker(project):
    write_conf(project, "test", "snowflake:\n  worker_id: 12\n  datacenter_id: 30\n")
    worker = create_worker("test")
    assert worker.worker_id == 12
    assert worker.datacenter_id == 30
    assert worker.parse(worker.next_id()).worker_id == 12


def test_create_worker_rejects_bad_identity(project):
    write_conf(project, "test", "snowflake:\n  worker_id: 32\n")
    with pytest.raises(ConfigError):
        create_worker("test")


def test_object_and_chain_map():
    from flakeid.utils.common import Object, chainMap

    merged = chainMap({"a": 1, "b": 2}, {"a": None, "b": 3, "c": None})
    assert merged == {"a": 1, "b": 3, "c": None}
    assert merged.b == 3
    assert merged.missing is None

    o = Object()
    o.x = 1
    assert o["x"] == 1
    del o.x
    with pytest.raises(AttributeError):
        del o.x


def test_epoch_from_environment(project, monkeypatch):
    monkeypatch.setenv("FLAKEID_EPOCH", "1704067200000")
    write_conf(
        project,
        "prod",
        'snowflake:\n  worker_id: 1\n  epoch: "${FLAKEID_EPOCH}"\n',
    )
    worker = create_worker("prod")
    assert worker.epoch == 1704067200000
    assert worker.next_id() >= 0


def test_unresolved_epoch_is_config_error(project, monkeypatch):
    monkeypatch.delenv("FLAKEID_EPOCH", raising=False)
    write_conf(project, "test", 'snowflake:\n  epoch: "${FLAKEID_EPOCH}"\n')
    with pytest.raises(ConfigError) as e:
        create_worker("test")
    assert "epoch" in str(e.value)


def test_malformed_number_names_the_key(project):
    write_conf(project, "test", 'snowflake:\n  worker_id: "--5"\n')
    with pytest.raises(ConfigError) as e:
        worker_options("test")
    assert "worker_id" in str(e.value)
