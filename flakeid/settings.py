from pathlib import Path
import yaml
from envyaml import EnvYAML
from flakeid.errors import ConfigError
from flakeid.logging import error, info
from flakeid.utils.common import Object, chainMap
from flakeid.utils.snowflake import IdWorker

WORKER_OPTIONS = (
    "worker_id",
    "datacenter_id",
    "epoch",
    "worker_id_bits",
    "datacenter_id_bits",
    "sequence_bits",
)


def get_config(env):
    if env is None:
        return {}
    conf_path = Path().cwd() / "config" / f"conf.{env}.yaml"
    info(f"loading config {conf_path}")
    if not conf_path.exists():
        error(f"Configuration file does not exist: {conf_path}")
        return {}
    with open(conf_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)
    try:
        config = dict(EnvYAML(conf_path, strict=False))
    except Exception as e:
        error(e)
    return config or {}


def _coerce(key, value):
    # values substituted from the environment arrive as strings
    if not isinstance(value, str):
        return value
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"snowflake.{key} must be an integer, got {value!r}")


def worker_options(env=None, **overrides):
    """
    Build IdWorker keyword arguments from the `snowflake` section of
    conf.{env}.yaml, with non-None overrides taking precedence.
    """
    section = get_config(env).get("snowflake") or {}
    options = chainMap(
        {"worker_id": 0, "datacenter_id": 0},
        {k: v for k, v in section.items() if k in WORKER_OPTIONS},
        {k: v for k, v in overrides.items() if k in WORKER_OPTIONS},
    )
    return Object(
        {k: _coerce(k, v) for k, v in options.items() if v is not None}
    )


def create_worker(env=None, **overrides) -> IdWorker:
    options = worker_options(env, **overrides)
    worker_id = options.pop("worker_id")
    datacenter_id = options.pop("datacenter_id")
    return IdWorker(worker_id, datacenter_id, **options)
