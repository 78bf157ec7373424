import pytest

from composescale.auto_scaling import StrategyName
from composescale.config import load_config_file, load_policy, load_services
from composescale.errors import ConfigurationError

ENV_VARS = [
    "CSCALE_STRATEGY", "CSCALE_CPU_THRESHOLD", "CSCALE_MEM_THRESHOLD",
    "CSCALE_MIN_REPLICAS", "CSCALE_MAX_REPLICAS", "CSCALE_INTERVAL", "CSCALE_SERVICES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a stray autoscale.yaml in the working tree out of the tests.
    monkeypatch.chdir(tmp_path)


def write_config(tmp_path, text):
    path = tmp_path / "scale.yaml"
    path.write_text(text)
    return path


def test_defaults_without_any_source():
    policy = load_policy()
    assert policy.strategy is StrategyName.BALANCED
    assert policy.max_replicas == 10


def test_file_values_are_used(tmp_path):
    path = write_config(tmp_path, """
autoscale:
  strategy: efficiency
  cpu-threshold: 60
  max_replicas: 4
  services: [web, worker]
""")
    file_config = load_config_file(path)

    policy = load_policy(file_config=file_config)

    assert policy.strategy is StrategyName.EFFICIENCY
    assert policy.cpu_threshold == 60.0
    assert policy.max_replicas == 4
    assert load_services(None, file_config) == ["web", "worker"]


def test_precedence_is_cli_then_env_then_file(tmp_path, monkeypatch):
    file_config = load_config_file(write_config(tmp_path, "autoscale:\n  max_replicas: 4\n  min_replicas: 2\n  interval: 5\n"))
    monkeypatch.setenv("CSCALE_MAX_REPLICAS", "6")
    monkeypatch.setenv("CSCALE_INTERVAL", "7")

    policy = load_policy({"interval": 9, "strategy": None}, file_config)

    assert policy.min_replicas == 2
    assert policy.max_replicas == 6
    assert policy.interval == 9


def test_env_references_in_file_are_resolved(tmp_path, monkeypatch):
    monkeypatch.setenv("WEB_MAX", "8")
    path = write_config(tmp_path, "autoscale:\n  max_replicas: ${WEB_MAX}\n  min_replicas: ${WEB_MIN:-3}\n")

    policy = load_policy(file_config=load_config_file(path))

    assert (policy.min_replicas, policy.max_replicas) == (3, 8)


def test_default_file_is_picked_up_from_working_directory(tmp_path):
    (tmp_path / "autoscale.yaml").write_text("autoscale:\n  strategy: performance\n")
    assert load_config_file()["strategy"] == "performance"


def test_missing_default_file_is_not_an_error():
    assert load_config_file() == {}


def test_unparsable_value_is_a_configuration_error(monkeypatch):
    monkeypatch.setenv("CSCALE_MIN_REPLICAS", "two")
    with pytest.raises(ConfigurationError, match="CSCALE_MIN_REPLICAS"):
        load_policy()


def test_bounds_conflict_across_sources_is_rejected(monkeypatch):
    monkeypatch.setenv("CSCALE_MIN_REPLICAS", "5")
    with pytest.raises(ConfigurationError):
        load_policy({"max_replicas": 3})


def test_bad_yaml_is_a_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config_file(write_config(tmp_path, "autoscale: [unclosed\n"))


def test_section_must_be_a_mapping(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config_file(write_config(tmp_path, "autoscale: 3\n"))


def test_services_from_environment(monkeypatch):
    monkeypatch.setenv("CSCALE_SERVICES", "web, worker,,")
    assert load_services([], {"services": ["db"]}) == ["web", "worker"]
    assert load_services(["api"], {}) == ["api"]


@pytest.mark.parametrize("raw", [2.5, "2.5", True, "nan"])
def test_integer_fields_are_not_truncated(raw):
    with pytest.raises(ConfigurationError, match="min_replicas"):
        load_policy(file_config={"min_replicas": raw})


def test_whole_floats_are_accepted_for_integer_fields():
    policy = load_policy(file_config={"min_replicas": 2.0, "max_replicas": "9.0"})
    assert (policy.min_replicas, policy.max_replicas) == (2, 9)


def test_nan_threshold_from_environment_is_rejected(monkeypatch):
    monkeypatch.setenv("CSCALE_CPU_THRESHOLD", "nan")
    with pytest.raises(ConfigurationError):
        load_policy()
