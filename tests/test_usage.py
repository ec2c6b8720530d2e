"""Tests for config map and secret usage scanning."""

from kubernetes import client as k8s

from microlens.models.report_models import UsageKind
from microlens.reporting.usage import find_config_map_usage, find_secret_usage
from tests.factories import make_pod


def _pod_with_volume_and_env_from():
    container = k8s.V1Container(
        name="app",
        env_from=[k8s.V1EnvFromSource(secret_ref=k8s.V1SecretEnvSource(name="Y"))],
    )
    volume = k8s.V1Volume(name="settings", config_map=k8s.V1ConfigMapVolumeSource(name="X"))
    return make_pod("web-1", containers=[container], volumes=[volume])


class TestUsageScan:

    def test_volume_mount_found(self):
        usages = find_config_map_usage(_pod_with_volume_and_env_from(), "X")

        assert len(usages) == 1
        assert usages[0].kind == UsageKind.VOLUME
        assert usages[0].description == "Mounted as volume: settings"

    def test_env_from_found(self):
        usages = find_secret_usage(_pod_with_volume_and_env_from(), "Y")

        assert len(usages) == 1
        assert usages[0].kind == UsageKind.ENV_FROM
        assert usages[0].description == "Used in envFrom by container: app"

    def test_unrelated_name_has_no_usage(self):
        pod = _pod_with_volume_and_env_from()

        assert find_config_map_usage(pod, "Z") == []
        assert find_secret_usage(pod, "Z") == []

    def test_kinds_are_not_confused(self):
        pod = _pod_with_volume_and_env_from()

        # X is a config map and Y a secret; neither matches the other scanner
        assert find_secret_usage(pod, "X") == []
        assert find_config_map_usage(pod, "Y") == []

    def test_env_var_key_refs(self):
        container = k8s.V1Container(
            name="worker",
            env=[
                k8s.V1EnvVar(name="LOG_LEVEL", value_from=k8s.V1EnvVarSource(
                    config_map_key_ref=k8s.V1ConfigMapKeySelector(name="app-config", key="level"))),
                k8s.V1EnvVar(name="DB_PASSWORD", value_from=k8s.V1EnvVarSource(
                    secret_key_ref=k8s.V1SecretKeySelector(name="db", key="password"))),
                k8s.V1EnvVar(name="PLAIN", value="literal"),
            ],
        )
        pod = make_pod("worker-1", containers=[container])

        cm_usages = find_config_map_usage(pod, "app-config")
        secret_usages = find_secret_usage(pod, "db")

        assert [u.description for u in cm_usages] == ["Used as env var 'LOG_LEVEL' in container: worker"]
        assert [u.description for u in secret_usages] == ["Used as env var 'DB_PASSWORD' in container: worker"]

    def test_all_sites_in_order(self):
        container = k8s.V1Container(
            name="app",
            env_from=[k8s.V1EnvFromSource(config_map_ref=k8s.V1ConfigMapEnvSource(name="shared"))],
            env=[k8s.V1EnvVar(name="MODE", value_from=k8s.V1EnvVarSource(
                config_map_key_ref=k8s.V1ConfigMapKeySelector(name="shared", key="mode")))],
        )
        volume = k8s.V1Volume(name="shared-vol", config_map=k8s.V1ConfigMapVolumeSource(name="shared"))
        pod = make_pod("app-1", containers=[container], volumes=[volume])

        kinds = [u.kind for u in find_config_map_usage(pod, "shared")]

        assert kinds == [UsageKind.VOLUME, UsageKind.ENV_FROM, UsageKind.ENV]

    def test_secret_volume(self):
        volume = k8s.V1Volume(name="certs", secret=k8s.V1SecretVolumeSource(secret_name="tls-cert"))
        pod = make_pod("proxy-1", volumes=[volume])

        usages = find_secret_usage(pod, "tls-cert")

        assert [u.description for u in usages] == ["Mounted as volume: certs"]
