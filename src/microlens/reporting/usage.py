"""Find where pods reference config maps and secrets."""

from typing import List

from kubernetes.client import V1Pod

from microlens.models.report_models import UsageKind, UsageSite


def find_config_map_usage(pod: V1Pod, config_map_name: str) -> List[UsageSite]:
    """Return every site in the pod spec that consumes the named config map."""
    usages: List[UsageSite] = []
    spec = pod.spec
    if spec is None:
        return usages

    for volume in spec.volumes or []:
        if volume.config_map is not None and volume.config_map.name == config_map_name:
            usages.append(UsageSite(kind=UsageKind.VOLUME, source=volume.name))

    for container in spec.containers or []:
        for env_from in container.env_from or []:
            if env_from.config_map_ref is not None and env_from.config_map_ref.name == config_map_name:
                usages.append(UsageSite(kind=UsageKind.ENV_FROM, source=container.name))

        for env in container.env or []:
            key_ref = env.value_from.config_map_key_ref if env.value_from else None
            if key_ref is not None and key_ref.name == config_map_name:
                usages.append(UsageSite(kind=UsageKind.ENV, source=container.name, env_var=env.name))

    return usages


def find_secret_usage(pod: V1Pod, secret_name: str) -> List[UsageSite]:
    """Return every site in the pod spec that consumes the named secret."""
    usages: List[UsageSite] = []
    spec = pod.spec
    if spec is None:
        return usages

    for volume in spec.volumes or []:
        if volume.secret is not None and volume.secret.secret_name == secret_name:
            usages.append(UsageSite(kind=UsageKind.VOLUME, source=volume.name))

    for container in spec.containers or []:
        for env_from in container.env_from or []:
            if env_from.secret_ref is not None and env_from.secret_ref.name == secret_name:
                usages.append(UsageSite(kind=UsageKind.ENV_FROM, source=container.name))

        for env in container.env or []:
            key_ref = env.value_from.secret_key_ref if env.value_from else None
            if key_ref is not None and key_ref.name == secret_name:
                usages.append(UsageSite(kind=UsageKind.ENV, source=container.name, env_var=env.name))

    return usages
