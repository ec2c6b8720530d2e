"""Builders for typed Kubernetes API objects used as fabricated responses."""

from kubernetes import client as k8s


def make_namespace(name):
    return k8s.V1Namespace(metadata=k8s.V1ObjectMeta(name=name))


def make_pod(name, containers=None, volumes=None, node_name="node-a",
             phase="Running", pod_ip="10.1.0.5", namespace="default"):
    return k8s.V1Pod(
        metadata=k8s.V1ObjectMeta(name=name, namespace=namespace),
        spec=k8s.V1PodSpec(
            containers=containers or [k8s.V1Container(name="app")],
            volumes=volumes,
            node_name=node_name,
        ),
        status=k8s.V1PodStatus(phase=phase, pod_ip=pod_ip),
    )


def make_container(name="app", requests=None, limits=None, **kwargs):
    resources = None
    if requests or limits:
        resources = k8s.V1ResourceRequirements(requests=requests, limits=limits)
    return k8s.V1Container(name=name, resources=resources, **kwargs)


def make_node(name, capacity, allocatable):
    return k8s.V1Node(
        metadata=k8s.V1ObjectMeta(name=name),
        status=k8s.V1NodeStatus(capacity=capacity, allocatable=allocatable),
    )
