"""Kubernetes MicroLens - a lightweight Kubernetes resource visualization tool."""

__version__ = "0.1.0"
__author__ = "Marcus Bergo <marcus.bergo@gmail.com>"
__repository__ = "https://github.com/mbergo/k8s-microlens"
