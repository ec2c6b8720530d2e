from .settings import Settings, KubernetesSettings, LogLevel

__all__ = ["Settings", "KubernetesSettings", "LogLevel"]
