"""vmscaffold - Scaffolding for multi-machine Vagrant provisioning projects."""

__version__ = "0.1.0"
