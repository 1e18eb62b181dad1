"""KubeFuzz - live, health-ranked Kubernetes navigator for the terminal."""

__version__ = "0.1.0"
