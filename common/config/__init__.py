"""Configuration helpers for the visualizer."""

from .settings import CONFIG_ENV, VisualizerSettings, load_settings

__all__ = ["CONFIG_ENV", "VisualizerSettings", "load_settings"]
