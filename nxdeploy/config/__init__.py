"""Configuration repository bundle handling."""
from nxdeploy.config.loader import find_overlay, load_overlay

__all__ = ['find_overlay', 'load_overlay']
