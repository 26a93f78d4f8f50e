"""Scan public cloud-drive folders for images and place them on a canvas."""

__version__ = "0.1.0"
