"""Photon-mapping renderer for a Cornell-box scene, with a kd-tree photon store and Radiance HDR output."""

__version__ = "0.1.0"