"""A textured grid raycaster driven by .cub scene files, with BMP screenshots."""

__version__ = "0.1.0"