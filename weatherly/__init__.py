"""Top-level package for the Weatherly widget.

Resolves a city name or device coordinates to a stable place label and
drives the forecast display for it. The entry point for applications is
``weatherly.container.get_container()``.
"""

__version__ = "0.1.0"
