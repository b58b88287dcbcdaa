"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the widget to external systems like:
- Geocoding services (Open-Meteo, Nominatim)
- The forecast provider (Open-Meteo)
- Device position sources
- Rendering surfaces (Markdown for the Gradio app)
"""
