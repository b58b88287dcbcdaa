# -*- coding: utf-8 -*-
"""Gradio front end for the Weatherly widget.

Each browser session gets its own ResolutionCoordinator. The browser's
geolocation API is called from JavaScript and the result (coordinates or
an error code) is handed to the coordinator through a
StaticGeolocationAdapter.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import gradio as gr

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from weatherly.adapters.geolocation import StaticGeolocationAdapter
from weatherly.adapters.presentation import render_markdown, suggestion_labels
from weatherly.container import get_container
from weatherly.monitoring import configure_logging
from weatherly.services import ResolutionCoordinator

# ============================ CONFIG ============================
PLACEHOLDER = "Search city (e.g., London)"

GEOLOCATE_JS = """
async (lat, lon, code) => {
  if (!navigator.geolocation) { return [null, null, 2]; }
  return await new Promise((resolve) => {
    navigator.geolocation.getCurrentPosition(
      (pos) => resolve([pos.coords.latitude, pos.coords.longitude, null]),
      (err) => resolve([null, null, err.code]),
      { timeout: 10000 }
    );
  });
}
"""

SESSIONS: Dict[str, ResolutionCoordinator] = {}

Outputs = Tuple[str, Any, Any]


def _session(request: gr.Request) -> ResolutionCoordinator:
    key = request.session_hash or "default"
    coordinator = SESSIONS.get(key)
    if coordinator is None:
        coordinator = get_container().resolve(ResolutionCoordinator)
        SESSIONS[key] = coordinator
    return coordinator


def _request_origin(request: gr.Request) -> Tuple[bool, str]:
    headers = request.headers
    scheme = headers.get("x-forwarded-proto") or request.url.scheme
    host = headers.get("x-forwarded-host") or headers.get("host") or ""
    return scheme == "https", host


def _outputs(coordinator: ResolutionCoordinator, *, sync_query: bool) -> Outputs:
    view = coordinator.view
    labels = suggestion_labels(view)
    suggestions = gr.update(choices=labels, value=None, visible=bool(labels))
    query = gr.update(value=view.query) if sync_query else gr.update()
    return render_markdown(view), suggestions, query


async def on_input(text: str, request: gr.Request) -> Outputs:
    coordinator = _session(request)
    coordinator.on_text_input(text)
    await coordinator.drain()
    return _outputs(coordinator, sync_query=False)


async def on_submit(text: str, request: gr.Request) -> Outputs:
    coordinator = _session(request)
    if text != coordinator.state.query:
        coordinator.on_text_input(text)
    await coordinator.submit_search()
    await coordinator.drain()
    return _outputs(coordinator, sync_query=True)


async def on_choose(index: Optional[int], request: gr.Request) -> Outputs:
    coordinator = _session(request)
    if index is not None:
        coordinator.choose_suggestion(int(index))
    await coordinator.drain()
    return _outputs(coordinator, sync_query=True)


async def on_geolocate(
    latitude: Optional[float],
    longitude: Optional[float],
    code: Optional[float],
    request: gr.Request,
) -> Outputs:
    coordinator = _session(request)
    coordinator.geolocation = StaticGeolocationAdapter(
        latitude=latitude,
        longitude=longitude,
        error_code=int(code) if code is not None else None,
    )
    secure, host = _request_origin(request)
    await coordinator.use_my_location(secure_context=secure, hostname=host)
    await coordinator.drain()
    return _outputs(coordinator, sync_query=True)


async def on_toggle_units(request: gr.Request) -> Outputs:
    coordinator = _session(request)
    coordinator.toggle_units()
    await coordinator.drain()
    return _outputs(coordinator, sync_query=False)


async def on_toggle_debug(request: gr.Request) -> Outputs:
    coordinator = _session(request)
    coordinator.toggle_debug()
    return _outputs(coordinator, sync_query=False)


async def on_unload(request: gr.Request) -> None:
    """Drop the session's coordinator and cancel its outstanding work."""
    coordinator = SESSIONS.pop(request.session_hash or "default", None)
    if coordinator is not None:
        coordinator.close()


def build_app() -> gr.Blocks:
    with gr.Blocks(title="Weatherly") as app:
        with gr.Row():
            btn_units = gr.Button("🌡️ Units")
            btn_locate = gr.Button("📍 Use my location")
            btn_debug = gr.Button("🛠️ Show debug")

        with gr.Row():
            query_box = gr.Textbox(label="🔎 City", placeholder=PLACEHOLDER, scale=4)
            btn_search = gr.Button("Search", scale=1)

        suggestions = gr.Radio(
            choices=[], type="index", label="Suggestions", visible=False
        )
        output = gr.Markdown("## Weatherly\n\nSearch for a city or use your location.")

        lat = gr.Number(visible=False)
        lon = gr.Number(visible=False)
        code = gr.Number(visible=False)

        outputs = [output, suggestions, query_box]

        query_box.input(
            on_input, inputs=query_box, outputs=outputs, trigger_mode="always_last"
        )
        query_box.submit(on_submit, inputs=query_box, outputs=outputs)
        btn_search.click(on_submit, inputs=query_box, outputs=outputs)
        suggestions.input(on_choose, inputs=suggestions, outputs=outputs)
        btn_locate.click(
            on_geolocate, inputs=[lat, lon, code], outputs=outputs, js=GEOLOCATE_JS
        )
        btn_units.click(on_toggle_units, outputs=outputs)
        btn_debug.click(on_toggle_debug, outputs=outputs)
        app.unload(on_unload)
    return app


if __name__ == "__main__":
    configure_logging()
    build_app().launch()
