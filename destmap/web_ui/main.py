"""NiceGUI entrypoint for the destmap web runtime."""

from __future__ import annotations

import argparse
import asyncio
import html
import os
from typing import Any, Callable, Dict, List, Optional

from nicegui import app, run, ui

from destmap.adapters.storage_memory import MappingStore
from destmap.app.delay_scheduler import DelayScheduler
from destmap.domain.entities import ImageFile, PlaceRecord
from destmap.utils.logging import configure_root
from destmap.viewmodels.form_vm import DestinationFormVM
from destmap.web_ui.runtime import (
    DEFAULT_MAP_CENTER,
    DEFAULT_MAP_USER,
    DEFAULT_MAP_ZOOM,
    FormSession,
    WebRuntime,
)


def _install_theme() -> None:
    """Install global CSS tokens for the web runtime."""
    ui.add_head_html(
        """
<style>
:root {
  --destmap-bg-a: #eef6f2;
  --destmap-bg-b: #fbf3e6;
  --destmap-card: rgba(255, 255, 255, 0.9);
  --destmap-border: #cfdcd5;
  --destmap-muted: #4b5a52;
}
body {
  background: radial-gradient(circle at top left, var(--destmap-bg-a), var(--destmap-bg-b));
}
.destmap-page {
  max-width: 1200px;
  margin: 0 auto;
  padding: 14px;
}
.destmap-card {
  background: var(--destmap-card);
  border: 1px solid var(--destmap-border);
  border-radius: 14px;
}
.destmap-muted { color: var(--destmap-muted); }
</style>
        """
    )


def _notify_error(exc: Exception) -> None:
    """Render exceptions as concise NiceGUI toasts."""
    ui.notify(str(exc), color="negative", close_button="OK")


class _PendingTimer:
    """Token for a one-shot timer that is created later on the event loop."""

    def __init__(self) -> None:
        self.timer: Optional[ui.timer] = None
        self.canceled = False


def nicegui_scheduler(
    parent: ui.element, loop: Optional[asyncio.AbstractEventLoop] = None
) -> DelayScheduler:
    """Return a scheduler backed by one-shot ``ui.timer`` instances.

    Timers live in ``parent``, which must outlive the refreshable form
    sections. ``schedule`` is safe to call from a worker thread: the timer is
    always created on ``loop``.
    """
    loop = loop or asyncio.get_running_loop()

    def schedule(delay_ms: int, callback: Callable[[], None]) -> _PendingTimer:
        pending = _PendingTimer()

        def start() -> None:
            if pending.canceled:
                return
            with parent:
                pending.timer = ui.timer(delay_ms / 1000.0, callback, once=True)

        loop.call_soon_threadsafe(start)
        return pending

    def cancel(pending: _PendingTimer) -> None:
        pending.canceled = True
        if pending.timer is not None:
            pending.timer.cancel()

    return DelayScheduler(schedule, cancel)


def _attach_upload(form: DestinationFormVM, event: Any) -> bool:
    """Hand an upload event to the form; clear the widget when it is rejected."""
    image = ImageFile(
        filename=event.name,
        content=event.content.read(),
        content_type=event.type or "application/octet-stream",
    )
    if form.change("image", image):
        return True
    event.sender.reset()
    return False


def _render_markers(records: List[PlaceRecord]) -> None:
    """Draw one leaflet map with a marker per place."""
    leaflet = ui.leaflet(center=DEFAULT_MAP_CENTER, zoom=DEFAULT_MAP_ZOOM).classes("w-full h-96")
    for record in records:
        marker = leaflet.marker(latlng=(record.latitude, record.longitude))
        parts = [f"<b>{html.escape(record.place)}</b>"]
        region = ", ".join(p for p in (record.administrative_region, record.country) if p)
        if region:
            parts.append(html.escape(region))
        if record.image_url:
            parts.append(f'<img src="{html.escape(record.image_url)}" width="160">')
        marker.run_method("bindPopup", "<br>".join(parts))


def _build_ui(runtime: WebRuntime) -> None:
    """Register the NiceGUI pages for the runtime."""

    @ui.page("/")
    def index() -> None:
        with ui.column().classes("destmap-page w-full"):
            ui.label("Unlock a destination").classes("text-h5")

            def on_saved() -> None:
                refresh_form()
                render_map.refresh()

            try:
                session = runtime.open_form(
                    runtime.session_store(MappingStore(app.storage.user)),
                    scheduler=nicegui_scheduler(ui.context.client.layout),
                    on_saved=on_saved,
                )
            except RuntimeError as exc:
                ui.label(str(exc)).classes("text-negative")
                return
            ui.context.client.on_disconnect(session.close)
            refresh_form = _render_form_page(session)

            @ui.refreshable
            def render_map() -> None:
                identity = session.form.stored_identity or DEFAULT_MAP_USER
                ui.label(f"Places unlocked by {identity}").classes("text-subtitle1 destmap-muted")
                _render_markers(runtime.map_places(identity))

            render_map()

    @ui.page("/map")
    def map_page(user: Optional[str] = None) -> None:
        name = (user or "").strip() or DEFAULT_MAP_USER
        with ui.column().classes("destmap-page w-full"):
            ui.label(f"Places unlocked by {name}").classes("text-h5")
            if not runtime.ensure_ready():
                ui.label(runtime.status_message).classes("text-negative")
                return
            _render_markers(runtime.map_places(name))


def _render_form_page(session: FormSession) -> Callable[[], None]:
    """Render the form and message area; return a callback that redraws both."""
    form = session.form
    suggestions: Dict[str, List[Dict[str, Any]]] = {"items": []}
    submitting = {"active": False}

    @ui.refreshable
    def render_result() -> None:
        surface = form.surface
        if surface.message:
            ui.label(surface.message).classes("text-body1")
        if surface.image_url:
            ui.image(surface.image_url).classes("w-64 rounded")

    @ui.refreshable
    def render_suggestions() -> None:
        with ui.column().classes("w-full q-gutter-xs"):
            for item in suggestions["items"]:
                ui.button(
                    item.get("description", ""),
                    on_click=lambda _e, pid=item.get("place_id", ""): on_pick(pid),
                ).props("flat dense no-caps align=left")

    def _invoke(action: Callable[[], Any], *refreshers: Callable[[], None]) -> None:
        try:
            action()
        except Exception as exc:
            _notify_error(exc)
        for refresh in refreshers:
            refresh()

    def on_field_change(name: str, element: Any, value: Any) -> None:
        if not form.change(name, value):
            element.value = getattr(form.state, name)
            render_result.refresh()

    def on_place_change(element: Any, value: Any) -> None:
        on_field_change("place", element, value)
        text = str(value or "").strip()
        suggestions["items"] = session.autocomplete.suggest(text) if text else []
        render_suggestions.refresh()

    def on_pick(place_id: str) -> None:
        suggestions["items"] = []
        if not session.autocomplete.select(place_id):
            ui.notify("Could not read that place.", color="warning")
        render_form.refresh()

    def on_image_upload(event) -> None:
        if _attach_upload(form, event):
            ui.notify(f"Attached {event.name}", color="positive")
        render_result.refresh()

    def on_image_removed() -> None:
        form.change("image", None)
        render_result.refresh()

    def on_verify() -> None:
        _invoke(session.gate.verify, refresh_all)

    def on_change_user() -> None:
        suggestions["items"] = []
        _invoke(session.gate.reset, refresh_all)

    async def on_submit(event) -> None:
        if submitting["active"]:
            return
        submitting["active"] = True
        event.sender.props("loading")
        event.sender.disable()
        try:
            # remote calls block; keep the page responsive while they run
            await run.io_bound(form.cmd_submit)
        except Exception as exc:
            _notify_error(exc)
        finally:
            submitting["active"] = False
        refresh_all()

    def refresh_all() -> None:
        render_form.refresh()
        render_result.refresh()

    @ui.refreshable
    def render_form() -> None:
        state = form.state
        with ui.card().classes("destmap-card w-full"):
            with ui.row().classes("w-full items-end q-gutter-sm"):
                ui.input(
                    "Username",
                    value=state.username,
                    on_change=lambda e: on_field_change("username", e.sender, e.value),
                )
                password = ui.input(
                    "Password",
                    value=state.password,
                    password=True,
                    on_change=lambda e: on_field_change("password", e.sender, e.value),
                )
                password.set_enabled(not form.password_locked)
                if form.verified:
                    ui.button("Change User", on_click=on_change_user).props("outline")
                else:
                    ui.button("Verify", on_click=on_verify)

            if not form.verified:
                return

            place = ui.input(
                "Place",
                value=state.place,
                on_change=lambda e: on_place_change(e.sender, e.value),
            ).classes("w-full").props("debounce=400")
            session.autocomplete.attach(f"place-{place.id}")
            render_suggestions()
            with ui.row().classes("w-full q-gutter-sm"):
                ui.input(
                    "State / Region",
                    value=state.administrative_region,
                    on_change=lambda e: on_field_change("administrative_region", e.sender, e.value),
                )
                ui.input(
                    "Country",
                    value=state.country,
                    on_change=lambda e: on_field_change("country", e.sender, e.value),
                )
            ui.input(
                "Coordinates (lat, lon)",
                value=state.coordinates,
                on_change=lambda e: on_field_change("coordinates", e.sender, e.value),
            ).classes("w-full")
            ui.upload(
                on_upload=on_image_upload,
                auto_upload=True,
                max_files=1,
                label="Image (max 10MB)",
            ).props("accept=image/*").on("removed", lambda _e: on_image_removed())
            submit = ui.button("Unlock Destination", on_click=on_submit)
            submit.set_enabled(form.can_submit and not submitting["active"])

    render_form()
    with ui.column().classes("w-full q-mt-md"):
        render_result()
    return refresh_all


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the destmap NiceGUI web UI.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    configure_root()
    runtime = WebRuntime()
    if args.smoke_test:
        payload = runtime.settings_payload()
        print("web-smoke-ok", bool(payload.get("backend_url")))
        return
    _install_theme()
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="destmap",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("DESTMAP_WEB_STORAGE_SECRET", "destmap-web-ui-secret"),
    )


if __name__ == "__main__":
    main()
