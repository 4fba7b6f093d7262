"""NiceGUI entrypoint for the user directory browser."""

from __future__ import annotations

import argparse
import logging
import os

from nicegui import run, ui

from userdir.app.settings import DirectorySettings
from userdir.utils.logging import configure_root, level_name
from userdir.web_ui.runtime import WebRuntime
from userdir.web_ui.viewmodels import FILTER_OPTIONS, SORT_OPTIONS, TABLE_COLUMNS, user_rows

LOGGER = logging.getLogger(__name__)

_AVATAR_SLOT = """
<q-td :props="props">
  <q-avatar size="40px"><img :src="props.value" :alt="props.row.name"></q-avatar>
</q-td>
"""


def _install_theme() -> None:
    """Install global CSS for the directory page."""
    ui.add_head_html(
        """
<style>
.userdir-page { max-width: 1100px; margin: 0 auto; padding: 16px; }
.userdir-header h1 { margin: 0; }
.userdir-muted { color: #5b6475; }
.userdir-error { background: #fdecea; color: #b42318; border-radius: 8px; padding: 12px; }
</style>
"""
    )


def _build_ui(runtime: WebRuntime) -> None:
    """Register the NiceGUI page for the runtime."""

    @ui.page("/")
    async def index() -> None:
        vm = runtime.new_directory_vm(run_blocking=run.io_bound)

        with ui.column().classes("userdir-page w-full"):
            with ui.column().classes("userdir-header"):
                ui.label("User Directory").classes("text-h4")
                ui.label("Browse and search through our user database").classes("userdir-muted")
                ui.label(f"Source: {runtime.describe_source()}").classes("text-caption userdir-muted")

            with ui.row().classes("w-full items-end q-gutter-md"):
                ui.input(
                    placeholder="Search by name or email...",
                    on_change=lambda e: vm.set_search_term(e.value),
                ).props("clearable").classes("col-grow")
                ui.select(
                    SORT_OPTIONS,
                    value=vm.sort_key.value,
                    on_change=lambda e: vm.set_sort_key(e.value),
                )
                ui.select(
                    FILTER_OPTIONS,
                    value=vm.filter_kind.value,
                    on_change=lambda e: vm.set_filter_kind(e.value),
                )

            @ui.refreshable
            def render_results() -> None:
                if vm.error_message:
                    with ui.row().classes("userdir-error w-full items-center justify-between"):
                        ui.label(vm.error_message)
                        ui.button("Retry", on_click=vm.load_next).props("flat")

                if vm.is_initial_loading:
                    with ui.row().classes("w-full justify-center q-pa-lg"):
                        ui.spinner(size="lg")
                    return

                table = ui.table(
                    columns=TABLE_COLUMNS,
                    rows=user_rows(vm.visible_records),
                    row_key="key",
                ).classes("w-full")
                table.add_slot("body-cell-avatar", _AVATAR_SLOT)

                if vm.empty_message:
                    ui.label(vm.empty_message).classes("userdir-muted q-pa-md")

                with ui.row().classes("w-full items-center justify-between q-mt-sm"):
                    if vm.total_matching or vm.has_more:
                        ui.label(vm.pagination_text).classes("userdir-muted")
                    with ui.row().classes("q-gutter-sm"):
                        refresh = ui.button("Refresh", on_click=vm.refresh).props("flat")
                        if vm.is_loading:
                            refresh.disable()
                        if vm.has_more:
                            button = ui.button(vm.load_more_text, on_click=vm.request_more)
                            if not vm.can_load_more:
                                button.disable()

            vm.on_change = render_results.refresh
            render_results()

        # first page loads after the page is delivered to the browser
        ui.timer(0.0, vm.load_next, once=True)


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the user directory web UI.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--mock", action="store_true", help="Serve offline demo data")
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    level = configure_root()
    settings = DirectorySettings.from_env()
    if args.mock:
        settings = settings.apply_dict({"use_mock": True})
    runtime = WebRuntime(settings)
    if args.smoke_test:
        print("web-smoke-ok", runtime.describe_source())
        return
    LOGGER.info("Starting user directory on %s:%d (log level %s)", args.host, args.port, level_name(level))
    _install_theme()
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="User Directory",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("USERDIR_WEB_STORAGE_SECRET", "userdir-web-ui-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
