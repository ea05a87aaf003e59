"""Callbacks wiring the Componentforge UI to the component service."""

import logging

from dash import ALL, Input, Output, State, callback_context, no_update

from .errors import (
    ComponentNotFound,
    FallbackDisabled,
    StaleWrite,
    ValidationError,
    VersionNotFound,
)
from .layout import CODE_PANES

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."

# Fixed texts for errors whose own messages carry ids or internal state.
SAFE_MESSAGES = (
    (ComponentNotFound, "Component not found"),
    (VersionNotFound, "Version not found"),
    (FallbackDisabled, "Component generation failed"),
    (
        StaleWrite,
        "This component was modified concurrently. Reload it and try again.",
    ),
)


def describe_error(error: Exception) -> str:
    """A short, user-facing message for ``error``.

    Only validation errors show their own message. Known failures map to a
    fixed text; anything else is logged and replaced by a generic message.
    """
    if isinstance(error, ValidationError):
        return str(error)
    for error_type, message in SAFE_MESSAGES:
        if isinstance(error, error_type):
            logger.info("%s: %s", type(error).__name__, error)
            return message
    logger.exception("Unexpected error", exc_info=error)
    return GENERIC_ERROR


def register_callbacks(app):
    @app.callback(
        [
            Output("selected_component", "data"),
            Output("status_alert", "children"),
            Output("status_alert", "color"),
            Output("status_alert", "is_open"),
            Output("prompt_textarea", "value"),
        ],
        [Input("create_button", "n_clicks"), Input("refine_button", "n_clicks")],
        [
            State("prompt_textarea", "value"),
            State("name_input", "value"),
            State("preset_dropdown", "value"),
            State("selected_component", "data"),
        ],
        prevent_initial_call=True,
    )
    def submit_prompt(create_clicks, refine_clicks, prompt, name, preset, selected):
        user_id = app.auth.get_current_user_id()
        try:
            if callback_context.triggered_id == "refine_button":
                if not selected:
                    return no_update, "Select a component to refine", "warning", True, no_update
                payload = app.service.update_component(
                    user_id, selected, prompt, preset=preset
                )
            else:
                payload = app.service.create_component(
                    user_id, prompt, name=name, preset=preset
                )
            return payload["id"], payload["message"], "success", True, ""
        except Exception as e:
            return no_update, describe_error(e), "danger", True, no_update

    @app.callback(
        [
            Output("selected_component", "data", allow_duplicate=True),
            Output("status_alert", "children", allow_duplicate=True),
            Output("status_alert", "color", allow_duplicate=True),
            Output("status_alert", "is_open", allow_duplicate=True),
        ],
        [Input({"type": "restore-version", "id": ALL}, "n_clicks")],
        [State("selected_component", "data")],
        prevent_initial_call=True,
    )
    def restore_version(n_clicks, selected):
        if not selected or not any(n_clicks):
            return no_update, no_update, no_update, no_update
        try:
            version_id = callback_context.triggered_id["id"]
            payload = app.service.restore_version(
                app.auth.get_current_user_id(), selected, version_id
            )
            return payload["id"], payload["message"], "success", True
        except Exception as e:
            return no_update, describe_error(e), "danger", True

    @app.callback(
        Output("selected_component", "data", allow_duplicate=True),
        [Input({"type": "component-item", "id": ALL}, "n_clicks")],
        prevent_initial_call=True,
    )
    def select_component(n_clicks):
        if not any(n_clicks):
            return no_update
        return callback_context.triggered_id["id"]

    @app.callback(
        [Output("component_title", "children")]
        + [Output(pane_id, "children") for pane_id, _, _ in CODE_PANES]
        + [Output("versions_list", "children"), Output("chat_log", "children")],
        [Input("selected_component", "data")],
    )
    def show_component(component_id):
        empty = ["Nothing selected"] + [""] * len(CODE_PANES) + [[], []]
        if not component_id:
            return empty
        user_id = app.auth.get_current_user_id()
        try:
            payload = app.service.get_component(user_id, component_id)
            versions = app.service.get_versions(user_id, component_id)["versions"]
            history = app.service.get_chat_history(user_id, component_id)
        except Exception as e:
            return [describe_error(e)] + empty[1:]

        return (
            [payload["name"]]
            + [payload[key] for _, _, key in CODE_PANES]
            + [
                app.layout_builder.build_versions(versions),
                app.layout_builder.build_chat(history),
            ]
        )

    @app.callback(
        Output("components_list", "children"),
        [Input("selected_component", "data")],
    )
    def update_component_list(selected):
        try:
            listing = app.service.list_components(
                app.auth.get_current_user_id(), limit=100
            )
        except Exception as e:
            describe_error(e)
            return []
        return app.layout_builder.build_component_list(listing["components"])
