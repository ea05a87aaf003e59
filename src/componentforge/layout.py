"""Layout builders for the Componentforge UI."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

import dash_bootstrap_components as dbc
from dash import dcc, html
from dash.development.base_component import Component as DashComponent

from .models import USER_ROLE, ChatEntry, Preset

# IDs the callbacks read from or write to.
REQUIRED_IDS = (
    "prompt_textarea",
    "name_input",
    "preset_dropdown",
    "create_button",
    "refine_button",
    "status_alert",
    "selected_component",
    "components_list",
    "component_title",
    "jsx_code",
    "css_code",
    "test_code",
    "storybook_code",
    "versions_list",
    "chat_log",
)

CODE_PANES = (
    ("jsx_code", "JSX", "jsxCode"),
    ("css_code", "CSS", "cssCode"),
    ("test_code", "Tests", "testCode"),
    ("storybook_code", "Story", "storybookCode"),
)


class Layout(ABC):
    """Interface for building the Dash component layout."""

    @abstractmethod
    def build_layout(self) -> DashComponent:
        """Constructs and returns the entire Dash component tree for the UI."""
        pass

    @abstractmethod
    def build_component_list(self, components: List[Dict[str, Any]]) -> List[DashComponent]:
        """Renders the sidebar entries for component payloads."""
        pass

    @abstractmethod
    def build_versions(self, versions: List[Dict[str, Any]]) -> List[DashComponent]:
        """Renders stored versions, newest first, each with a restore button."""
        pass

    def build_chat(self, history: List[ChatEntry]) -> List[DashComponent]:
        return [
            html.Div(
                entry.content,
                className="text-end" if entry.role == USER_ROLE else "text-muted",
            )
            for entry in history
        ]

    def get_external_stylesheets(self) -> List[str]:
        return []


class Bootstrap(Layout):
    """The default layout, built with dash-bootstrap-components."""

    def get_external_stylesheets(self) -> List[str]:
        return [dbc.themes.BOOTSTRAP]

    def build_layout(self) -> DashComponent:
        """Constructs the main layout Div."""
        return html.Div(
            className="d-flex flex-column vh-100",
            children=[
                dcc.Store(id="selected_component", data=None),
                self.build_header(),
                html.Div(
                    className="d-flex flex-grow-1",
                    style={"overflow": "hidden"},
                    children=[
                        self.build_sidebar(),
                        self.build_workspace(),
                    ],
                ),
                self.build_input_area(),
            ],
        )

    def build_header(self) -> DashComponent:
        return html.Header(
            className="p-2 bg-light border-bottom",
            children=[html.H4("Componentforge", className="m-0")],
        )

    def build_sidebar(self) -> DashComponent:
        return html.Aside(
            className="p-3 border-end",
            style={"width": "260px", "overflowY": "auto"},
            children=[
                html.H6("Components"),
                dbc.ListGroup(id="components_list", children=[]),
                html.H6("Versions", className="mt-4"),
                dbc.ListGroup(id="versions_list", children=[]),
            ],
        )

    def build_workspace(self) -> DashComponent:
        """The code tabs and the prompt log for the selected component."""
        tabs = [
            dbc.Tab(
                html.Pre(id=pane_id, className="p-2 bg-light"),
                label=label,
                tab_id=pane_id,
            )
            for pane_id, label, _ in CODE_PANES
        ]
        return html.Main(
            className="flex-grow-1 p-3",
            style={"overflowY": "auto"},
            children=[
                dbc.Alert(id="status_alert", is_open=False, dismissable=True),
                html.H5(id="component_title"),
                dbc.Tabs(tabs, active_tab="jsx_code"),
                html.Div(id="chat_log", className="mt-3 small"),
            ],
        )

    def build_input_area(self) -> DashComponent:
        return html.Footer(
            className="p-3 bg-light border-top",
            children=[
                dbc.Row(
                    className="g-2 mb-2",
                    children=[
                        dbc.Col(
                            dbc.Input(id="name_input", placeholder="Name (optional)")
                        ),
                        dbc.Col(
                            dcc.Dropdown(
                                id="preset_dropdown",
                                options=[p.value for p in Preset],
                                value=Preset.REACT.value,
                                clearable=False,
                            ),
                            width=3,
                        ),
                    ],
                ),
                dbc.InputGroup(
                    [
                        dbc.Textarea(
                            id="prompt_textarea",
                            placeholder="Describe a component, or how to change it...",
                        ),
                        dbc.Button("Create", id="create_button", color="primary"),
                        dbc.Button("Refine", id="refine_button", color="secondary"),
                    ]
                ),
            ],
        )

    def build_component_list(self, components: List[Dict[str, Any]]) -> List[DashComponent]:
        return [
            dbc.ListGroupItem(
                f"{c['name']} ({c['presetType']}, v{c['versions'] + 1})",
                id={"type": "component-item", "id": c["id"]},
                n_clicks=0,
                action=True,
            )
            for c in components
        ]

    def build_versions(self, versions: List[Dict[str, Any]]) -> List[DashComponent]:
        items = []
        for number, version in reversed(list(enumerate(versions, start=1))):
            items.append(
                dbc.ListGroupItem(
                    [
                        html.Span(f"v{number} - {version['createdAt'][:19]}"),
                        dbc.Button(
                            "Restore",
                            id={"type": "restore-version", "id": version["id"]},
                            n_clicks=0,
                            size="sm",
                            className="ms-2",
                        ),
                    ]
                )
            )
        return items
