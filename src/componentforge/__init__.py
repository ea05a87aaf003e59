"""
The main entrypoint for the Componentforge package.

This module contains the ComponentForge Dash application, which wires the
pluggable pillars (layout, llm, store, auth) around the generation engine.
"""

from typing import Optional

from dash import Dash

from . import auth, llm, store
from .config import Settings
from .generator import Generator
from .layout import REQUIRED_IDS
from .service import ComponentService

__version__ = "0.1.0"


class ComponentForge(Dash):
    """
    A Dash app that generates UI components from prompts and keeps their history.

    Every pillar can be injected; the defaults are built from
    :meth:`Settings.from_env`, so the app starts with no arguments.
    """

    def __init__(
        self,
        layout: Optional["layout.Layout"] = None,
        llm: Optional[llm.LLM] = None,
        store: Optional[store.Store] = None,
        auth: Optional[auth.Auth] = None,
        generator: Optional[Generator] = None,
        settings: Optional[Settings] = None,
        **kwargs,
    ) -> None:
        """
        Initialize the application with configurable pillars.

        Parameters
        ----------
        layout : layout.Layout, optional
            Layout builder. Defaults to layout.Bootstrap().
        llm : llm.LLM, optional
            Model provider. Defaults to llm.OpenRouter when an API key is
            configured and to llm.Offline otherwise.
        store : store.Store, optional
            Component persistence. Defaults to store.InMemory().
        auth : auth.Auth, optional
            Identifies the current user. Defaults to auth.SingleUser().
        generator : Generator, optional
            Generation orchestrator. Defaults to one built from ``settings``
            and ``llm``.
        settings : Settings, optional
            Runtime configuration. Defaults to Settings.from_env().
        **kwargs
            Additional arguments passed to the Dash constructor.

        Raises
        ------
        ValueError
            If the layout is missing component IDs the callbacks need.

        Examples
        --------
        >>> app = ComponentForge()

        >>> app = ComponentForge(
        ...     settings=Settings(api_key="sk-...", environment="production"),
        ...     store=store.File("./components"),
        ... )
        """
        from .layout import Bootstrap

        self.layout_builder = layout if layout is not None else Bootstrap()

        llm_module = globals()["llm"]
        store_module = globals()["store"]
        auth_module = globals()["auth"]

        if "external_stylesheets" not in kwargs:
            kwargs["external_stylesheets"] = []
        kwargs["external_stylesheets"].extend(
            self.layout_builder.get_external_stylesheets()
        )
        super().__init__(**kwargs)

        self.settings = settings if settings is not None else Settings.from_env()
        self.llm = llm if llm is not None else llm_module.from_settings(self.settings)
        self.store = store if store is not None else store_module.InMemory()
        self.auth = auth if auth is not None else auth_module.SingleUser()
        self.generator = (
            generator
            if generator is not None
            else Generator.from_settings(self.settings, self.llm)
        )
        self.service = ComponentService(self.generator, self.store)

        self.layout = self.layout_builder.build_layout()
        self._validate_layout()
        self._register_callbacks()

    def _validate_layout(self) -> None:
        found = set()
        stack = [self.layout]
        while stack:
            node = stack.pop()
            if isinstance(node, (list, tuple)):
                stack.extend(node)
                continue
            node_id = getattr(node, "id", None)
            if isinstance(node_id, str):
                found.add(node_id)
            children = getattr(node, "children", None)
            if children is not None and not isinstance(children, str):
                stack.append(children)
        missing = [i for i in REQUIRED_IDS if i not in found]
        if missing:
            raise ValueError(f"Layout is missing required component IDs: {missing}")

    def _register_callbacks(self) -> None:
        """Registers all the callbacks that orchestrate the pillars."""
        from .callbacks import register_callbacks

        register_callbacks(self)


__all__ = ["ComponentForge", "ComponentService", "Generator", "Settings"]
