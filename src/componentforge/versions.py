"""Append-only version history attached to a component."""

import logging

from .errors import VersionNotFound
from .models import CodeBundle, Component, VersionSnapshot, utcnow

logger = logging.getLogger(__name__)


def snapshot(component: Component) -> VersionSnapshot:
    """Captures the component's live bundle. Does not modify the component."""
    bundle = component.bundle
    return VersionSnapshot(
        component_name=bundle.component_name,
        jsx_code=bundle.jsx_code,
        css_code=bundle.css_code,
        test_code=bundle.test_code,
        storybook_code=bundle.storybook_code,
        created_at=utcnow(),
    )


def append(component: Component, version: VersionSnapshot) -> None:
    component.versions.append(version)


def find(component: Component, version_id: str) -> VersionSnapshot:
    for version in component.versions:
        if version.id == version_id:
            return version
    raise VersionNotFound(
        f"Version {version_id!r} not found for component {component.id!r}"
    )


def restore(component: Component, version_id: str) -> CodeBundle:
    """Returns the bundle stored under ``version_id``.

    The component is left untouched. Callers overwrite the live bundle with
    :func:`apply`, which keeps the current bundle in the history first.

    Raises
    ------
    VersionNotFound
        If the component has no version with that id.
    """
    return find(component, version_id).to_bundle()


def apply(component: Component, bundle: CodeBundle) -> VersionSnapshot:
    """Moves the live bundle into the history, then installs ``bundle``."""
    previous = snapshot(component)
    append(component, previous)
    component.bundle = bundle.model_copy()
    logger.debug(
        "Component %s now has %d version(s)", component.id, len(component.versions)
    )
    return previous
