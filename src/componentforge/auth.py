"""
Ownership of components.

Every component belongs to exactly one user id. Stores partition records by
that id and the service never reads across partitions, so the Auth pillar
decides whose components a request can see, refine or restore.
"""

from abc import ABC, abstractmethod


class Auth(ABC):
    """Resolves the owner id used to partition the component store."""

    @abstractmethod
    def get_current_user_id(self, **kwargs) -> str:
        """Returns the owner id for the current request.

        The id is used as a store key (and as a directory name by
        :class:`~componentforge.store.File`), so it should be a short
        alphanumeric token.
        """
        pass


class SingleUser(Auth):
    """A local, single-owner workspace: every request owns every component.

    Parameters
    ----------
    user_id : str, default="local"
        The owner recorded on each component.
    """

    def __init__(self, user_id: str = "local"):
        self._user_id = str(user_id)

    def get_current_user_id(self, **kwargs) -> str:
        return self._user_id
