"""BaseService — foundation for all scopectl services.

Every service receives a :class:`Workspace` at construction time. The
workspace answers metadata and change queries through its plugins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scopectl.infrastructure.workspace import Workspace


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ImpactService(BaseService):
            def affected(self, ...) -> ServiceResult:
                packages = self._workspace.list_packages()
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace
