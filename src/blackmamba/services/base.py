"""BaseService — foundation for all blackmamba services.

Every service receives a :class:`BlackMamba` runtime at construction time
and reports through :class:`ServiceResult`; runtime exceptions never
escape a service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blackmamba.runtime.engine import BlackMamba


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ExecuteService(BaseService):
            async def execute(self, app: str, cmd: str) -> ServiceResult:
                value = await self._runtime.execute(app, cmd)
                ...
    """

    def __init__(self, runtime: BlackMamba) -> None:
        self._runtime = runtime
