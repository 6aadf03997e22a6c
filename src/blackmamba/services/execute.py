"""ExecuteService — single commands and sequential batches."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from blackmamba.domain.errors import BlackMambaError
from blackmamba.services._helpers import to_jsonable
from blackmamba.services.base import BaseService
from blackmamba.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


class BatchItem(BaseModel):
    """One ``{pkg, cmd, data}`` entry of a batch file."""

    model_config = {"frozen": True, "extra": "forbid"}

    pkg: str
    cmd: str
    data: Any = None


class ExecuteService(BaseService):
    """Runs commands on runtime modules."""

    async def execute(
        self,
        app: str,
        cmd: str,
        data: Any = None,
        *,
        fallback: bool = False,
    ) -> ServiceResult:
        """Execute *cmd* on *app*, optionally with default-app fallback."""
        op = "execute"
        already_built = self._runtime.has_module(app)
        try:
            if fallback:
                value = await self._runtime.execute_with_fallback(app, cmd, data)
            else:
                value = await self._runtime.execute(app, cmd, data)
        except BlackMambaError as exc:
            return ServiceResult.failure(op, exc)

        warnings: list[str] = []
        used_fallback = fallback and not already_built and self._runtime.has_not_module(app)
        if used_fallback:
            warnings.append(f"App {app!r} could not be registered; used the default app instead")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "app": app,
                "cmd": cmd,
                "fallback": used_fallback,
                "result": to_jsonable(value),
            },
            warnings=warnings,
        )

    async def run(self, items: list[Any]) -> ServiceResult:
        """Execute batch *items* in order, stopping at the first failure.

        Mirrors :meth:`BlackMamba.run` but reports which entry failed.
        """
        op = "run"
        try:
            batch = [BatchItem.model_validate(item) for item in items]
        except PydanticValidationError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code="INVALID_BATCH", message=str(exc)),
            )

        steps: list[dict[str, Any]] = []
        for index, item in enumerate(batch):
            try:
                value = await self._runtime.execute(item.pkg, item.cmd, item.data)
            except BlackMambaError as exc:
                logger.debug("Batch stopped at entry %d (%s)", index, item.pkg)
                return ServiceResult.failure(op, exc, index=index, completed=len(steps))
            steps.append(
                {"index": index, "pkg": item.pkg, "cmd": item.cmd, "result": to_jsonable(value)}
            )

        return ServiceResult(ok=True, op=op, data={"count": len(steps), "items": steps})
