"""Authorization checks via ``kubectl auth can-i``."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from kubelens.controllers.base import KubectlCommandError, KubectlRunner
from kubelens.controllers.errors import AuthorizationCheckError

logger = logging.getLogger(__name__)


class Authorizer(Protocol):
    """Answers whether the current user may perform verbs on a resource."""

    async def is_authorized(self, resource: str, verbs: Sequence[str]) -> bool: ...


class KubectlAuthorizer:
    """Authorizer that asks the API server through ``kubectl auth can-i``.

    kubectl prints "yes" and exits 0 when allowed, prints "no" and exits 1
    when denied. Anything else is a failed check, not a denial.
    """

    def __init__(self, run_kubectl_func: KubectlRunner) -> None:
        self._run_kubectl = run_kubectl_func

    async def _can_i(self, verb: str, resource: str) -> bool:
        try:
            output = await self._run_kubectl(("auth", "can-i", verb, resource))
        except KubectlCommandError as exc:
            if exc.returncode == 1 and exc.stdout.strip().lower().startswith("no"):
                return False
            raise AuthorizationCheckError(
                f"failed to check {verb} {resource}: {exc}"
            ) from exc
        except Exception as exc:
            raise AuthorizationCheckError(
                f"failed to check {verb} {resource}: {exc}"
            ) from exc
        return output.strip().lower().startswith("yes")

    async def is_authorized(self, resource: str, verbs: Sequence[str]) -> bool:
        for verb in verbs:
            if not await self._can_i(verb, resource):
                logger.debug("Not authorized: %s %s", verb, resource)
                return False
        return True
