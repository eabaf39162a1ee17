"""Tagged success/failure values returned by the service layer.

Routes branch on ``result.ok`` and unwrap either ``value`` or ``error``;
services never hand back half-populated dicts.
"""
from dataclasses import dataclass
from typing import Any, ClassVar

from mealhub.utils.exceptions import ServiceError


@dataclass(frozen=True)
class Ok:
    value: Any = None
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err:
    error: ServiceError
    ok: ClassVar[bool] = False

    @property
    def message(self):
        return self.error.message
