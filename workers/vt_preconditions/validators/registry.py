"""
Registry — the closed set of precondition validators run by default.

Order is the run order and the order results appear in the report.
"""
from __future__ import annotations

from typing import Tuple, Type

from vt_preconditions.validators.base import PreconditionValidator
from vt_preconditions.validators.no_return import NoReturnCountValidator

DEFAULT_VALIDATORS: Tuple[Type[PreconditionValidator], ...] = (
    NoReturnCountValidator,
)
