"""
Activate a predicate from an environment variable.

Lives outside ``core``: the builder itself never reads the environment.
A non-empty variable supplies the value; an empty or unset variable
means "no value" (or the given default).
"""
from __future__ import annotations

import logging
import os
from typing import Callable, Mapping, Optional, Union

from build_cfg.core.errors import ValueNotAllowed
from build_cfg.core.predicate import Activated, Constrained, Declared

logger = logging.getLogger(__name__)

Default = Union[None, str, Callable[[], Optional[str]]]


def read_env_value(
    variable: str,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Return the variable's value, or None when it is unset or empty."""
    if environ is None:
        environ = os.environ
    value = environ.get(variable)
    if not value:
        return None
    return value


def activate_from_env(
    builder: Union[Declared, Constrained],
    variable: str,
    default: Default = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Activated:
    """
    Activate *builder* with the value of *variable*.

    *default* (a string, or a zero-argument callable evaluated only when
    needed) is used when the variable is unset or empty.  A Declared
    builder is a boolean flag: any value is rejected with
    ``ValueNotAllowed``.
    """
    value = read_env_value(variable, environ)
    if value is None:
        value = default() if callable(default) else default
        logger.debug("%s unset; using default %r for %s", variable, value, builder.name)
    else:
        logger.debug("Read %s=%r for %s", variable, value, builder.name)

    if isinstance(builder, Declared):
        if value is not None:
            raise ValueNotAllowed(builder.name, value, ())
        return builder.set()
    return builder.set(value)
