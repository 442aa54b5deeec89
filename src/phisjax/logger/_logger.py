# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


import atexit as _atexit
import sys
from functools import partial
from typing import Literal

import jax
import numpy as np
from loguru._logger import Core as _Core, Logger as _Logger


DEBUG: bool = False


class Logger(_Logger):
    def _emit(__self, __level, __options, __message, args, kwargs):  # noqa: N805
        if DEBUG:
            jax.debug.callback(
                partial(__self._log, __level, False, __options, __message),
                args=args,
                kwargs=kwargs,
            )

    def _log_when(__self, __level, __options, __message, condition, args, kwargs):  # noqa: N805
        if np.any(condition):
            __self._log(__level, False, __options, __message, args, kwargs)

    def trace(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``'TRACE'``."""
        __self._emit("TRACE", __self._options, __message, args, kwargs)

    def debug(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``'DEBUG'``."""
        __self._emit("DEBUG", __self._options, __message, args, kwargs)

    def info(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``'INFO'``."""
        __self._emit("INFO", __self._options, __message, args, kwargs)

    def success(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``'SUCCESS'``."""
        __self._emit("SUCCESS", __self._options, __message, args, kwargs)

    def warning(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``'WARNING'``."""
        __self._emit("WARNING", __self._options, __message, args, kwargs)

    def error(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``'ERROR'``."""
        __self._emit("ERROR", __self._options, __message, args, kwargs)

    def critical(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``'CRITICAL'``."""
        __self._emit("CRITICAL", __self._options, __message, args, kwargs)

    def exception(__self, __message, *args, **kwargs):  # noqa: N805
        r"""Log an ``'ERROR'`` message while also capturing the currently handled
        exception.
        """
        options = (True,) + __self._options[1:]
        __self._emit("ERROR", options, __message, args, kwargs)

    def log(__self, __level, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``level``."""
        __self._emit(__level, __self._options, __message, args, kwargs)

    def log_if(__self, __condition, __level, __message, *args, **kwargs):  # noqa: N805
        r"""Log ``message.format(*args, **kwargs)`` with severity ``level`` if any
        element of ``condition`` is true.

        The condition is checked on the host, so it may be a traced array. Unlike a
        :func:`jax.lax.cond` around :meth:`log`, this stays silent under
        :func:`jax.vmap` when the condition is false for every batch element.
        """
        if DEBUG:
            jax.debug.callback(
                partial(__self._log_when, __level, __self._options, __message),
                __condition,
                args=args,
                kwargs=kwargs,
            )


logger = Logger(
    core=_Core(),
    exception=None,
    depth=0,
    record=False,
    lazy=False,
    colors=False,
    raw=False,
    capture=True,
    patchers=[],
    extra={},
)


_atexit.register(logger.remove)


def enable_logging(
    log_level: Literal[
        "TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"
    ] = "TRACE",
) -> None:
    """Enable logging with the specified log level.

    Logging is silent until this is called. The sink writes to standard output.

    Parameters
    ----------
    log_level : Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"], optional
        The log level to use, by default "TRACE"
    """
    logger.remove()
    logger.add(
        sys.stdout,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<level>{message}</level>",
    )
    global DEBUG
    DEBUG = True
