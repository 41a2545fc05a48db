"""Logging for kubeflavor.

All modules log through :class:`Logger`, a proxy around a
:class:`logging.Logger` writing plain messages to STDOUT, with the level
prefixes colored by ``huepy``.
"""

import logging
import sys
import time

# pylint: disable=no-name-in-module
from huepy import bad, red, info as infomsg, yellow, run, grey, good, green

LOG_LEVELS = list(range(5))
DEFAULT_LOG_LEVEL = 3

# kubeflavor verbosity -> python logging level, 0 disables the logger
PYTHON_LEVELS = {1: logging.ERROR,
                 2: logging.WARNING,
                 3: logging.INFO,
                 4: logging.DEBUG}

LEVEL_NAMES = {'quiet': 0,
               'error': 1,
               'warning': 2,
               'info': 3,
               'debug': 4}


def get_logger(name):
    """Returns a Python logger with a single STDOUT handler.

    Calling this more than once with the same name does not add another
    handler.

    Args:
        name (str): The name of the Logger.

    Returns:
        A Python Logger.
    """
    log = logging.getLogger(name)
    set_level(log, Logger.LOG_LEVEL)

    if not log.handlers:
        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(logging.Formatter("%(message)s"))
        log.addHandler(sh)

    return log


def set_level(logger, level):
    """Sets the logging level of a Python logger.

    Args:
        logger: A Python logger object.
        level (int): The kubeflavor verbosity, one of ``LOG_LEVELS``.

    Raises:
        ValueError if log level is unsupported.
    """
    if level not in LOG_LEVELS:
        raise ValueError(f"log level {level} is not supported")

    if level == 0:
        logger.disabled = True
        return

    logger.disabled = False
    logger.setLevel(PYTHON_LEVELS[level])


class Singleton(type):
    """Metaclass returning the same instance for every instantiation.

    Instantiating again re-runs ``__init__`` on the existing instance, so
    ``Logger(__name__)`` in every module ends up sharing one object and
    one verbosity.
    """
    _instances = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super(Singleton, cls).__call__(*args, **kwargs)
        else:
            cls._instances[cls].__init__(*args, **kwargs)

        return cls._instances[cls]


class Logger(metaclass=Singleton):
    """Singleton proxy for a :class:`logging.Logger`.

    Set ``Logger.LOG_LEVEL`` before creating the first instance, or set
    :attr:`level` on an instance afterwards. The levels are:

    .. code:: shell

        * 0 - quiet (no output)
        * 1 - error
        * 2 - warning
        * 3 - info
        * 4 - debug

    All methods accept ``%``-style arguments and a ``color`` keyword.

    Example:
        >>> log = Logger(__name__)
        >>> log.info("issuing %s", "kube-admin")
        [~] issuing kube-admin

    Attributes:
        LOG_LEVEL (int): The log level to be used across the application.
    """

    LOG_LEVEL = DEFAULT_LOG_LEVEL

    def __init__(self, name):
        self.logger = get_logger(name)

    @property
    def level(self):
        """Returns the Python log level equivalent, 0 if quiet."""
        if not self.logger:
            return None

        if self.logger.disabled:
            return 0

        return self.logger.level

    @level.setter
    def level(self, level):
        try:
            level = LEVEL_NAMES[level]
        except KeyError:
            level = int(level)

        set_level(self.logger, level)
        Logger.LOG_LEVEL = level

    def error(self, msg, *args, color=True, **kwargs):
        """Logs a message on error level, prefixed with ``[-]``."""
        if color:
            msg = bad(red(msg))

        self.logger.error(msg, *args, **kwargs)

    def warning(self, msg, *args, color=True, **kwargs):
        """Logs a message on warning level, prefixed with ``[!]``."""
        if color:
            msg = infomsg(yellow(msg))

        self.logger.warning(msg, *args, **kwargs)

    def warn(self, msg, *args, color=True, **kwargs):
        """Alias of :meth:`.Logger.warning`."""
        self.warning(msg, *args, **kwargs, color=color)

    def info(self, msg, *args, color=True, **kwargs):
        """Logs a message on info level, prefixed with ``[~]``."""
        if color:
            msg = run(grey(msg))

        self.logger.info(msg, *args, **kwargs)

    def debug(self, msg, *args, color=True, **kwargs):
        """Logs a message on debug level.

        With color the message is grey and prefixed by a timestamp, e.g.
        ``[20190426-155611] running init-ssl``.
        """
        if color:
            now = time.strftime("%Y%m%d-%H%M%S")
            msg = grey(f"[{now}] {msg}")

        self.logger.debug(msg, *args, **kwargs)

    def success(self, msg, *args, color=True, **kwargs):
        """Logs a success on info level, prefixed with ``[+]``."""
        if color:
            msg = good(green(msg))

        self.logger.info(msg, *args, **kwargs)
