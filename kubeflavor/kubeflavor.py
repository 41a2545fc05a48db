"""
kubeflavor
==========

Command line access to the Kubernetes flavor plugin, to check flavor
configurations and prepare instances without an orchestrator.
Don't use it directly, instead install the package with setup.py.
It automatically creates an executable in your path.
"""
import argparse
import sys

from mach import mach1

from . import __version__
from .cli import init_ca, prepare_files, validate_file
from .errors import KubeFlavorError
from .util.logger import Logger, LEVEL_NAMES

LOGGER = Logger(__name__)


def _run(func, *args, **kwargs):
    """call func, log errors and exit non-zero on failure"""
    try:
        return func(*args, **kwargs)
    except (KubeFlavorError, OSError) as err:
        LOGGER.error(f"Error: {err}")
        sys.exit(1)


@mach1()
class KubeFlavor:  # pylint: disable=no-self-use
    """
    The main entry point for the program. This class does the CLI parsing
    and decides which action should be taken
    """
    def __init__(self):
        self.parser.add_argument(  # pylint: disable=no-member
            "--version", action="store_true",
            help="show version and exit",
            default=argparse.SUPPRESS)

        verbosity_help = "".join([
            "set the verbosity level (",
            "0 = quiet, ",
            "1 = error, ",
            "2 = warning, ",
            "3 = info, ",
            "4 = debug)"])
        self.parser.add_argument("--verbosity",  # pylint: disable=no-member
                                 "-v",
                                 help=verbosity_help,
                                 choices=['0', '1', '2', '3', '4', 'quiet',
                                          'error', 'warning', 'info', 'debug'],
                                 type=str,
                                 default=3)

    def _get_version(self):
        print("%s version: %s" % (self.__class__.__name__, __version__))

    def validate(self, flavor: str):
        """
        Check a flavor configuration

        flavor - JSON file with the flavor properties
        """
        _run(validate_file, flavor)

    def prepare(self, flavor: str, instance: str, config: str = None,
                output: str = None):
        """
        Prepare an instance spec and issue its TLS bundle

        flavor - JSON file with the flavor properties
        instance - JSON file with the instance spec
        config - the plugin configuration file
        output - write the prepared instance spec to this file
        """
        prepared = _run(prepare_files, flavor, instance, config=config,
                        output=output)
        if not output:
            print(prepared)

    def init_ca(self, config: str = None):
        """
        Create the certificate authority and the admin credential

        config - the plugin configuration file
        """
        _run(init_ca, config)


def main():
    """
    run and execute kubeflavor
    """
    k = KubeFlavor()

    # Setting verbosity level
    level = k.parser.parse_args().verbosity  # pylint: disable=no-member
    try:
        LOGGER.level = int(level)
    except ValueError:
        LOGGER.level = LEVEL_NAMES[level]

    # mach builds the sub commands from the methods of KubeFlavor and
    # adds the method run to the class.
    k.run()  # pylint: disable=no-member
