"""
config.py
=========

The plugin configuration, a YAML file like::

    ssl-dir: /var/lib/kubeflavor/ssl
    authority: script
    script-timeout: 120
    apiserver-ip: 10.3.0.1

Every key is optional. ``KUBEFLAVOR_SSL_DIR`` in the environment
overrides ``ssl-dir``.
"""
import copy
import os

import yaml

from kubeflavor import DEFAULT_APISERVER_IP, DEFAULT_SSL_DIR
from kubeflavor.authority import AUTHORITIES
from kubeflavor.errors import ConfigParseError
from kubeflavor.util.net import is_ip

SSL_DIR_ENV = "KUBEFLAVOR_SSL_DIR"

DEFAULTS = {
    "ssl-dir": DEFAULT_SSL_DIR,
    "authority": "script",
    "script-timeout": 120,
    "apiserver-ip": DEFAULT_APISERVER_IP,
}


def validate_config(config):
    """Checks a configuration dict, raises ConfigParseError if invalid"""

    unknown = set(config) - set(DEFAULTS)
    if unknown:
        raise ConfigParseError(
            f"unknown configuration keys: {', '.join(sorted(unknown))}")

    if not isinstance(config["ssl-dir"], str) or not config["ssl-dir"]:
        raise ConfigParseError("ssl-dir must be a non empty string")

    if config["authority"] not in AUTHORITIES:
        raise ConfigParseError(
            f"authority must be one of {' | '.join(sorted(AUTHORITIES))}")

    timeout = config["script-timeout"]
    if timeout is not None and (isinstance(timeout, bool) or
                                not isinstance(timeout, (int, float)) or
                                timeout <= 0):
        raise ConfigParseError("script-timeout must be a positive number "
                               "or null")

    if not is_ip(config["apiserver-ip"]):
        raise ConfigParseError(
            f"invalid apiserver-ip: {config['apiserver-ip']!r}")


def load_config(path=None, environ=None):
    """Return the configuration, defaults updated with the file at path.

    Args:
        path (str): a YAML file. Without one only the defaults and the
            environment apply.
        environ (dict): the environment, ``os.environ`` if None.

    Raises:
        ConfigParseError if the file is malformed.
    """
    config = copy.deepcopy(DEFAULTS)

    if path:
        with open(path, 'r') as stream:
            try:
                data = yaml.safe_load(stream)
            except yaml.YAMLError as exc:
                raise ConfigParseError(
                    f"unable to parse {path}: {exc}") from exc

        if data is not None and not isinstance(data, dict):
            raise ConfigParseError(f"{path} must contain a mapping")
        config.update(data or {})

    environ = os.environ if environ is None else environ
    if environ.get(SSL_DIR_ENV):
        config["ssl-dir"] = environ[SSL_DIR_ENV]

    validate_config(config)
    return config
