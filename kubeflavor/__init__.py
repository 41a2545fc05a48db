# pylint: disable=missing-docstring
try:
    from importlib import metadata
    __version__ = metadata.version('kubeflavor')
except metadata.PackageNotFoundError:
    __version__ = '0.3.0'

# Defining some constants
SSL_PROPERTY_KEY = "SSL"
DEFAULT_SSL_DIR = "ssl"
DEFAULT_APISERVER_IP = "10.3.0.1"
APISERVER_CERT_BASE = "apiserver"
APISERVER_CN_PREFIX = "kube-apiserver"
ADMIN_CERT_BASE = "admin"
ADMIN_CN = "kube-admin"
