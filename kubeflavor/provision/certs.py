"""
certs.py
========

Orchestrates the certificate authority of an SSL working directory.

Issuing a node certificate takes three separate calls to the authority:
CA initialization, the admin credential and the node credential. The
first two touch state shared by every node of the directory and run
under a per-directory lock. Node credentials are issued outside of it,
both backends replace the bundle file atomically.
"""
import os
import threading

from kubeflavor import ADMIN_CERT_BASE, ADMIN_CN
from kubeflavor.errors import PreconditionViolation
from kubeflavor.util.logger import Logger
from kubeflavor.util.net import is_ip

LOGGER = Logger(__name__)

_REGISTRY_LOCK = threading.Lock()
_LOCKS = {}


def _lock_for(path):
    with _REGISTRY_LOCK:
        return _LOCKS.setdefault(path, threading.RLock())


def directory_lock(path):
    """Return the lock guarding the CA of the working directory path.

    The same lock is returned for every spelling of the same directory.
    """
    return _lock_for(os.path.realpath(path))


def san_string(ips):
    """format ips as openssl alt_names

    Example:
        >>> san_string(["10.0.0.5", "10.3.0.1"])
        'IP.1=10.0.0.5,IP.2=10.3.0.1,'

    Raises:
        PreconditionViolation if an entry is not an IP address.
    """
    sans = ""
    for idx, ip in enumerate(ips, 1):
        if not is_ip(ip):
            raise PreconditionViolation(
                f"invalid IP address for subject alternative name: {ip!r}")
        sans += f"IP.{idx}={ip},"

    return sans


class CertificateProvisioner:
    """Issue node certificates from the CA in ssl_dir.

    Example:
        >>> prov = CertificateProvisioner("ssl", ScriptAuthority())
        >>> prov.provision("apiserver", "kube-apiserver-10.0.0.5",
        ...                ["10.0.0.5", "10.3.0.1"])
        'ssl/kube-apiserver-10.0.0.5.tar'

    Args:
        ssl_dir (str): the SSL working directory
        authority (:class:`kubeflavor.authority.CertificateAuthorityTool`):
            the backend doing the actual work
    """

    def __init__(self, ssl_dir, authority):
        self.ssl_dir = ssl_dir
        self.authority = authority

    @property
    def lock(self):
        """the lock of the working directory"""
        return directory_lock(self.ssl_dir)

    def init_authority(self):
        """create the CA of the working directory, unless it exists"""
        with self.lock:
            os.makedirs(self.ssl_dir, exist_ok=True)
            LOGGER.debug("Initializing CA in %s", self.ssl_dir)
            self.authority.init_authority(self.ssl_dir)

    def issue_admin(self):
        """issue the admin credential, every call issues a fresh one"""
        with self.lock:
            LOGGER.debug("Issuing %s credential", ADMIN_CN)
            return self.authority.issue_credential(self.ssl_dir,
                                                   ADMIN_CERT_BASE, ADMIN_CN)

    def provision_node_certificate(self, cert_base_name, common_name, ips):
        """issue a credential for common_name valid for the addresses ips

        The CA must already exist, see :meth:`init_authority`.

        Returns:
            the bundle path
        """
        if not common_name:
            raise PreconditionViolation("a certificate needs a common name")

        sans = san_string(ips)
        LOGGER.debug("Issuing %s credential with %s", common_name, sans)
        path = self.authority.issue_credential(self.ssl_dir, cert_base_name,
                                               common_name, sans)

        LOGGER.success("Issued SSL bundle %s", path)
        return path

    def provision(self, cert_base_name, common_name, ips):
        """initialize the CA, issue the admin and the node credential

        Returns:
            the node's bundle path
        """
        self.init_authority()
        self.issue_admin()
        return self.provision_node_certificate(cert_base_name, common_name,
                                               ips)
