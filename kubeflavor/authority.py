"""
authority.py
============

Backends which keep the certificate authority of an SSL working
directory and issue credential bundles signed by it.

Both backends lay out the working directory the same way::

    <ssl-dir>/ca.pem
    <ssl-dir>/ca-key.pem
    <ssl-dir>/<common-name>.tar   # ca.pem, <base>.pem, <base>-key.pem

so a directory initialized by one of them can be used by the other.
"""
import os
import tarfile
import tempfile

from kubeflavor.errors import ConfigParseError, PreconditionViolation, ScriptFailure
from kubeflavor.provision.script import execute
from kubeflavor.ssl import CertBundle, parse_sans, write_cert, write_key
from kubeflavor.util.logger import Logger

LOGGER = Logger(__name__)

CA_CERT = "ca.pem"
CA_KEY = "ca-key.pem"


def bundle_path(directory, common_name):
    """the path of the credential bundle issued for common_name"""
    return os.path.join(directory, f"{common_name}.tar")


class CertificateAuthorityTool:
    """The operations the provisioner needs from a certificate authority.

    Implementations may shell out, use a library or call a remote
    service. They are not expected to be thread safe, the
    :class:`kubeflavor.provision.certs.CertificateProvisioner` serializes
    access to a working directory.
    """

    def init_authority(self, directory):
        """Make sure directory holds a CA. Must be idempotent."""
        raise NotImplementedError

    def issue_credential(self, directory, base_name, common_name, sans=""):
        """Issue a credential signed by the CA in directory.

        Args:
            directory (str): the SSL working directory
            base_name (str): the file base name inside the bundle
            common_name (str): the certificate's CN, also names the bundle
            sans (str): ``IP.1=a,IP.2=b,`` style alternative names

        Returns:
            the path of the bundle, see :func:`bundle_path`
        """
        raise NotImplementedError


class ScriptAuthority(CertificateAuthorityTool):
    """Uses the embedded ``init-ssl-ca`` and ``init-ssl`` scripts.

    Args:
        timeout (float): the timeout for each script run, None for no
            timeout.
    """

    def __init__(self, timeout=None):
        self.timeout = timeout

    def init_authority(self, directory):
        execute("init-ssl-ca", directory, timeout=self.timeout)

    def issue_credential(self, directory, base_name, common_name, sans=""):
        args = [directory, base_name, common_name]
        if sans:
            args.append(sans)

        execute("init-ssl", *args, timeout=self.timeout)

        path = bundle_path(directory, common_name)
        if not os.path.isfile(path):
            LOGGER.error("init-ssl did not write %s", path)
            raise ScriptFailure(f"failed generating {common_name} SSL "
                                f"artifacts: {path} is missing")
        return path


class BuiltinAuthority(CertificateAuthorityTool):
    """Issues certificates in process with ``cryptography``.

    Args:
        key_size (int): the RSA key size for the CA and all credentials.
    """

    def __init__(self, key_size=2048):
        self.key_size = key_size

    @staticmethod
    def load_ca(directory):
        """read the CA bundle of directory

        Raises:
            PreconditionViolation if the directory has no CA yet.
        """
        key, cert = (os.path.join(directory, CA_KEY),
                     os.path.join(directory, CA_CERT))
        if not (os.path.isfile(key) and os.path.isfile(cert)):
            raise PreconditionViolation(f"CA not found in {directory}, "
                                        "initialize the authority first")

        return CertBundle.read_bundle(key, cert)

    def init_authority(self, directory):
        key, cert = (os.path.join(directory, CA_KEY),
                     os.path.join(directory, CA_CERT))
        if os.path.isfile(key) and os.path.isfile(cert):
            LOGGER.debug("Reusing CA in %s", directory)
            return

        os.makedirs(directory, exist_ok=True)
        ca_bundle = CertBundle.create_ca(key_size=self.key_size)
        write_key(ca_bundle.key, filename=key)
        write_cert(ca_bundle.cert, cert)
        LOGGER.info("Created CA in %s", directory)

    def issue_credential(self, directory, base_name, common_name, sans=""):
        ca_bundle = self.load_ca(directory)

        try:
            hosts, ips = parse_sans(sans)
        except ValueError as exc:
            raise PreconditionViolation(str(exc)) from exc

        bundle = CertBundle.create_signed(ca_bundle, common_name, hosts, ips,
                                          key_size=self.key_size)
        path = bundle_path(directory, common_name)

        with tempfile.TemporaryDirectory(dir=directory) as tmp:
            bundle.save(base_name, tmp)
            write_cert(ca_bundle.cert, os.path.join(tmp, CA_CERT))

            tmp_tar = os.path.join(tmp, "bundle.tar")
            with tarfile.open(tmp_tar, "w") as tar:
                for name in (CA_CERT, base_name + ".pem",
                             base_name + "-key.pem"):
                    tar.add(os.path.join(tmp, name), arcname=name)

            os.replace(tmp_tar, path)

        LOGGER.debug("Wrote %s", path)
        return path


AUTHORITIES = {"script": ScriptAuthority,
               "builtin": BuiltinAuthority}


def get_authority(name, **kwargs):
    """create the authority backend called name

    Args:
        name (str): one of ``AUTHORITIES``
        kwargs: passed to the backend's constructor

    Raises:
        ConfigParseError if there is no such backend.
    """
    try:
        cls = AUTHORITIES[name]
    except (KeyError, TypeError):
        raise ConfigParseError(
            f"unknown authority '{name}', must be one of "
            f"{' | '.join(sorted(AUTHORITIES))}") from None

    return cls(**kwargs)
