"""
ssl.py holds the certificate helpers used by the builtin authority
"""
# pylint: disable=too-many-arguments

import datetime
import ipaddress
import os

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography import x509
from cryptography.x509.oid import NameOID, ExtendedKeyUsageOID
from cryptography.hazmat.primitives import hashes

from kubeflavor.util.logger import Logger
from kubeflavor.util.net import is_ip

LOGGER = Logger(__name__)

CA_KEY_USAGE = [True, False, True, False, False, True, False, False, False]
CERT_KEY_USAGE = [True, False, True, False, False, False, False, False, False]


def create_key(size=2048, public_exponent=65537):
    """Create an RSA private key

    Args:
        size (int) - the key bit size
        public_exponent (int) - the key public_exponent

    Return:
        rsa key object instance
    """
    key = rsa.generate_private_key(
        public_exponent=public_exponent,
        key_size=size,
        backend=default_backend()
    )
    return key


def _validity(builder):
    return builder.not_valid_before(
        # hosts joining the cluster may run slightly behind the
        # provisioning host
        datetime.datetime.utcnow() + datetime.timedelta(minutes=-10)
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_after(
        datetime.datetime.utcnow() + datetime.timedelta(days=1800))


def create_ca(private_key, name="kube-ca", key_usage=None):
    """
    create a self signed CA

    Args:
        private_key (inst): private key instance to sign the CA
        name (str): the common name of the CA
        key_usage (list): Key Usage parameters. Indices stand for:
            [digital_signature, content_commitment, key_encipherment,
            data_encipherment, key_agreement, key_cert_sign, crl_sign,
            encipher_only, decipher_only]

    Return:
        ssl certificate object
    """
    public_key = private_key.public_key()
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, name),
    ])

    cert = _validity(x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        public_key
    ))

    cert = cert.add_extension(
        x509.KeyUsage(*(key_usage or CA_KEY_USAGE)),
        critical=True)

    cert = cert.add_extension(x509.BasicConstraints(True, None), critical=True)
    cert = cert.add_extension(
        x509.SubjectKeyIdentifier.from_public_key(public_key),
        critical=False)

    cert = cert.add_extension(
        x509.AuthorityKeyIdentifier.from_issuer_public_key(public_key),
        critical=False)

    return cert.sign(private_key, hashes.SHA256(), default_backend())


def create_certificate(ca_bundle, public_key, name, hosts=None, ips=None,
                       key_usage=None):
    """
    create a certificate signed with the CA private key

    Args:
        ca_bundle (CertBundle): the CA key and certificate
        public_key (inst): public key of the new certificate
        name (str): the common name
        hosts (list): DNS names for the Subject Alternative Names
        ips (list): IP addresses for the Subject Alternative Names

    Return:
        ssl certificate object
    """
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, name)])

    cert = _validity(x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        ca_bundle.cert.subject
    ).public_key(
        public_key
    ))

    alt_names = []

    if hosts:
        alt_names.extend(x509.DNSName(host) for host in hosts)

    if ips:
        alt_names.extend(x509.IPAddress(ipaddress.ip_address(ip))
                         for ip in ips)

    cert = cert.add_extension(
        x509.KeyUsage(*(key_usage or CERT_KEY_USAGE)),
        critical=True
    )

    cert = cert.add_extension(
        x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH,
                               ExtendedKeyUsageOID.CLIENT_AUTH]),
        critical=False
    )

    cert = cert.add_extension(x509.BasicConstraints(False, None),
                              critical=True)
    cert = cert.add_extension(
        x509.SubjectKeyIdentifier.from_public_key(public_key),
        critical=False)

    cert = cert.add_extension(
        x509.AuthorityKeyIdentifier.from_issuer_public_key(
            ca_bundle.cert.public_key()), critical=False)

    if alt_names:
        cert = cert.add_extension(
            x509.SubjectAlternativeName(alt_names),
            critical=False)

    return cert.sign(ca_bundle.key, hashes.SHA256(), default_backend())


def parse_sans(sans):
    """
    split an openssl style alt_names string into host names and IPs

    Args:
        sans (str): e.g. ``IP.1=10.0.0.5,IP.2=10.3.0.1,DNS.1=kubernetes,``.
            Empty entries (a trailing comma) are skipped.

    Return:
        tuple of (hosts, ips)
    """
    hosts, ips = [], []
    for entry in filter(None, (e.strip() for e in (sans or "").split(","))):
        kind, sep, value = entry.partition("=")
        kind = kind.split(".", 1)[0].upper()
        if not sep or kind not in ("IP", "DNS"):
            raise ValueError(f"invalid subject alternative name: {entry}")
        if kind == "IP" and not is_ip(value):
            raise ValueError(f"not an IP address: {entry}")
        (ips if kind == "IP" else hosts).append(value)

    return hosts, ips


def write_key(key, passwd=None, filename="key.pem"):
    """
    Write the key instance to the file as ASCII string

    Args:
        key (SSL key instance)
        passwd (str): if given the key will be protected with this password
        filename (str): the file to write
    """
    if passwd:
        enc_algo = serialization.BestAvailableEncryption(passwd.encode())
    else:
        enc_algo = serialization.NoEncryption()

    fd = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    # an existing file keeps its mode on open, tighten it first
    os.fchmod(fd, 0o600)
    with os.fdopen(fd, "wb") as fh:
        fh.write(key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=enc_algo,))


def write_cert(cert, filename):
    """
    Write the certificate instance to the file as ASCII string
    """
    with open(filename, "wb") as fh:
        fh.write(cert.public_bytes(serialization.Encoding.PEM))


def read_cert(cert):
    """
    read SSL certificate from path

    Args:
        cert (str) - path to a cert on a file system

    Return:
        cert (inst) - a certificate instance
    """
    with open(cert, "rb") as fh:
        cert = x509.load_pem_x509_certificate(
            fh.read(), default_backend())
    return cert


def read_key(key):
    """
    read SSL key from path

    Args:
        key (str) - path to a key on a file system

    Return:
        private_key (inst) - a private key instance
    """
    with open(key, "rb") as key_file:
        private_key = serialization.load_pem_private_key(
            key_file.read(),
            password=None,
            backend=default_backend())
    return private_key


class CertBundle:
    """
    a simple class to hold a certificate with its own key
    """

    @classmethod
    def create_ca(cls, name="kube-ca", key_size=2048):
        """create a new self signed CA bundle"""
        key = create_key(size=key_size)
        return cls(key, create_ca(key, name))

    @classmethod
    def create_signed(cls, ca_bundle, name, hosts=None, ips=None,
                      key_size=2048):
        """
        create a certificate signed by ca_bundle
        """
        key = create_key(size=key_size)
        cert = create_certificate(ca_bundle, key.public_key(), name,
                                  hosts, ips)
        return cls(key, cert)

    @classmethod
    def read_bundle(cls, key, cert):
        """
        read a certificate bundle from file system
        """
        return cls(read_key(key), read_cert(cert))

    def __init__(self, key, cert):
        self.key = key
        self.cert = cert

    def save(self, name, directory, key_suffix="-key.pem",
             cert_suffix=".pem"):
        """
        save a certificate bundle to directory, overwriting existing files

        Return:
            tuple of the key and the certificate path
        """
        os.makedirs(directory, exist_ok=True)

        key_path = os.path.join(directory, name + key_suffix)
        cert_path = os.path.join(directory, name + cert_suffix)
        write_key(self.key, filename=key_path)
        write_cert(self.cert, cert_path)
        LOGGER.debug("Wrote %s and %s", key_path, cert_path)

        return key_path, cert_path
