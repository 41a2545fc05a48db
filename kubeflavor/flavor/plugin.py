"""
plugin.py
=========

The Kubernetes flavor plugin.

It assumes instances are identical (cattle) but may carry a specific
identity through their logical ID. Every instance gets the same
bootstrap lines and tags, and a TLS bundle of its own, issued for
``kube-apiserver-<logical ID>``.
"""
from kubeflavor import (APISERVER_CERT_BASE, APISERVER_CN_PREFIX,
                        DEFAULT_APISERVER_IP, DEFAULT_SSL_DIR,
                        SSL_PROPERTY_KEY)
from kubeflavor.authority import ScriptAuthority, get_authority
from kubeflavor.errors import PreconditionViolation
from kubeflavor.flavor.health import InstanceHooks
from kubeflavor.flavor.spec import FlavorSpec, merge
from kubeflavor.provision.certs import CertificateProvisioner
from kubeflavor.util.logger import Logger
from kubeflavor.util.net import is_ip

LOGGER = Logger(__name__)


class KubernetesFlavor:
    """Prepares instances to join a Kubernetes cluster.

    The plugin keeps no state between calls. Concurrent calls are safe,
    the provisioner serializes the work on the shared CA.

    Args:
        ssl_dir (str): the SSL working directory holding the CA
        authority (:class:`kubeflavor.authority.CertificateAuthorityTool`):
            defaults to :class:`kubeflavor.authority.ScriptAuthority`
        hooks (:class:`kubeflavor.flavor.health.InstanceHooks`): the
            health and drain hooks
        apiserver_ip (str): added to every node certificate as second
            IP SAN, the cluster IP of the kubernetes service
    """

    def __init__(self, ssl_dir=DEFAULT_SSL_DIR, authority=None, hooks=None,
                 apiserver_ip=DEFAULT_APISERVER_IP):
        self.ssl_dir = ssl_dir
        self.apiserver_ip = apiserver_ip
        self.hooks = hooks or InstanceHooks()
        self.provisioner = CertificateProvisioner(
            ssl_dir, authority or ScriptAuthority())

    def validate(self, flavor_properties, allocation=None):  # pylint: disable=unused-argument
        """Check the flavor properties of a group.

        Raises:
            ConfigParseError if they don't parse.
        """
        FlavorSpec.parse(flavor_properties)

    def healthy(self, flavor_properties, instance):
        """Returns the :class:`kubeflavor.flavor.health.Health` of instance"""
        return self.hooks.healthy(flavor_properties, instance)

    def drain(self, flavor_properties, instance):
        """Drain instance before the orchestrator removes it"""
        self.hooks.drain(flavor_properties, instance)

    def prepare(self, flavor_properties, instance, allocation=None):  # pylint: disable=unused-argument
        """Finalize instance before the orchestrator creates it.

        Appends the flavor's bootstrap lines to the instance's script,
        applies the flavor tags and issues the node's TLS bundle, whose
        path is stored in the properties under ``SSL``.

        instance is only changed if every step succeeds.

        Args:
            flavor_properties: the raw flavor properties of the group
            instance (:class:`kubeflavor.instance.InstanceSpec`): the draft
            allocation: the group's allocation method, not used

        Returns:
            instance, prepared

        Raises:
            ConfigParseError if the flavor properties or the instance
                properties are malformed
            PreconditionViolation if instance has no usable logical ID
            ScriptFailure if issuing a certificate fails
        """
        spec = FlavorSpec.parse(flavor_properties)
        prepared = merge(spec, instance)

        logical_id = prepared.logical_id
        if not logical_id:
            raise PreconditionViolation(
                "instance has no logical ID to issue a certificate for")

        if not is_ip(logical_id):
            raise PreconditionViolation(
                f"logical ID {logical_id!r} is not an IP address")

        # fail on broken properties before any certificate is issued
        prepared.load_properties()

        LOGGER.info("Preparing instance %s", logical_id)
        bundle = self.provisioner.provision(
            APISERVER_CERT_BASE,
            f"{APISERVER_CN_PREFIX}-{logical_id}",
            [logical_id, self.apiserver_ip])

        prepared.set_property(SSL_PROPERTY_KEY, bundle)

        instance.update(prepared)
        return instance


def new_plugin(config):
    """create a KubernetesFlavor from a loaded configuration

    Args:
        config (dict): see :func:`kubeflavor.config.load_config`
    """
    if config["authority"] == "script":
        authority = get_authority("script", timeout=config["script-timeout"])
    else:
        authority = get_authority(config["authority"])

    return KubernetesFlavor(ssl_dir=config["ssl-dir"],
                            authority=authority,
                            apiserver_ip=config["apiserver-ip"])
