"""
cli.py
======

misc functions behind the kubeflavor commands, usually called from
``kubeflavor.kubeflavor.KubeFlavor``.

Don't use directly
"""
import json

from kubeflavor.config import load_config
from kubeflavor.errors import ConfigParseError
from kubeflavor.flavor.plugin import KubernetesFlavor, new_plugin
from kubeflavor.instance import InstanceSpec
from kubeflavor.util.logger import Logger

LOGGER = Logger(__name__)


def read_json(path):
    """read a JSON document from path"""
    with open(path, 'r') as fh:
        try:
            return json.load(fh)
        except ValueError as exc:
            raise ConfigParseError(f"{path} is not valid JSON: {exc}") from exc


def validate_file(flavor_path):
    """Validate the flavor properties stored in flavor_path"""
    KubernetesFlavor().validate(read_json(flavor_path))
    LOGGER.success("%s is a valid flavor configuration", flavor_path)


def prepare_files(flavor_path, instance_path, config=None, output=None):
    """Prepare the instance in instance_path with the flavor in flavor_path.

    Args:
        flavor_path (str): JSON file with the flavor properties
        instance_path (str): JSON file with the instance spec
        config (str): the plugin configuration file
        output (str): if given the prepared instance is written there

    Returns:
        the prepared instance spec as JSON text
    """
    plugin = new_plugin(load_config(config))
    instance = InstanceSpec.from_dict(read_json(instance_path))

    plugin.prepare(read_json(flavor_path), instance)
    prepared = json.dumps(instance.to_dict(), indent=2, sort_keys=True)

    if output:
        with open(output, "w") as fh:
            fh.write(prepared + "\n")
        LOGGER.success("Prepared instance written to %s", output)

    return prepared


def init_ca(config=None):
    """Initialize the CA and issue the admin credential.

    Returns:
        the path of the admin bundle
    """
    provisioner = new_plugin(load_config(config)).provisioner
    provisioner.init_authority()
    path = provisioner.issue_admin()
    LOGGER.success("CA ready in %s, admin credential in %s",
                   provisioner.ssl_dir, path)
    return path
