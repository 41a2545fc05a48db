"""
instance.py
===========

The instance records exchanged with the orchestrator.
"""
import copy
import json
from collections.abc import Mapping

from kubeflavor.errors import ConfigParseError


class InstanceSpec:
    """The draft of an instance the orchestrator is about to create.

    Args:
        init (str): the bootstrap script run on first boot
        logical_id (str): the stable identity of the instance, if any
        properties (str or dict): the instance properties as JSON text or
            as a mapping, which is stored as JSON text. ``None`` stands for
            an empty property bag.
        tags (dict): the instance tags
    """

    def __init__(self, init="", logical_id=None, properties=None, tags=None):
        self.init = init or ""
        self.logical_id = logical_id
        self.properties = properties
        self.tags = dict(tags) if tags else {}

    @property
    def properties(self):
        """the property bag as JSON text"""
        return self._properties

    @properties.setter
    def properties(self, value):
        if isinstance(value, Mapping):
            value = json.dumps(dict(value), sort_keys=True)
        self._properties = value

    def __repr__(self):
        return (f"InstanceSpec(logical_id={self.logical_id!r}, "
                f"tags={self.tags!r})")

    def __eq__(self, other):
        if not isinstance(other, InstanceSpec):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def copy(self):
        """a deep copy, changes to it don't show up in self"""
        return copy.deepcopy(self)

    def update(self, other):
        """overwrite all fields of self with the ones of other"""
        self.init = other.init
        self.logical_id = other.logical_id
        self.properties = other.properties
        self.tags = dict(other.tags)

    def load_properties(self):
        """decode the property bag

        Raises:
            ConfigParseError if the properties are not a JSON object.
        """
        if not self.properties:
            return {}

        try:
            properties = json.loads(self.properties)
        except (TypeError, ValueError) as exc:
            raise ConfigParseError(
                f"instance properties are not valid JSON: {exc}") from exc

        if properties is None:
            return {}

        if not isinstance(properties, dict):
            raise ConfigParseError("instance properties must be a JSON object")

        return properties

    def set_property(self, key, value):
        """set key in the property bag and re-serialize it"""
        properties = self.load_properties()
        properties[key] = value
        self.properties = json.dumps(properties, sort_keys=True)

    @classmethod
    def from_dict(cls, data):
        """create an InstanceSpec from its JSON wire format

        ``{"Init": str, "LogicalID": str, "Properties": {}, "Tags": {}}``
        """
        if not isinstance(data, dict):
            raise ConfigParseError("an instance spec must be a JSON object")

        properties = data.get("Properties")
        if properties is not None and not isinstance(properties, str):
            properties = json.dumps(properties, sort_keys=True)

        tags = data.get("Tags") or {}
        if not isinstance(tags, dict):
            raise ConfigParseError("instance Tags must be a JSON object")

        return cls(init=data.get("Init") or "",
                   logical_id=data.get("LogicalID"),
                   properties=properties,
                   tags=tags)

    def to_dict(self):
        """the JSON wire format of self"""
        return {"Init": self.init,
                "LogicalID": self.logical_id,
                "Properties": self.load_properties(),
                "Tags": dict(self.tags)}


class InstanceDescription:  # pylint: disable=too-few-public-methods
    """A running instance as reported to the health and drain hooks.

    Args:
        instance_id (str): the ID assigned by the instance plugin
        logical_id (str): the logical ID, if any
        tags (dict): the instance tags
    """

    def __init__(self, instance_id, logical_id=None, tags=None):
        self.id = instance_id  # pylint: disable=invalid-name
        self.logical_id = logical_id
        self.tags = dict(tags) if tags else {}
