"""
The flavor properties of a group and how they are merged into an
instance.

The wire format is::

    {
        "Init": ["apt-get install -y docker.io", "systemctl start docker"],
        "Tags": {"role": "worker"}
    }

Keys are matched case-insensitively and unknown keys are ignored.
"""
import json
from types import MappingProxyType

from kubeflavor.errors import ConfigParseError


def _lookup(data, key):
    """case-insensitive dict lookup, an exact match wins"""
    if key in data:
        return data[key]

    for name, value in data.items():
        if isinstance(name, str) and name.lower() == key.lower():
            return value

    return None


class FlavorSpec:
    """The parsed flavor properties.

    Attributes:
        init (tuple): the bootstrap lines, in order
        tags (mapping): the tags applied to every instance, read only
    """

    def __init__(self, init=(), tags=None):
        self.init = tuple(init)
        self.tags = MappingProxyType(dict(tags or {}))

    def __repr__(self):
        return f"FlavorSpec(init={list(self.init)!r}, tags={dict(self.tags)!r})"

    @classmethod
    def parse(cls, raw):
        """parse the flavor properties

        Args:
            raw: JSON text as ``str`` or ``bytes``, or the decoded ``dict``.
                ``None`` and ``null`` give an empty spec.

        Raises:
            ConfigParseError if raw does not have the expected shape.
        """
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8", errors="replace")

        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except ValueError as exc:
                raise ConfigParseError(
                    f"flavor properties are not valid JSON: {exc}") from exc

        if raw is None:
            return cls()

        if not isinstance(raw, dict):
            raise ConfigParseError("flavor properties must be a JSON object, "
                                   f"got {type(raw).__name__}")

        init = _lookup(raw, "Init")
        if init is None:
            init = []
        if (not isinstance(init, list) or
                not all(isinstance(line, str) for line in init)):
            raise ConfigParseError("Init must be a list of strings")

        tags = _lookup(raw, "Tags")
        if tags is None:
            tags = {}
        if (not isinstance(tags, dict) or
                not all(isinstance(key, str) and isinstance(val, str)
                        for key, val in tags.items())):
            raise ConfigParseError("Tags must be a mapping of strings to "
                                   "strings")

        return cls(init, tags)


def merge(spec, instance):
    """apply spec to a copy of instance

    The bootstrap script becomes the instance's script, if it has one,
    followed by the flavor's lines, one per line. Flavor tags overwrite
    instance tags with the same key.

    Args:
        spec (FlavorSpec): the parsed flavor properties
        instance (:class:`kubeflavor.instance.InstanceSpec`): left unchanged

    Returns:
        a new InstanceSpec
    """
    merged = instance.copy()

    lines = []
    if merged.init:
        lines.append(merged.init)
    lines.extend(spec.init)
    merged.init = "\n".join(lines)

    merged.tags.update(spec.tags)

    return merged
