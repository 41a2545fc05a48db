"""
Health and drain hooks for instances of a flavor.
"""
import enum


class Health(enum.Enum):
    """The health of an instance as reported to the orchestrator"""
    UNKNOWN = 0
    HEALTHY = 1
    UNHEALTHY = 2


class InstanceHooks:
    """Reports every instance healthy and drains nothing.

    Subclass and override :meth:`healthy` or :meth:`drain` to probe or
    drain instances for real.
    """

    def healthy(self, flavor_properties, instance):  # pylint: disable=unused-argument
        """the health of instance, flavor_properties are passed unparsed"""
        return Health.HEALTHY

    def drain(self, flavor_properties, instance):  # pylint: disable=unused-argument
        """prepare instance for removal"""
        return None
