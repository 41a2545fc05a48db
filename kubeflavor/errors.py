"""
errors.py holds the exceptions raised while preparing instances.

Every error aborts the current ``prepare`` call and is handed to the
caller unchanged. Nothing in kubeflavor retries.
"""


class KubeFlavorError(Exception):
    """Base class for all kubeflavor errors"""


class ConfigParseError(KubeFlavorError, ValueError):
    """Raise a custom error if a flavor or plugin configuration is malformed"""


class PreconditionViolation(KubeFlavorError, ValueError):
    """Raise a custom error if an instance can't be provisioned as given,
    e.g. it has no logical ID to derive a certificate name from"""


class ScriptFailure(KubeFlavorError, RuntimeError):
    """Raise a custom error if an external provisioning step fails.

    Args:
        msg (str): The error message.
        returncode (int): The exit status of the script, None if it
            never ran to completion.
        stderr (str): Whatever the script wrote to standard error.
    """

    def __init__(self, msg, returncode=None, stderr=""):
        super().__init__(msg)
        self.returncode = returncode
        self.stderr = stderr
