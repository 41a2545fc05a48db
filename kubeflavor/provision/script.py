"""
Run the embedded provisioning scripts.

The scripts in ``kubeflavor/provision/scripts`` are shipped as package
data and fed to ``bash -s`` on standard input, so they don't need to be
executable or even present on the file system at a known location.
"""
import subprocess as sp
from importlib import resources

from kubeflavor.errors import ScriptFailure
from kubeflavor.util.logger import Logger

LOGGER = Logger(__name__)

SCRIPTS_PACKAGE = "kubeflavor.provision"
SCRIPTS_DIR = "scripts"


def load_script(name):
    """Return the body of an embedded script.

    Args:
        name (str): the script name, e.g. ``init-ssl-ca``.

    Raises:
        ScriptFailure if there is no such script.
    """
    path = resources.files(SCRIPTS_PACKAGE).joinpath(SCRIPTS_DIR).joinpath(name)
    if not path.is_file():
        LOGGER.error("Script error: no embedded script named '%s'", name)
        raise ScriptFailure(f"no embedded script named '{name}'")

    return path.read_bytes()


def run_script(script, args=(), timeout=None, shell="bash"):
    """Execute script with positional arguments and return its output.

    Each argument reaches the script as its own positional parameter.

    Args:
        script (bytes): the body of the script, passed on stdin.
        args (list): the positional arguments.
        timeout (float): seconds to wait before the script is killed.
            ``None`` waits forever.
        shell (str): the interpreter which reads the script.

    Returns:
        The captured standard output as ``str``.

    Raises:
        ScriptFailure if the script can't be started, exits non-zero or
        times out.
    """
    if isinstance(script, str):
        script = script.encode()

    cmd = [shell, "-s", "--"] + [str(arg) for arg in args]
    LOGGER.debug("Running %s", " ".join(cmd))

    try:
        proc = sp.run(cmd,
                      input=script,
                      stdout=sp.PIPE,
                      stderr=sp.PIPE,
                      timeout=timeout,
                      check=False)
    except sp.TimeoutExpired as exc:
        LOGGER.error("Script timed out after %s seconds", timeout)
        raise ScriptFailure(f"script timed out after {timeout} seconds",
                            stderr=_decode(exc.stderr)) from exc
    except OSError as exc:
        LOGGER.error("Unable to start %s: %s", shell, exc)
        raise ScriptFailure(f"unable to start {shell}: {exc}") from exc

    out, err = _decode(proc.stdout), _decode(proc.stderr)
    LOGGER.debug("STDOUT: %s (Exit code %s)", out, proc.returncode)
    if err:
        LOGGER.debug("STDERR: %s", err)

    if proc.returncode:
        LOGGER.error("Error in bash script: exit status %s", proc.returncode)
        raise ScriptFailure(f"script exited with status {proc.returncode}: "
                            f"{err.strip()}",
                            returncode=proc.returncode, stderr=err)

    return out


def execute(name, *args, timeout=None):
    """Run the embedded script name with args, see :func:`run_script`"""
    return run_script(load_script(name), args, timeout=timeout)


def _decode(data):
    if not data:
        return ""

    return data.decode("utf-8", errors="replace")
