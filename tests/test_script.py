"""
Test kubeflavor.provision.script
"""
from unittest import mock

import pytest

from kubeflavor.errors import ScriptFailure
from kubeflavor.provision.script import execute, load_script, run_script

PRINT_ARGS = b'echo "$#"; for arg in "$@"; do echo "[$arg]"; done'


def test_load_script():
    assert b"init-ssl-ca <ssl-dir>" in load_script("init-ssl-ca")
    assert b"init-ssl <ssl-dir>" in load_script("init-ssl")


def test_load_unknown_script():
    with pytest.raises(ScriptFailure):
        load_script("rm-rf")


def test_arguments_are_passed_discretely():
    out = run_script(PRINT_ARGS, ["ssl", "apiserver", "kube apiserver",
                                  "IP.1=10.0.0.5,"])
    assert out == "4\n[ssl]\n[apiserver]\n[kube apiserver]\n[IP.1=10.0.0.5,]\n"


def test_dash_arguments_are_not_options():
    assert run_script(PRINT_ARGS, ["-x"]) == "1\n[-x]\n"


def test_script_as_str():
    assert run_script("echo hello") == "hello\n"


def test_non_zero_exit():
    with pytest.raises(ScriptFailure) as err:
        run_script(b"echo oops >&2; exit 3")

    assert err.value.returncode == 3
    assert err.value.stderr == "oops\n"


def test_spawn_failure():
    with pytest.raises(ScriptFailure) as err:
        run_script(b"echo hello", shell="/does/not/exist/bash")

    assert err.value.returncode is None


def test_timeout():
    with pytest.raises(ScriptFailure):
        run_script(b"exec sleep 5", timeout=0.2)


def test_execute_runs_the_named_script():
    with mock.patch("kubeflavor.provision.script.run_script") as run:
        run.return_value = "ok"
        assert execute("init-ssl-ca", "ssl", timeout=3) == "ok"

    run.assert_called_once_with(load_script("init-ssl-ca"), ("ssl",),
                                timeout=3)
