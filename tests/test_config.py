"""
Test kubeflavor.config
"""
import pytest

from kubeflavor.config import DEFAULTS, load_config, validate_config
from kubeflavor.errors import ConfigParseError


def write(tmp_path, content):
    path = tmp_path / "kubeflavor.yml"
    path.write_text(content)
    return str(path)


def test_defaults():
    assert load_config(environ={}) == DEFAULTS


def test_load_file(tmp_path):
    path = write(tmp_path, "ssl-dir: /var/lib/kubeflavor/ssl\n"
                           "authority: builtin\n"
                           "script-timeout: null\n")
    config = load_config(path, environ={})

    assert config["ssl-dir"] == "/var/lib/kubeflavor/ssl"
    assert config["authority"] == "builtin"
    assert config["script-timeout"] is None
    assert config["apiserver-ip"] == "10.3.0.1"


def test_empty_file(tmp_path):
    assert load_config(write(tmp_path, ""), environ={}) == DEFAULTS


def test_environment_overrides_file(tmp_path):
    path = write(tmp_path, "ssl-dir: from-file\n")
    config = load_config(path, environ={"KUBEFLAVOR_SSL_DIR": "from-env"})
    assert config["ssl-dir"] == "from-env"


@pytest.mark.parametrize("content", [
    "- ssl-dir\n",
    "ssl-dir: [\n",
    "sslDir: ssl\n",
    "ssl-dir: ''\n",
    "authority: vault\n",
    "script-timeout: -1\n",
    "script-timeout: soon\n",
    "script-timeout: true\n",
    "apiserver-ip: kubernetes\n",
])
def test_invalid_files(tmp_path, content):
    with pytest.raises(ConfigParseError):
        load_config(write(tmp_path, content), environ={})


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yml"), environ={})


def test_validate_config():
    config = dict(DEFAULTS, **{"script-timeout": 2.5})
    validate_config(config)
