"""
Test kubeflavor.provision.certs
"""
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import RecordingAuthority

from kubeflavor.authority import bundle_path
from kubeflavor.errors import PreconditionViolation, ScriptFailure
from kubeflavor.provision import certs
from kubeflavor.provision.certs import (CertificateProvisioner, directory_lock,
                                        san_string)


def test_san_string():
    assert san_string(["10.0.0.5", "10.3.0.1"]) == \
        "IP.1=10.0.0.5,IP.2=10.3.0.1,"
    assert san_string(["fd00::1"]) == "IP.1=fd00::1,"
    assert san_string([]) == ""


@pytest.mark.parametrize("bad", ["node-1", "", None, "10.0.0.300"])
def test_san_string_invalid(bad):
    with pytest.raises(PreconditionViolation):
        san_string(["10.0.0.5", bad])


def test_directory_lock(tmp_path):
    path = str(tmp_path / "ssl")
    assert directory_lock(path) is directory_lock(path + "/")
    assert directory_lock(path) is directory_lock(
        os.path.join(str(tmp_path), ".", "ssl"))
    assert directory_lock(path) is not directory_lock(str(tmp_path))


def test_provision_order(tmp_path, authority):
    ssl_dir = str(tmp_path / "ssl")
    prov = CertificateProvisioner(ssl_dir, authority)

    path = prov.provision("apiserver", "kube-apiserver-10.0.0.5",
                          ["10.0.0.5", "10.3.0.1"])

    assert path == bundle_path(ssl_dir, "kube-apiserver-10.0.0.5")
    assert os.path.isdir(ssl_dir)
    assert authority.calls == [
        ("init", ssl_dir),
        ("issue", ssl_dir, "admin", "kube-admin", ""),
        ("issue", ssl_dir, "apiserver", "kube-apiserver-10.0.0.5",
         "IP.1=10.0.0.5,IP.2=10.3.0.1,"),
    ]


def test_admin_is_issued_every_time(tmp_path, authority):
    prov = CertificateProvisioner(str(tmp_path), authority)
    prov.provision("apiserver", "kube-apiserver-10.0.0.5", ["10.0.0.5"])
    prov.provision("apiserver", "kube-apiserver-10.0.0.6", ["10.0.0.6"])

    admin = [c for c in authority.calls if c[:3] == ("issue", str(tmp_path),
                                                     "admin")]
    assert len(admin) == 2


def test_admin_failure_stops_node_issuance(tmp_path):
    authority = RecordingAuthority(fail_on=lambda call: "admin" in call,
                                   error=ScriptFailure("boom", 1))
    prov = CertificateProvisioner(str(tmp_path), authority)

    with pytest.raises(ScriptFailure):
        prov.provision("apiserver", "kube-apiserver-10.0.0.5", ["10.0.0.5"])

    assert [c[0] for c in authority.calls] == ["init", "issue"]


def test_invalid_sans_issue_nothing(tmp_path, authority):
    prov = CertificateProvisioner(str(tmp_path), authority)
    with pytest.raises(PreconditionViolation):
        prov.provision_node_certificate("apiserver", "kube-apiserver-x",
                                        ["x"])
    assert not authority.calls


class SlowAuthority(RecordingAuthority):
    """
    counts how many threads are inside the CA wide steps at once
    """
    def __init__(self):
        super().__init__()
        self.inside = 0
        self.max_inside = 0
        self.count_lock = threading.Lock()

    def _shared(self):
        with self.count_lock:
            self.inside += 1
            self.max_inside = max(self.max_inside, self.inside)
        time.sleep(0.01)
        with self.count_lock:
            self.inside -= 1

    def init_authority(self, directory):
        self._shared()
        super().init_authority(directory)

    def issue_credential(self, directory, base_name, common_name, sans=""):
        if base_name == "admin":
            self._shared()
        return super().issue_credential(directory, base_name, common_name,
                                        sans)


def test_ca_steps_are_serialized(tmp_path):
    authority = SlowAuthority()
    ssl_dir = str(tmp_path)

    def provision(idx):
        # a new provisioner per call, the lock belongs to the directory
        prov = CertificateProvisioner(ssl_dir, authority)
        return prov.provision("apiserver", f"kube-apiserver-10.0.0.{idx}",
                              [f"10.0.0.{idx}"])

    with ThreadPoolExecutor(max_workers=8) as pool:
        paths = list(pool.map(provision, range(1, 9)))

    assert len(set(paths)) == 8
    assert authority.max_inside == 1
    assert len(authority.calls) == 3 * 8


def test_one_lock_per_directory(tmp_path, authority):
    prov = CertificateProvisioner(str(tmp_path), authority)
    prov.provision("apiserver", "kube-apiserver-10.0.1.1", ["10.0.1.1"])
    before = len(certs._LOCKS)  # pylint: disable=protected-access

    for idx in range(2, 202):
        ip = f"10.0.{idx // 250 + 1}.{idx % 250 + 1}"
        prov.provision("apiserver", f"kube-apiserver-{ip}", [ip])

    assert len(certs._LOCKS) == before  # pylint: disable=protected-access
    assert len(authority.calls) == 3 * 201
