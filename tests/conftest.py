"""
shared fixtures for the kubeflavor tests
"""
# pylint: disable=redefined-outer-name
import threading

import pytest

from kubeflavor.authority import CertificateAuthorityTool, bundle_path


class RecordingAuthority(CertificateAuthorityTool):
    """
    An authority which issues nothing but remembers every call
    """
    def __init__(self, fail_on=None, error=None):
        self.calls = []
        self.fail_on = fail_on
        self.error = error
        self._lock = threading.Lock()

    def _record(self, call):
        with self._lock:
            self.calls.append(call)
        if self.fail_on and self.fail_on(call):
            raise self.error

    def init_authority(self, directory):
        self._record(("init", directory))

    def issue_credential(self, directory, base_name, common_name, sans=""):
        self._record(("issue", directory, base_name, common_name, sans))
        return bundle_path(directory, common_name)


@pytest.fixture
def authority():
    return RecordingAuthority()


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    """run the test inside a fresh directory"""
    monkeypatch.chdir(tmp_path)
    return tmp_path
