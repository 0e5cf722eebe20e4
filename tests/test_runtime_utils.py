import subprocess

from jvms_prolog.workflows import runtime_utils
from jvms_prolog.workflows.runtime_utils import detect_java_feature_version, parse_feature_version


def test_parse_feature_version_variants():
    assert parse_feature_version("21.0.2") == 21
    assert parse_feature_version("1.8.0_392") == 8
    assert parse_feature_version("25-ea") == 25
    assert parse_feature_version("17") == 17
    assert parse_feature_version("garbage") is None


def test_detect_without_java(monkeypatch):
    monkeypatch.setattr(runtime_utils.shutil, "which", lambda name: None)
    assert detect_java_feature_version() is None


def test_detect_reads_stderr_banner(monkeypatch):
    monkeypatch.setattr(runtime_utils.shutil, "which", lambda name: "/usr/bin/java")

    def fake_run(cmd, **kwargs):
        banner = 'openjdk version "21.0.2" 2024-01-16\nOpenJDK Runtime Environment\n'
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr=banner)

    monkeypatch.setattr(runtime_utils.subprocess, "run", fake_run)
    assert detect_java_feature_version() == 21
