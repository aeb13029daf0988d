"""
Tests for the apt manager — install-missing, update-once, repositories.
"""

import pytest

from devbootstrap.adapters.mock import MockRunner
from devbootstrap.core.errors import CommandError
from devbootstrap.core.reliability.retry import RetryPolicy
from devbootstrap.core.services.apt import AptManager

from tests.conftest import mark_installed

APT = ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get"]


def _apt(runner: MockRunner) -> AptManager:
    return AptManager(runner, retry=RetryPolicy(attempts=3, delay=0, sleep=lambda s: None))


class TestDetection:
    def test_is_installed(self):
        runner = MockRunner()
        mark_installed(runner, "git")
        runner.set_response(
            ["dpkg-query", "-W", "-f=${Status}", "gdb"], stdout="deinstall ok config-files"
        )
        apt = _apt(runner)
        assert apt.is_installed("git")
        assert not apt.is_installed("gdb")
        assert not apt.is_installed("clang")

    def test_missing_deduplicates(self):
        runner = MockRunner()
        mark_installed(runner, "git")
        assert _apt(runner).missing(["git", "curl", "curl", "jq"]) == ["curl", "jq"]


class TestInstallMissing:
    def test_installs_only_missing(self):
        runner = MockRunner()
        mark_installed(runner, "git")
        installed = _apt(runner).install_missing(["git", "curl"])
        assert installed == ["curl"]
        assert runner.calls_matching(*APT, "install") == [
            [*APT, "install", "-y", "--no-install-recommends", "curl"]
        ]

    def test_nothing_to_install(self):
        runner = MockRunner()
        mark_installed(runner)
        assert _apt(runner).install_missing(["git", "curl"]) == []
        assert runner.calls_matching(*APT, "install") == []

    def test_update_runs_once(self):
        runner = MockRunner()
        apt = _apt(runner)
        apt.install_missing(["git"])
        apt.install_missing(["curl"])
        assert len(runner.calls_matching(*APT, "update")) == 1

    def test_invalidate_forces_update(self):
        runner = MockRunner()
        apt = _apt(runner)
        apt.update_once()
        apt.invalidate()
        apt.update_once()
        assert len(runner.calls_matching(*APT, "update")) == 2

    def test_failure_is_fatal(self):
        runner = MockRunner()
        runner.set_failure([*APT, "install"], returncode=100)
        with pytest.raises(CommandError) as exc:
            _apt(runner).install_missing(["mono-complete"])
        assert exc.value.returncode == 100

    def test_failure_tolerated_without_check(self):
        runner = MockRunner()
        runner.set_failure([*APT, "install"], returncode=100)
        assert _apt(runner).install_missing(["mono-complete"], check=False) == []

    def test_tolerated_update_failure_is_not_repeated(self):
        runner = MockRunner()
        runner.set_failure([*APT, "update"], returncode=100)
        apt = _apt(runner)
        assert apt.install_missing(["mono-complete"], check=False) == ["mono-complete"]
        assert apt.install_missing(["docker.io"]) == ["docker.io"]
        assert len(runner.calls_matching(*APT, "update")) == 1

    def test_sudo_prefix(self):
        runner = MockRunner(is_root=False)
        _apt(runner).install_missing(["git"])
        assert runner.call_log[0] == ["sudo", *APT, "update", "-y"]


class TestInstall:
    def test_install_ignores_presence(self):
        runner = MockRunner()
        mark_installed(runner)
        assert _apt(runner).install(["nodejs"])
        assert runner.calls_matching(*APT, "install")

    def test_install_check_false_reports_failure(self):
        runner = MockRunner()
        runner.set_failure([*APT, "install"])
        assert not _apt(runner).install(["dotnet-sdk-8.0"], check=False)


class TestAddRepository:
    def _add(self, apt: AptManager) -> None:
        apt.add_repository(
            keyring="nodesource",
            list_name="nodesource",
            key_url="https://example.test/key.gpg",
            source_line="deb [signed-by=/etc/apt/keyrings/nodesource.gpg] https://x nodistro main",
        )

    def test_commands(self):
        runner = MockRunner()
        apt = _apt(runner)
        apt.update_once()
        self._add(apt)

        assert ["mkdir", "-p", "/etc/apt/keyrings"] in runner.call_log
        curl = runner.calls_matching("curl")[0]
        assert curl[-1] == "https://example.test/key.gpg"
        gpg = runner.calls_matching("gpg")[0]
        assert "/etc/apt/keyrings/nodesource.gpg" in gpg
        tee_index = runner.call_log.index(["tee", "/etc/apt/sources.list.d/nodesource.list"])
        assert runner.inputs[tee_index].startswith("deb [signed-by=")
        assert not apt.updated

    def test_key_download_is_retried(self):
        runner = MockRunner()
        runner.set_failure(["curl"], times=2)
        self._add(_apt(runner))
        assert len(runner.calls_matching("curl")) == 3

    def test_key_download_exhausted(self):
        runner = MockRunner()
        runner.set_failure(["curl"], returncode=6)
        with pytest.raises(CommandError) as exc:
            self._add(_apt(runner))
        assert exc.value.returncode == 6
        assert runner.calls_matching("gpg") == []
