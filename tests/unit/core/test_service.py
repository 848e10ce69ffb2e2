"""Unit tests for the service controller and verifier."""

import pytest
from dockstrap.core.errors import ServiceStartFailed, VerificationFailed
from dockstrap.core.service import DOCKER_SERVICE, start_service, stop_if_running
from dockstrap.core.verifier import verify_installation


class TestStartService:
    """Tests for start_service function."""

    def test_start_wait_enable(self, make_services) -> None:
        """Reload, start, wait, then enable."""
        services = make_services()
        waits: list[float] = []

        start_service(services, auto_start=True, wait=2.0, sleep=waits.append)

        assert services.calls == [("reload",), ("start", "docker"), ("enable", "docker")]
        assert waits == [2.0]

    def test_no_autostart(self, make_services) -> None:
        """Without auto start the service is not enabled."""
        services = make_services()

        start_service(services, auto_start=False, sleep=lambda seconds: None)

        assert ("enable", DOCKER_SERVICE) not in services.calls
        assert services.is_active(DOCKER_SERVICE)

    def test_start_command_fails(self, make_services) -> None:
        """A failing systemctl start is fatal with journal hints."""
        services = make_services(start_fails=True)

        with pytest.raises(ServiceStartFailed) as exc_info:
            start_service(services, auto_start=True, sleep=lambda seconds: None)

        assert any("journalctl" in hint for hint in exc_info.value.hints)

    def test_inactive_after_wait(self, make_services) -> None:
        """A service that dies after starting is fatal."""
        services = make_services(stays_inactive=True)

        with pytest.raises(ServiceStartFailed, match="not active"):
            start_service(services, auto_start=True, sleep=lambda seconds: None)

        assert ("enable", DOCKER_SERVICE) not in services.calls


class TestStopIfRunning:
    """Tests for stop_if_running function."""

    def test_stops_active_service(self, make_services) -> None:
        """An active daemon is stopped."""
        services = make_services(active={"docker"})

        assert stop_if_running(services) is True
        assert services.calls == [("stop", "docker")]

    def test_ignores_inactive_service(self, make_services) -> None:
        """Nothing happens when the daemon is down."""
        services = make_services()

        assert stop_if_running(services) is False
        assert services.calls == []


class TestVerifyInstallation:
    """Tests for verify_installation function."""

    def test_all_checks_pass(self, make_docker, make_services) -> None:
        """A healthy runtime passes and reports versions."""
        docker = make_docker({"docker-ce"})

        report = verify_installation(docker, make_services(active={"docker"}))

        assert report.runtime_version == "27.5.0"
        assert report.compose_version == "2.32.4"
        assert docker.ran == ["hello-world"]

    def test_missing_binary(self, make_docker, make_services) -> None:
        """docker missing from PATH is fatal."""
        with pytest.raises(VerificationFailed, match="not found"):
            verify_installation(make_docker(set()), make_services(active={"docker"}))

    def test_service_down(self, make_docker, make_services) -> None:
        """An inactive service is fatal."""
        with pytest.raises(VerificationFailed, match="not running"):
            verify_installation(make_docker({"docker-ce"}), make_services())

    def test_smoke_test_without_greeting(self, make_docker, make_services) -> None:
        """Container output without the greeting is fatal."""
        docker = make_docker({"docker-ce"}, smoke_output="Unable to find image\n")

        with pytest.raises(VerificationFailed, match="test container"):
            verify_installation(docker, make_services(active={"docker"}), image="busybox")

        assert docker.ran == ["busybox"]

    def test_missing_compose_is_not_fatal(self, make_docker, make_services) -> None:
        """An unavailable compose plugin only warns."""
        docker = make_docker({"docker-ce"}, compose=None)

        report = verify_installation(docker, make_services(active={"docker"}))

        assert report.compose_version is None

    def test_compose_not_checked(self, make_docker, make_services) -> None:
        """Compose is skipped when it was not requested."""
        report = verify_installation(
            make_docker({"docker-ce"}), make_services(active={"docker"}), check_compose=False
        )

        assert report.compose_version is None
