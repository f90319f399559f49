from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner

from kdev.cli.main import main
from tests.helpers import api_exception, make_pod


@pytest.fixture
def runner() -> CliRunner:
    # Wide enough that rich never wraps a line of output.
    return CliRunner(env={"COLUMNS": "200"})


@pytest.fixture
def invoke(runner, core_v1, config_path):
    """Runs kdev against the mocked cluster client."""

    def _invoke(*args):
        return runner.invoke(
            main, ["--config", config_path, *args], obj={"CORE_V1": core_v1}
        )

    return _invoke


class TestUp:
    def test_creates_pod(self, invoke, core_v1):
        result = invoke("up", "--name", "mydev", "--image", "registry.local/img:latest")

        assert result.exit_code == 0, result.output
        assert "Pod mydev applied in ns/dev." in result.output
        assert "kdev attach --name mydev -n dev" in result.output
        core_v1.create_namespaced_persistent_volume_claim.assert_called_once()
        core_v1.create_namespaced_service_account.assert_called_once()
        pod = core_v1.create_namespaced_pod.call_args.kwargs["body"]
        assert pod["spec"]["containers"][0]["image"] == "registry.local/img:latest"

    def test_options_reach_the_pod(self, invoke, core_v1):
        result = invoke(
            "-n", "team",
            "up",
            "--name", "mydev",
            "--image", "img",
            "--cpu", "500m",
            "--memory", "1Gi",
            "--env", "A=1",
            "--label", "tier=dev",
            "--node", "disk=ssd",
            "--pvc", "shared",
        )

        assert result.exit_code == 0, result.output
        kwargs = core_v1.create_namespaced_pod.call_args.kwargs
        assert kwargs["namespace"] == "team"
        pod = kwargs["body"]
        container = pod["spec"]["containers"][0]
        assert container["resources"]["limits"] == {"cpu": "500m", "memory": "1Gi"}
        assert container["env"] == [{"name": "A", "value": "1"}]
        assert pod["metadata"]["labels"]["tier"] == "dev"
        assert pod["spec"]["nodeSelector"] == {"disk": "ssd"}
        assert pod["spec"]["volumes"][0]["persistentVolumeClaim"]["claimName"] == "shared"

    def test_second_up_fails_on_existing_claim(self, invoke, core_v1):
        core_v1.create_namespaced_persistent_volume_claim.side_effect = [
            None,
            api_exception(409),
        ]
        args = ("up", "--name", "mydev", "--image", "img")

        first = invoke(*args)
        second = invoke(*args)

        assert first.exit_code == 0, first.output
        assert second.exit_code == 1
        assert "PersistentVolumeClaim 'mydev'" in second.output
        assert "already exists" in second.output
        assert core_v1.create_namespaced_service_account.call_count == 1
        assert core_v1.create_namespaced_pod.call_count == 1

    def test_invalid_quantity_makes_no_requests(self, invoke, core_v1):
        result = invoke("up", "--name", "mydev", "--image", "img", "--cpu", "lots")

        assert result.exit_code == 1
        assert "invalid cpu quantity 'lots'" in result.output
        core_v1.create_namespaced_persistent_volume_claim.assert_not_called()

    def test_image_is_required(self, invoke, core_v1):
        result = invoke("up", "--name", "mydev")

        assert result.exit_code == 2
        assert "--image" in result.output
        core_v1.create_namespaced_pod.assert_not_called()

    @patch("kdev.cli.handlers.up.wait_for_pod_ready")
    def test_wait_for_ready(self, mock_wait, invoke, core_v1):
        result = invoke("up", "--name", "mydev", "--image", "img", "--wait", "--timeout", "60")

        assert result.exit_code == 0, result.output
        assert "Pod 'mydev' is ready." in result.output
        args, kwargs = mock_wait.call_args
        assert args == (core_v1, "mydev", "dev")
        assert kwargs["timeout"] == 60


class TestAttach:
    @patch("kdev.cli.main.handlers.attach_devpod")
    def test_defaults_come_from_config(self, mock_attach, runner, core_v1, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text(
            yaml.safe_dump({"namespace": "team", "devpod": {"shell": "/bin/zsh"}})
        )

        result = runner.invoke(
            main,
            ["--config", str(config_file), "attach", "--name", "mydev"],
            obj={"CORE_V1": core_v1},
        )

        assert result.exit_code == 0, result.output
        mock_attach.assert_called_once_with(
            core_v1, name="mydev", namespace="team", shell="/bin/zsh", container="dev"
        )

    @patch("kdev.cli.handlers.attach.AttachSession")
    def test_exit_code_is_propagated(self, mock_session_cls, invoke, core_v1):
        mock_session_cls.return_value.run.return_value = 7

        result = invoke("attach", "--name", "mydev", "--shell", "/bin/sh")

        assert result.exit_code == 7
        mock_session_cls.assert_called_once_with(
            core_v1, "mydev", "dev", shell="/bin/sh", container="dev"
        )

    @patch("kdev.cli.handlers.attach.AttachSession")
    def test_interrupt_exits_quietly(self, mock_session_cls, invoke):
        mock_session_cls.return_value.run.side_effect = KeyboardInterrupt

        result = invoke("attach", "--name", "mydev")

        assert result.exit_code == 130
        assert "Traceback" not in result.output
        assert "Aborted" not in result.output

    def test_pod_not_running(self, invoke, core_v1):
        core_v1.read_namespaced_pod.return_value = make_pod(
            "mydev", phase="Pending", ready=(False,)
        )

        result = invoke("attach", "--name", "mydev")

        assert result.exit_code == 1
        assert "is not running" in result.output
        core_v1.connect_get_namespaced_pod_exec.assert_not_called()


class TestList:
    def test_empty_namespace(self, invoke):
        result = invoke("ls")

        assert result.exit_code == 0, result.output
        assert "Namespace: dev" in result.output
        assert "No pods found in namespace 'dev'." in result.output

    def test_table(self, invoke, core_v1):
        core_v1.list_namespaced_pod.return_value = MagicMock(
            items=[make_pod("mydev"), make_pod("other", phase="Pending", ready=(False,))]
        )

        result = invoke("-n", "team", "ls")

        assert result.exit_code == 0, result.output
        assert "Namespace: team" in result.output
        for header in ("NAME", "READY", "STATUS", "NODE", "AGE"):
            assert header in result.output
        assert "mydev" in result.output
        assert "Pending" in result.output
        assert core_v1.list_namespaced_pod.call_args.kwargs["namespace"] == "team"


class TestRm:
    def test_deletes_pod_only(self, invoke, core_v1):
        result = invoke("rm", "--name", "mydev")

        assert result.exit_code == 0, result.output
        assert "Pod 'mydev' in namespace 'dev' deleted." in result.output
        core_v1.delete_namespaced_persistent_volume_claim.assert_not_called()

    def test_with_pvc(self, invoke, core_v1):
        result = invoke("rm", "--name", "mydev", "--with-pvc")

        assert result.exit_code == 0, result.output
        assert "PersistentVolumeClaim 'mydev' in namespace 'dev' deleted." in result.output
        core_v1.delete_namespaced_persistent_volume_claim.assert_called_once_with(
            name="mydev", namespace="dev"
        )

    def test_missing_claim_still_deletes_pod(self, invoke, core_v1):
        core_v1.delete_namespaced_persistent_volume_claim.side_effect = api_exception(404)

        result = invoke("rm", "--name", "mydev", "--with-pvc")

        assert result.exit_code == 1
        assert "Pod 'mydev' in namespace 'dev' deleted." in result.output
        assert "not found" in result.output
        core_v1.delete_namespaced_pod.assert_called_once()

    def test_missing_pod(self, invoke, core_v1):
        core_v1.delete_namespaced_pod.side_effect = api_exception(404)

        result = invoke("rm", "--name", "ghost", "--with-pvc")

        assert result.exit_code == 1
        assert "not found" in result.output
        core_v1.delete_namespaced_persistent_volume_claim.assert_not_called()


class TestClientSetup:
    def test_missing_kubeconfig(self, runner, config_path, tmp_path):
        missing = tmp_path / "no-kubeconfig"

        result = runner.invoke(
            main, ["--config", config_path, "--kubeconfig", str(missing), "ls"]
        )

        assert result.exit_code == 1
        assert "Kubernetes configuration not found" in result.output

    def test_invalid_config_file(self, runner, core_v1, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("namespace: [unterminated")

        result = runner.invoke(
            main, ["--config", str(config_file), "ls"], obj={"CORE_V1": core_v1}
        )

        assert result.exit_code == 1
        assert "Invalid configuration file" in result.output
        core_v1.list_namespaced_pod.assert_not_called()
