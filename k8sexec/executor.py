"""
Remote command execution over the pod exec subresource.
"""
import json
import logging
from typing import BinaryIO, List, Optional, Tuple

from kubernetes.client.rest import ApiException
from kubernetes.stream.ws_client import ERROR_CHANNEL, STDIN_CHANNEL
from websocket import WebSocketException

from k8sexec.exit_codes import INTERNAL_ERROR, CommandExitError
from k8sexec.kube_client import KubeClient
from k8sexec.kube_types import ExecutionTarget
from k8sexec.models import ExecutionStatus

logger = logging.getLogger(__name__)

UPDATE_TIMEOUT_SECS = 1
MISSING_UTIL_CODES = (126, 127)


def parse_exit_status(raw: Optional[str]) -> Tuple[int, Optional[BaseException]]:
    """
    Decode the exec error channel into an exit code.

    The channel carries a serialized metav1.Status once the remote process
    ends. An empty channel means the process exited cleanly.

    Args:
        raw: Error channel content

    Returns:
        (code, error) where error is None on success
    """
    if not raw or not raw.strip():
        return 0, None
    try:
        status = json.loads(raw)
    except ValueError:
        return INTERNAL_ERROR, RuntimeError(raw.strip())

    if status.get("status") == "Success":
        return 0, None

    if status.get("reason") == "NonZeroExitCode":
        for cause in (status.get("details") or {}).get("causes") or []:
            if cause.get("reason") == "ExitCode":
                try:
                    err = CommandExitError(int(cause.get("message")))
                except (TypeError, ValueError):
                    break
                return err.code, err

    return INTERNAL_ERROR, RuntimeError(status.get("message") or raw.strip())


class RemoteExecutor:
    """Runs one command in one container and collects its output."""

    def __init__(self, kube_client: KubeClient):
        self.kube_client = kube_client

    def execute(self, target: ExecutionTarget, command: List[str],
                stdin: Optional[BinaryIO] = None) -> ExecutionStatus:
        """
        Execute a command in a container.

        Failures never raise: a channel that cannot be opened gives exit
        code -1 with the error text, and a non-zero remote exit is recorded
        with its code.

        Args:
            target: Pod and container to run in
            command: Argument vector
            stdin: Readable input stream (optional, may be empty)

        Returns:
            ExecutionStatus for this target
        """
        data = stdin.read() if stdin is not None else b""
        logger.debug(f"Executing {command} in {target.pod}/{target.container} ({len(data)} bytes of stdin)")

        try:
            resp = self.kube_client.open_exec(target.pod, target.container, command, stdin=bool(data))
        except ApiException as e:
            logger.warning(f"Failed to open exec channel to {target.pod}/{target.container}: {e}")
            return ExecutionStatus.build(target.pod, target.container, INTERNAL_ERROR, str(e))

        stdout: List[str] = []
        stderr: List[str] = []
        try:
            if data:
                resp.write_stdin(data)
                # remote readers such as sh only finish on EOF
                resp.close_channel(STDIN_CHANNEL)
            while resp.is_open():
                resp.update(timeout=UPDATE_TIMEOUT_SECS)
                self._drain(resp, stdout, stderr)
            self._drain(resp, stdout, stderr)
            code, err = parse_exit_status(resp.read_channel(ERROR_CHANNEL))
        except (ApiException, WebSocketException, OSError) as e:
            logger.warning(f"Exec stream to {target.pod}/{target.container} failed: {e}")
            code, err = INTERNAL_ERROR, e
        finally:
            resp.close()

        return ExecutionStatus.build(
            target.pod,
            target.container,
            code,
            str(err) if err is not None else "",
            "".join(stdout),
            "".join(stderr),
        )

    @staticmethod
    def _drain(resp, stdout: List[str], stderr: List[str]) -> None:
        if resp.peek_stdout():
            stdout.append(resp.read_stdout())
        if resp.peek_stderr():
            stderr.append(resp.read_stderr())

    def has_util(self, target: ExecutionTarget, util: str) -> bool:
        """
        Check whether a utility can be started in a container.

        Library API for callers embedding the executor; the CLI does not
        use it. Only exit codes 126 and 127 count as missing.

        Args:
            target: Pod and container to probe
            util: Executable name, run with no arguments and no input

        Returns:
            False when the utility cannot be found or executed
        """
        status = self.execute(target, [util])
        return status.exit_code not in MISSING_UTIL_CODES
