"""
Command line entry point for k8sexec.
"""
import logging
from typing import Tuple

import click

from k8sexec import __version__
from k8sexec.config import settings
from k8sexec.kube_client import KubeClient
from k8sexec.render import FORMATS, render
from k8sexec.runner import RunError, Runner, Selection

logger = logging.getLogger(__name__)

# interspersed args off: everything after the first positional (or "--") is the command
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "allow_interspersed_args": False,
}


def setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def read_stdin() -> bytes:
    """Capture piped standard input; an interactive terminal yields nothing."""
    stream = click.get_binary_stream("stdin")
    if stream.isatty():
        return b""
    try:
        return stream.read()
    except OSError as e:
        raise click.ClickException(f"Failed to read stdin: {e}") from e


@click.command(
    context_settings=CONTEXT_SETTINGS,
    help="k8sexec is a command line application that executes commands in containers",
)
@click.option("-k", "--kubeconfig", default=settings.KUBECONFIG, show_default=True,
              help="(optional) absolute path to the kubeconfig file")
@click.option("-n", "--namespace", default=settings.K8S_NAMESPACE, show_default=True,
              help="CNF namespace")
@click.option("-p", "--pod", default="",
              help="a pod name, if not provided then all containers in a namespace will be enumerated.")
@click.option("-c", "--container", default="", help="a container name")
@click.option("-o", "--output", "output_format", type=click.Choice(FORMATS),
              default=settings.OUTPUT_FORMAT, show_default=True, help="Output format: text, or json")
@click.option("-d", "--debug", is_flag=True, default=False, help="debug")
@click.version_option(__version__, "-v", "--version", prog_name=settings.APP_NAME)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def main(kubeconfig: str, namespace: str, pod: str, container: str,
         output_format: str, debug: bool, command: Tuple[str, ...]):
    setup_logging(debug)

    try:
        kube_client = KubeClient(
            namespace=namespace,
            kubeconfig=kubeconfig,
            in_cluster=settings.K8S_IN_CLUSTER,
            context=settings.K8S_CONTEXT,
        )
    except Exception as e:
        raise click.ClickException(str(e)) from e

    stdin = read_stdin()
    selection = Selection(namespace=namespace, pod=pod, container=container)

    try:
        result = Runner(kube_client).run(selection, list(command), stdin)
    except RunError as e:
        raise click.ClickException(str(e)) from e

    click.echo(render(result, output_format), nl=False)


if __name__ == "__main__":
    main()
