"""CLI entrypoint for ECS Launch."""

import logging
import sys
from pathlib import Path

import click
import questionary

from ecs_launch.cli.errors import report_deployment_error
from ecs_launch.cli.options import (
    deployment_options_from_settings,
    load_settings,
    load_task_definition,
    load_user_data,
)
from ecs_launch.cli.ui import console, report_step
from ecs_launch.core.deployments.aws_ecs import (
    DeploymentError,
    DeploymentResult,
    OperationCancelled,
    ResourceLedger,
    cleanup_resources,
    create_session,
    provision_environment,
)

EXIT_FAILURE = 1
EXIT_CANCELLED = 130


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs.")
def cli(verbose: bool) -> None:
    """Provision an ECS cluster and service on AWS."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--app-name", help="Application name; all resource names derive from it.")
@click.option("--instances", "instance_count", type=click.IntRange(min=1))
@click.option("--tasks", "task_count", type=click.IntRange(min=1))
@click.option(
    "--task-definition",
    "task_definition_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Task definition JSON payload.",
)
@click.option(
    "--user-data",
    "user_data_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Bootstrap script for the instances.",
)
@click.option(
    "--key-dir",
    "key_directory",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the private key file.",
)
@click.option("--image-id", help="Machine image to use instead of the region table.")
@click.option("--profile", "aws_profile", help="AWS named profile.")
@click.option("--region", "aws_region", help="AWS region.")
@click.option("--poll-interval", "poll_interval_seconds", type=float)
@click.option("--instance-timeout", "instance_timeout_seconds", type=float)
@click.option("--task-timeout", "task_timeout_seconds", type=float)
@click.option(
    "--cleanup-on-failure/--keep-on-failure",
    "cleanup_on_failure",
    default=None,
    help="Delete resources created by a failed run. Prompts when omitted.",
)
@click.pass_context
def deploy(ctx: click.Context, cleanup_on_failure: bool | None, **overrides: object) -> None:
    """Create the cluster, network, compute and service, then print the URLs."""
    settings = load_settings(overrides)
    task_definition = load_task_definition(settings.task_definition_path)
    user_data = load_user_data(settings.user_data_path)
    options = deployment_options_from_settings(settings, task_definition, user_data)

    try:
        session = create_session(settings.aws.profile, settings.aws.region)
    except DeploymentError as exc:
        exc.annotate("preflight", None)
        report_deployment_error(exc)
        ctx.exit(EXIT_FAILURE)
        return

    ledger = ResourceLedger()
    try:
        result = provision_environment(session, options, report_step, ledger)
    except DeploymentError as exc:
        report_deployment_error(exc)
        if len(ledger):
            _handle_leftovers(session, ledger, cleanup_on_failure)
        ctx.exit(EXIT_CANCELLED if isinstance(exc, OperationCancelled) else EXIT_FAILURE)
        return

    print_endpoints(result)


def print_endpoints(result: DeploymentResult) -> None:
    """Print the completion banner and the endpoint URLs.

    Args:
        result: Successful provisioning result.
    """
    console.print("[green]Setup is completed.[/green]")
    console.print(f"Private key: {result.credential.key_path}")
    if not len(result.endpoints):
        console.print("[yellow]No instance has a public address yet.[/yellow]")
        return
    console.print("Open your browser with these URLs:")
    for endpoint in result.endpoints:
        console.print(f"– {endpoint.url}", highlight=False)


def _handle_leftovers(session: object, ledger: ResourceLedger, cleanup: bool | None) -> None:
    """Offer to delete what a failed run created."""
    console.print("[yellow]Resources created before the failure:[/yellow]")
    for resource in ledger:
        console.print(f"  {resource}", highlight=False)

    if cleanup is None and sys.stdin.isatty():
        cleanup = bool(questionary.confirm("Delete these resources now?", default=False).ask())
    if not cleanup:
        console.print("[dim]Resources were kept; delete them manually when done.[/dim]")
        return

    remaining = cleanup_resources(session, ledger, report_step)
    if remaining:
        console.print(f"[red]{len(remaining)} resources could not be deleted.[/red]")
    else:
        console.print("[green]Clean-up finished.[/green]")


def main() -> None:
    """Run the CLI."""
    cli()
