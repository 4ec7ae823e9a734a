"""CLI entry point for publishing a check result to Gitea."""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

import typer

from boostsec.gitea_checks.descriptor_loader import (
    load_build_descriptor,
    load_check_result,
)
from boostsec.gitea_checks.models.check_result import CheckResult
from boostsec.gitea_checks.models.descriptor import BuildDescriptor
from boostsec.gitea_checks.platform.descriptor import DescriptorPlatform
from boostsec.gitea_checks.publisher import PublishResult
from boostsec.gitea_checks.publisher_factory import GiteaPublisherFactory
from boostsec.gitea_checks.status_mapper import ChecksMappingError

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

SERVER_URL_ENV = "GITEA_SERVER_URL"

app = typer.Typer()


@app.command()
def main(
    build: Path = typer.Option(..., help="Path to the build descriptor (YAML)"),  # noqa: B008
    check: Path = typer.Option(..., help="Path to the check result (YAML or JSON)"),  # noqa: B008
    job_only: bool = typer.Option(
        False, help="Resolve the commit from the job head, ignoring the run"
    ),
    server_url: str | None = typer.Option(
        None, help=f"Gitea server URL override (default: ${SERVER_URL_ENV})"
    ),
    verbose: bool = typer.Option(False, help="Enable debug logging"),
) -> None:
    """Publish a check result as a Gitea commit status."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    logger.info(f"Build descriptor: {build}")
    logger.info(f"Check result: {check}")

    try:
        descriptor = load_build_descriptor(build)
        check_result = load_check_result(check)
        credentials = [entry.resolve(os.environ) for entry in descriptor.credentials]
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load inputs: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if server_url is None and SERVER_URL_ENV in os.environ:
        server_url = os.environ[SERVER_URL_ENV]

    factory = GiteaPublisherFactory(
        DescriptorPlatform(credentials), server_url=server_url
    )

    try:
        result = asyncio.run(_publish(factory, descriptor, check_result, job_only))
    except ChecksMappingError as e:
        logger.error(f"Invalid check result: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if result is None:
        typer.echo(
            json.dumps(
                {"published": False, "reason": "No suitable publisher found"},
                indent=2,
            )
        )
        return

    output = {
        "published": result.published,
        "repository": result.repository,
        "sha": result.sha,
        "context": result.status.context,
        "state": result.status.state.value,
        "description": result.status.description,
        "target_url": result.status.target_url,
        "error": result.error,
    }
    typer.echo(json.dumps(output, indent=2))

    if not result.published:
        logger.warning(f"Check was not published: {result.error}")


async def _publish(
    factory: GiteaPublisherFactory,
    descriptor: BuildDescriptor,
    check_result: CheckResult,
    job_only: bool,
) -> PublishResult | None:
    """Resolve a publisher for the described build and publish the check."""
    run = descriptor.build_run()

    if run is None or job_only:
        logger.info(f"Resolving publisher for job {descriptor.job.display_name}")
        publisher = await factory.create_publisher_for_job(descriptor.job, sys.stderr)
    else:
        logger.info(
            f"Resolving publisher for run #{run.number} of {run.job.display_name}"
        )
        publisher = await factory.create_publisher_for_run(run, sys.stderr)

    if publisher is None:
        return None

    return await publisher.publish(check_result)


if __name__ == "__main__":  # pragma: no cover
    app()
