"""Click CLI: find, list, endpoint, block."""

from __future__ import annotations

import json
import logging

import click

from netresolver import api
from netresolver.exceptions import RegistryUnavailableError, UnknownServiceError
from netresolver.models.schema import Network


def _echo_network(network: Network, as_json: bool) -> None:
    if as_json:
        click.echo(network.model_dump_json(by_alias=True, exclude_none=True, indent=2))
    else:
        aliases = ", ".join(network.aliases) or "-"
        click.echo(f"{network.id}\t{network.full_name}\t[{network.network_type.value}]\taliases: {aliases}")


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log registry loading and refreshes")
def cli(verbose: bool):
    """Netresolver - resolve blockchain network identifiers via The Graph Networks Registry."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("key")
@click.option("--json", "as_json", is_flag=True, help="Print the full network record as JSON")
def find(key: str, as_json: bool):
    """Resolve a network by id, alias, full name or short name."""
    network = _resolve(lambda: api.find(key))
    if network is None:
        raise click.ClickException(f"No network matches '{key}'")
    _echo_network(network, as_json)


@cli.command("list")
@click.option("--service", default=None, help="Only networks with endpoints for this service (substreams, firehose, ...)")
def list_networks(service: str | None):
    """List known networks, sorted by id."""
    snapshot = _resolve(lambda: api.list_by_service(service) if service else api.registry())
    for network_id in sorted(snapshot):
        _echo_network(snapshot[network_id], as_json=False)
    click.echo(f"{len(snapshot)} networks ({snapshot.origin}, registry version {snapshot.version or 'unknown'})")


@cli.command()
@click.argument("key")
@click.option("--service", default="substreams", help="Service to pick an endpoint for")
def endpoint(key: str, service: str):
    """Print the preferred endpoint of a network for a service."""
    if _resolve(lambda: api.find(key)) is None:
        raise click.ClickException(f"No network matches '{key}'")
    selected = _resolve(lambda: api.preferred_endpoint(key, service))
    if selected is None:
        raise click.ClickException(f"Network '{key}' has no {service} endpoint")
    click.echo(selected)


@cli.command()
@click.argument("height", type=int)
@click.argument("block_id")
def block(height: int, block_id: str):
    """Identify a network by its first streamable block height and hash."""
    network = _resolve(lambda: api.find_by_first_streamable_block(height, block_id))
    if network is None:
        raise click.ClickException(f"No network has first streamable block #{height} ({block_id})")
    click.echo(json.dumps({"id": network.id, "fullName": network.full_name}))


def _resolve(query):
    try:
        return query()
    except UnknownServiceError as e:
        raise click.BadParameter(str(e), param_hint="--service") from e
    except RegistryUnavailableError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
