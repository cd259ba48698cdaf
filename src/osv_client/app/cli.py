from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

import typer

from .api import OsvApiClient
from ..config.urls import Server
from ..core.domain.models import BatchQuery, BatchResult, Package, by_commit, by_version
from ..core.domain.vulnerability import Vulnerability
from ..core.errors import OsvClientError
from ..infra.codec import decode_queries, encode_vulnerability


app = typer.Typer(help="OSV.dev vulnerability database client")


@app.callback()
def main(
    ctx: typer.Context,
    staging: bool = typer.Option(False, "--staging", help="Use the staging server instead of production"),
    base_url: str | None = typer.Option(None, "--base-url", help="Arbitrary server URL (overrides --staging)"),
    max_concurrency: int | None = typer.Option(None, "--max-concurrency", min=1, help="Maximum in-flight requests (default: 100)"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log requests to stderr"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ctx.obj = {
        "server": Server.STAGING if staging else None,
        "base_url": base_url,
        "max_concurrency": max_concurrency,
    }


@contextmanager
def provide_client(ctx: typer.Context) -> Iterator[OsvApiClient]:
    opts = ctx.obj or {}
    try:
        with OsvApiClient(
            opts.get("server"),
            base_url=opts.get("base_url"),
            max_concurrency=opts.get("max_concurrency"),
        ) as client:
            yield client
    except OsvClientError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command(help="Look up vulnerabilities for one package, by version or by commit.")
def query(
    ctx: typer.Context,
    ecosystem: str | None = typer.Option(None, help="Package ecosystem (e.g., PyPI, npm)"),
    name: str | None = typer.Option(None, help="Package name"),
    purl: str | None = typer.Option(None, help="Package URL, instead of ecosystem + name"),
    version: str | None = typer.Option(None, help="Package version"),
    commit: str | None = typer.Option(None, help="Source commit hash"),
    as_json: bool = typer.Option(False, "--json", help="Print full records as JSON"),
) -> None:
    if (version is None) == (commit is None):
        raise typer.BadParameter("Pass exactly one of --version or --commit")
    pkg = Package(name=name, ecosystem=ecosystem, purl=purl) if (name or ecosystem or purl) else None
    if version is not None:
        if pkg is None:
            raise typer.BadParameter("--version needs a package (--ecosystem/--name or --purl)")
        q = by_version(pkg, version)
    else:
        q = by_commit(commit, pkg)
    with provide_client(ctx) as client:
        vulns = client.get_vulnerabilities_for_package(q)
    if as_json:
        typer.echo(json.dumps([encode_vulnerability(v) for v in vulns], indent=2))
        return
    _print_list(vulns)


@app.command(help="Look up many packages in one call. FILE holds a JSON list of query objects.")
def batch(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file with a list of queries"),
) -> None:
    try:
        payload = json.loads(file.read_text(encoding="utf-8"))
        if not isinstance(payload, list):
            raise ValueError("expected a JSON list of query objects")
        queries = decode_queries(payload)
        batch_query = BatchQuery(tuple(queries))
    except (ValueError, OsvClientError) as e:
        typer.echo(f"Invalid batch file {file}: {e}", err=True)
        raise typer.Exit(code=1)
    with provide_client(ctx) as client:
        result = client.get_vulnerability_ids_for_packages(batch_query)
    _print_batch(result)


@app.command(help="Show the full record for a vulnerability id (GHSA-..., PYSEC-..., CVE-...).")
def vuln(
    ctx: typer.Context,
    id: str = typer.Argument(..., help="Vulnerability identifier"),
) -> None:
    with provide_client(ctx) as client:
        v = client.get_vulnerability_for_id(id)
    typer.echo(json.dumps(encode_vulnerability(v), indent=2))


@app.command(help="Fetch many vulnerability records concurrently, one request per id.")
def vulns(
    ctx: typer.Context,
    ids: list[str] = typer.Argument(..., help="Vulnerability identifiers", metavar="ID"),
) -> None:
    with provide_client(ctx) as client:
        records = client.get_vulnerabilities_for_ids(ids)
    for v in records:
        typer.echo(f"{v.id}\t{v.modified.isoformat()}")


def _print_list(vulns: Sequence[Vulnerability]) -> None:
    if not vulns:
        typer.echo("No vulnerabilities found")
        return
    for v in vulns:
        typer.echo(f"{v.id}\t{v.summary or '-'}")


def _print_batch(result: BatchResult) -> None:
    for index, entry in enumerate(result):
        ids = ", ".join(entry.ids) if len(entry) else "-"
        typer.echo(f"{index}\t{ids}")


if __name__ == "__main__":
    app()
