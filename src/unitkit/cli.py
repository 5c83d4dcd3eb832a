"""CLI entry point for the unit runtime."""

from __future__ import annotations

import json

import click

from .core.enums import MaterializationMode

_MODES = [m.value for m in MaterializationMode]


@click.group()
def main() -> None:
    """Unit materialization toolkit."""


@main.command()
@click.argument("definition", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default=None, help="Config file path")
@click.option("--mode", type=click.Choice(_MODES), default=None, help="Materialization mode override")
@click.option("--base-url", default=None, help="baseUrl passed to create()")
@click.option("--strict", is_flag=True, help="Validate in strict mode")
def inspect(
    definition: str,
    config: str | None,
    mode: str | None,
    base_url: str | None,
    strict: bool,
) -> None:
    """Materialize a definition file and list what the unit exposes."""
    import asyncio

    from .main import parse_mode, parse_strict, run_inspect

    unit_config = {"baseUrl": base_url} if base_url else {}
    report = asyncio.run(
        run_inspect(
            definition,
            config_path=config,
            overrides={**parse_mode(mode), **parse_strict(strict)},
            unit_config=unit_config,
        )
    )
    click.echo(f"Identity:     {report['whoami']}")
    click.echo(f"Mode:         {report['mode']}")
    click.echo(f"Strict:       {report['strict']}")
    click.echo(f"Capabilities: {', '.join(report['capabilities'])}")
    click.echo(f"Documented:   {', '.join(report['schema'])}")


@main.command()
@click.option("--config", default=None, help="Config file path")
@click.option("--mode", type=click.Choice(_MODES), default=None, help="Materialization mode override")
@click.option("--base-url", default="https://demo.api.example.com", help="baseUrl passed to create()")
@click.option("--strict", is_flag=True, help="Validate in strict mode")
def demo(config: str | None, mode: str | None, base_url: str, strict: bool) -> None:
    """Materialize the bundled network unit and exercise it once."""
    import asyncio

    from .main import parse_mode, parse_strict, run_demo

    result = asyncio.run(
        run_demo(
            config_path=config,
            overrides={**parse_mode(mode), **parse_strict(strict)},
            base_url=base_url,
        )
    )
    click.echo(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
