"""
src/app.py

Command-line host for the staking agent:

    staking-agent "Get information about nomination pools on west" --account <SS58> --provider ollama
"""


import asyncio
import json
import sys
from typing import Optional

import click

from config import DEFAULT_CHAIN, MODEL_SUGGESTIONS, ModelClientConfig, Provider
from context.chains import ChainConnections, map_to_relay_chain, resolve_chain_id
from context.loader import SNAPSHOT_PATH
from logger import setup_logger
from orchestrator.errors import ConfigurationError
from orchestrator.models import RunResult
from orchestrator.prompts import create_staking_system_prompt
from orchestrator.registry import ToolRegistry
from orchestrator.router import ToolCallingOrchestrator
from tools.exports import export_run_json
from tools.staking import build_staking_tools


APP_TITLE = "Nomination Staking Agent (Local Demo)"


def build_agent(
        config: ModelClientConfig,
        account: str,
        chain_name: str = DEFAULT_CHAIN,
        snapshot_path=SNAPSHOT_PATH,
        extra_prompt: str = None,
) -> ToolCallingOrchestrator:
    """Wire chain connections, staking tools and prompt into an initialised orchestrator."""

    chain_id = resolve_chain_id(chain_name)
    connections = ChainConnections.from_file(
        snapshot_path, initialized=sorted({chain_id, map_to_relay_chain(chain_id)})
    )

    agent = ToolCallingOrchestrator()
    agent.initialize(
        create_staking_system_prompt(chain_id, chain_name, extra_prompt),
        ToolRegistry(build_staking_tools(connections, account)),
        config,
    )

    return agent


@click.command(help=APP_TITLE)
@click.argument("query")
@click.option("--provider", type=click.Choice([p.value for p in Provider]), default=None, help="Model provider")
@click.option("--model", default=None, help=f"e.g. {', '.join(MODEL_SUGGESTIONS['ollama'])}")
@click.option("--account", required=True, help="SS58 address that signs transactions")
@click.option("--chain", default=DEFAULT_CHAIN, show_default=True, help="Chain name reported by the wallet")
@click.option("--snapshot", default=str(SNAPSHOT_PATH), help="Chain snapshot JSON")
@click.option("--trace", default=None, help="Write the full run trace as JSON to this path")
@click.option("--log-level", default=None, help="Logging level, e.g. DEBUG")
def main(
        query: str,
        provider: Optional[str],
        model: Optional[str],
        account: str,
        chain: str,
        snapshot: str,
        trace: Optional[str],
        log_level: Optional[str],
) -> None:
    """Ask the staking agent one question and print its answer."""

    setup_logger(level=log_level)

    try:
        config = ModelClientConfig.from_env(provider, model)
        agent = build_agent(config, account, chain, snapshot)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    result: RunResult = asyncio.run(agent.run(query))
    click.echo(result.output)

    if trace:
        export_run_json(result, trace)
        click.echo(json.dumps({"trace": trace, "tool_calls": len(result.tool_results)}), err=True)


if __name__ == "__main__":

    main()

# EOF
