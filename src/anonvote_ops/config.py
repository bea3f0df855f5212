"""Environment-driven settings for anonvote-ops."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .constants import LOCAL_NETWORKS, NETWORK_CONFIG
from .exceptions import ConfigurationError
from .paths import get_project_root
from .types import NetworkContext


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings for one invocation."""

    network: NetworkContext
    rpc_url: str
    project_root: Path
    private_key: Optional[str] = None
    etherscan_api_key: Optional[str] = None


def resolve_network(name: str) -> NetworkContext:
    """
    Look up a network by name.

    Args:
        name: Network name (e.g., "hardhat", "sepolia")

    Returns:
        NetworkContext for the network

    Raises:
        ConfigurationError: If the network is unknown
    """
    if name not in NETWORK_CONFIG:
        known = ", ".join(sorted(NETWORK_CONFIG))
        raise ConfigurationError(f"Unknown network '{name}' (known: {known})")

    config = NETWORK_CONFIG[name]
    return NetworkContext(
        name=name,
        chain_id=config["chain_id"],
        is_local=name in LOCAL_NETWORKS,
        block_explorer_url=config["block_explorer_url"],
        explorer_api_url=config["explorer_api_url"],
    )


def load_settings(
    network: str,
    project_root: Optional[Union[Path, str]] = None,
    rpc_url: Optional[str] = None,
    require_rpc: bool = True,
) -> Settings:
    """
    Build settings from the environment.

    A .env file in the project root is loaded first; variables that are
    already set in the process environment take precedence.

    Args:
        network: Network name
        project_root: Project root (defaults to the current directory)
        rpc_url: RPC URL (defaults to $<NETWORK>_RPC_URL, then the network default)
        require_rpc: Whether a missing RPC URL is an error

    Returns:
        Settings

    Raises:
        ConfigurationError: If the network is unknown or has no RPC URL
    """
    root = get_project_root(project_root)
    load_dotenv(root / ".env", override=False)

    context = resolve_network(network)
    config = NETWORK_CONFIG[network]

    if rpc_url is None:
        rpc_url = os.environ.get(config["default_rpc_env"]) or config["default_rpc_url"]
    if not rpc_url and require_rpc:
        raise ConfigurationError(
            f"RPC URL required for network '{network}': "
            f"set ${config['default_rpc_env']} or pass rpc_url"
        )

    return Settings(
        network=context,
        rpc_url=rpc_url or "",
        project_root=root,
        private_key=os.environ.get("PRIVATE_KEY") or None,
        etherscan_api_key=os.environ.get("ETHERSCAN_API_KEY") or None,
    )
