"""Configuration constants for anonvote-ops."""

CONTRACT_NAME = "AnonymousSportsVoting"

# Deployment record written next to the project root
DEPLOYMENT_RECORD_FILENAME = "deployment-info.json"

# Blocks to wait on public networks before explorer verification
VERIFICATION_CONFIRMATIONS = 6

# Networks that never get explorer verification
LOCAL_NETWORKS = frozenset({"hardhat", "localhost", "localfhenix"})

DEFAULT_NETWORK = "hardhat"

# Network configuration
# chain_id None means "ask the node"
NETWORK_CONFIG = {
    "hardhat": {
        "chain_id": 31337,
        "chain_name": "Hardhat",
        "block_explorer_url": None,
        "explorer_api_url": None,
        "default_rpc_url": "http://127.0.0.1:8545",
        "default_rpc_env": "HARDHAT_RPC_URL",
    },
    "localhost": {
        "chain_id": 31337,
        "chain_name": "Localhost",
        "block_explorer_url": None,
        "explorer_api_url": None,
        "default_rpc_url": "http://127.0.0.1:8545",
        "default_rpc_env": "LOCALHOST_RPC_URL",
    },
    "localfhenix": {
        "chain_id": 412346,
        "chain_name": "Local Fhenix",
        "block_explorer_url": None,
        "explorer_api_url": None,
        "default_rpc_url": "http://127.0.0.1:42069",
        "default_rpc_env": "LOCALFHENIX_RPC_URL",
    },
    "sepolia": {
        "chain_id": 11155111,
        "chain_name": "Sepolia",
        "block_explorer_url": "https://sepolia.etherscan.io",
        "explorer_api_url": "https://api-sepolia.etherscan.io/api",
        "default_rpc_url": None,
        "default_rpc_env": "SEPOLIA_RPC_URL",
    },
}

# Seed data created right after deployment, in order
SEED_CANDIDATES = [
    ("Outstanding Athlete", "Best Performance"),
    ("Rising Star", "Newcomer Award"),
    ("Team Player", "Team Spirit"),
    ("Coach Excellence", "Leadership Award"),
]

SEED_EVENT_NAME = "Annual Awards 2024"
SEED_EVENT_DESCRIPTION = "Vote for the best performers in various categories this year"

# Functions listed in the post-deployment summary
AVAILABLE_FUNCTIONS = [
    ("authorizeVoter(address)", "Grant voting permission"),
    ("castVote(eventId, candidateId)", "Submit encrypted vote"),
    ("getEventInfo(eventId)", "Get event details"),
    ("getCandidateInfo(candidateId)", "Get candidate information"),
]
