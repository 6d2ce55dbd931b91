"""Captain constants."""

CONFIG_FILENAME = "Captain.toml"
CARGO_MANIFEST = "Cargo.toml"
ANCHOR_MARKER = "Anchor.toml"

UPGRADE_AUTHORITY_ENV = "UPGRADE_AUTHORITY_KEYPAIR"

SOLANA_BIN = "solana"
ANCHOR_BIN = "anchor"

# Archive layout under <artifacts>/<program>/<version>/.
ARTIFACT_BIN_NAME = "program.so"
ARTIFACT_IDL_NAME = "idl.json"

# Per-network default RPC and websocket endpoints.
NETWORK_URLS: dict[str, tuple[str, str]] = {
    "testnet": ("https://api.testnet.solana.com", "wss://api.testnet.solana.com"),
    "mainnet": ("https://api.mainnet-beta.solana.com", "wss://api.mainnet-beta.solana.com"),
    "devnet": ("https://api.devnet.solana.com", "wss://api.devnet.solana.com"),
    "localnet": ("http://127.0.0.1:8899", "ws://127.0.0.1:8900"),
    "debug": ("http://34.90.18.145:8899", "ws://34.90.18.145:8900"),
}

# Networks that `captain init` provisions deployer keys for.
INIT_NETWORKS = ("mainnet", "devnet", "testnet", "localnet")

DEFAULT_NETWORK = "devnet"
DEFAULT_ARTIFACTS_DIR = "./artifacts"
DEFAULT_PROGRAM_KEYPAIRS_DIR = "./.captain/program-keypairs"
DEPLOYERS_DIR = ".captain/deployers"
