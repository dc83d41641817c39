from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Chain JSON-RPC (PulseChain testnet by default)
    rpc_url: str = "https://rpc-testnet-pulsechain.g4mm4.io"
    chain_call_timeout_sec: float = 10.0

    # Block explorer (Blockscout v2 smart-contracts endpoint)
    explorer_url: str = "https://api.scan.v4.testnet.pulsechain.com/api/v2/smart-contracts"
    explorer_max_rps: float = 5.0
    source_fetch_timeout_sec: float = 15.0

    # Price subgraph (derivedUSD lookup for the peg ratio)
    subgraph_url: str = "https://pdexsubgraph.9inch.io/subgraphs/name/exchange-v3"
    subgraph_max_rps: float = 2.0
    peg_lookup_timeout_sec: float = 10.0
    peg_reference_value: float = 1.0  # USD unit the token is pegged against

    # Verified-source cache (Redis, off unless explicitly enabled)
    redis_url: str = "redis://localhost:6379/0"
    source_cache_enabled: bool = False
    source_cache_ttl_sec: int = 24 * 3600

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = 1234
    api_cors_origins: list[str] = ["*"]
    api_rate_limit: str = "30/minute"
    api_debug: bool = False

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_dir: str = "logs"


settings = Settings()
