from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Wallet / node JSON-RPC endpoint (serves both eth_requestAccounts and eth_call)
    PROVIDER_URL: str = "http://localhost:8545"
    RPC_TIMEOUT_SECONDS: float = 30.0

    # Contract (Sepolia deployment)
    CONTRACT_ADDRESS: str = "0x85CeaE21aEE270cfe6d6829f02B1eB49f58B7AbE"
    EXPECTED_CHAIN_ID: str = "0xaa36a7"  # 11155111, display comparison only
    NETWORK_NAME: str = "Sepolia"

    # Receipt polling; there is deliberately no overall confirmation timeout
    RECEIPT_POLL_INTERVAL: float = 2.0

    # accountsChanged / chainChanged detection; 0 disables the watcher
    WALLET_WATCH_INTERVAL: float = 2.0

    # Re-read unlockTime right before computing an extension instead of
    # trusting the cached value
    FRESH_READ_BEFORE_EXTEND: bool = False

    # App
    APP_NAME: str = "MetaLocked"
    DEBUG: bool = False  # Safe default; set DEBUG=True in .env for verbose logging


settings = Settings()
