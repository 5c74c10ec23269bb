"""Session domain model — immutable; transitions return a new Session."""

from dataclasses import dataclass, replace

from src.ml_common.enums import SessionStatus


def normalize_chain_id(chain_id: str | int) -> str:
    """'0xAA36A7' / 11155111 -> '0xaa36a7'."""
    if isinstance(chain_id, int):
        return hex(chain_id)
    text = str(chain_id).strip().lower()
    if text.startswith("0x"):
        return hex(int(text, 16))
    return hex(int(text))


@dataclass(frozen=True)
class Session:
    status: SessionStatus = SessionStatus.DISCONNECTED
    address: str | None = None
    chain_id: str | None = None

    @property
    def is_connected(self) -> bool:
        return self.status == SessionStatus.CONNECTED

    def connecting(self) -> "Session":
        return replace(self, status=SessionStatus.CONNECTING)

    def connected(self, address: str, chain_id: str) -> "Session":
        return Session(
            status=SessionStatus.CONNECTED,
            address=address,
            chain_id=normalize_chain_id(chain_id),
        )

    def disconnected(self) -> "Session":
        return Session()

    def with_address(self, address: str) -> "Session":
        return replace(self, address=address)

    def is_expected_network(self, expected_chain_id: str) -> bool:
        if self.chain_id is None:
            return False
        return self.chain_id == normalize_chain_id(expected_chain_id)

    def network_label(self, expected_chain_id: str, network_name: str) -> str:
        if self.chain_id is None:
            return "Unknown"
        if self.is_expected_network(expected_chain_id):
            return network_name
        return f"Chain: {self.chain_id}"
