"""
Domain entity for an inbound moderation report.
Zero external dependencies: pure Python dataclass only.
"""

from dataclasses import dataclass

NO_REASON = "No reason provided"
UNKNOWN_SERVER = "Unknown"


@dataclass(frozen=True)
class PlayerReport:
    client_name: str
    reported_player_name: str
    reason: str = NO_REASON
    server_id: str = UNKNOWN_SERVER
    auto_moderated: bool = False
