"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type alias to make SessionModel easier to read
AlgebraicSquare = str


@dataclass
class SessionModel:
    """Transport-safe representation of a board session used between API, Service, DB, and domain layers."""

    starting_fen: Optional[str] = None
    moves_uci: list[str] = field(default_factory=list)
    selected_square: Optional[AlgebraicSquare] = None
    pending_promotion: Optional[list[AlgebraicSquare]] = None
