from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    WIN = "WIN"
    TIE = "TIE"
    LOSS = "LOSS"


class Street(str, Enum):
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"


@dataclass
class SimulationConfig:
    samples: int = 1_000_000
    seed: int = 1
    workers: Optional[int] = None  # None uses every CPU
    chunk_size: int = 10_000


@dataclass
class ServiceConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    max_samples: int = 100_000
    max_opponents: int = 8
    workers: Optional[int] = 1
    seed: int = 1
