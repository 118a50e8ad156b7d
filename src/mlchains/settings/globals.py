from typing import List

# ==========================================
# Base learner
# ==========================================
DEFAULT_BASE_ALGORITHM: str = "LGBM"

# ==========================================
# Execution
# ==========================================
DEFAULT_CORES: int = 1

# ==========================================
# Ensembles
# ==========================================
DEFAULT_N_MODELS: int = 10
DEFAULT_SUBSAMPLE: float = 0.75
DEFAULT_ATTR_SPACE: float = 0.5
DEFAULT_REPLACEMENT: bool = True

MIN_SUBSAMPLE: float = 0.1
MIN_ATTR_SPACE: float = 0.1

# ==========================================
# Prediction
# ==========================================
DEFAULT_THRESHOLD: float = 0.5
DEFAULT_PROBABILITY: bool = True
DEFAULT_VOTE_SCHEMA: str = "maj"

# Order matters only for error messages
VOTE_SCHEMAS: List[str] = [
    "avg",
    "maj",
    "max",
    "min",
]
