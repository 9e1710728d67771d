LOG_PATH = "./assets/log"

LOGGING_LEVEL: str = "INFO"

# ground-set type tag used when callers do not supply one
DEFAULT_SET_TYPE: str = "default"

# one of "cardinality", "weight", "weighted_cardinality"
INTERSECTION_MODE: str = "weighted_cardinality"

# absolute tolerance when comparing path costs built from float weights
WEIGHT_TOLERANCE: float = 1e-9

NUM_ELEMENTS_LIST: list[int] = [8, 16, 32]
RANDOM_SEED: int = 2024
