from dotenv import load_dotenv
from dataclasses import dataclass
import os

from .errors import require_positive

load_dotenv()

# ============================================================
# 🧩 Shingling
# ============================================================
SHINGLE_LENGTH = int(os.getenv("SHINGLE_LENGTH", 2))   # tokens per shingle


# ============================================================
# 🎲 MinHash estimator
# ============================================================
PERMUTATIONS = int(os.getenv("PERMUTATIONS", 4000))    # simulated hash functions (columns)
RUNS = int(os.getenv("RUNS", 5))                       # repetitions for averaged comparisons

# Rows of the permutation matrix materialized at once when reducing column minima
PERMUTATION_CHUNK_ROWS = int(os.getenv("PERMUTATION_CHUNK_ROWS", 1024))


# ============================================================
# 📂 Document database
# ============================================================
DB_DIR = os.getenv("DB_DIR", "db")
DB_LISTING = os.getenv("DB_LISTING", "init.txt")


# ============================================================
# 📊 Reports
# ============================================================
BAR_WIDTH = int(os.getenv("BAR_WIDTH", 10))


# ============================================================
# 🧪 Debugging
# ============================================================
ENABLE_DEBUG_LOGS = os.getenv("ENABLE_DEBUG_LOGS", "false").lower() == "true"


@dataclass
class SimilaritySettings:
    """
    Tuning values for one comparison (or one averaged comparison).
    Defaults come from the environment-driven module values above.
    """
    shingle_length: int = SHINGLE_LENGTH
    permutations: int = PERMUTATIONS
    runs: int = RUNS
    chunk_rows: int = PERMUTATION_CHUNK_ROWS

    def validate(self) -> "SimilaritySettings":
        require_positive("shingle_length", self.shingle_length)
        require_positive("permutations", self.permutations)
        require_positive("runs", self.runs)
        require_positive("chunk_rows", self.chunk_rows)
        return self
