# --- Field Weights ---
# Applied to a field's similarity before the per-word max across fields.

TITLE_WEIGHT = 1.5
DESCRIPTION_WEIGHT = 1.0
CATEGORY_WEIGHT = 1.2


# --- Similarity ---

EXACT_MATCH_SCORE = 1.0
SUBSTRING_MATCH_SCORE = 0.9  # below exact so exact matches always outrank containment


# --- Ranking ---

DEFAULT_THRESHOLD = 0.6
MAX_RECORD_SCORE = 1.0  # running per-record cap, applied after every query word


# --- Display Truncation ---

TITLE_TRUNCATE = 60
CATEGORY_TRUNCATE = 30
