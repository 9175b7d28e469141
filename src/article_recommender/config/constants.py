"""Constants for the recommender configuration."""

# Algorithm identity reported in response metadata and algorithm info
ALGORITHM_NAME = "rule-based-v1"
ALGORITHM_VERSION = "1.0.0"

# Interest matching weights (additive per field a term is found in)
TITLE_MATCH_WEIGHT: float = 3.0
SUMMARY_MATCH_WEIGHT: float = 2.0
CONTENT_MATCH_WEIGHT: float = 1.0
# Flat bonus per distinct matched term, applied once per article
MULTI_INTEREST_BONUS: float = 0.5

# Popularity weights
POPULARITY_LIKES_WEIGHT: int = 2
POPULARITY_VIEWS_WEIGHT: int = 1
# Keeps popularity picks below interest picks of comparable engagement
POPULARITY_SCORE_SCALE: float = 0.1

# Trending weights
TRENDING_LIKES_WEIGHT: int = 3
TRENDING_VIEWS_WEIGHT: int = 1

# Share of the result list offered to interest matching first
INTEREST_SHARE: float = 0.6

# Request limits
MIN_LIMIT: int = 1
MAX_LIMIT: int = 50
DEFAULT_LIMIT: int = 10

# Log component names
COMPONENT_CONFIG = "config"
COMPONENT_CLI = "cli"
COMPONENT_ENGINE = "engine"
COMPONENT_STORE = "store"
COMPONENT_TRENDING = "trending"
