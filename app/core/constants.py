"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure. Used by the cache key
builders and by repositories when invalidating a whole entity type.
"""

# Cache key prefixes (one per cached entity type)
CACHE_PREFIX_PROFILE = "profile"
CACHE_PREFIX_EDUCATION = "education"
CACHE_PREFIX_INSTITUTIONS = "institutions"
CACHE_PREFIX_PROGRAMS = "programs"
CACHE_PREFIX_MAJORS = "majors"
CACHE_PREFIX_COHORTS = "cohorts"
CACHE_PREFIX_MILESTONES = "milestones"
CACHE_PREFIX_TEAMS = "teams"
CACHE_PREFIX_PARTICIPATION = "participation"
CACHE_PREFIX_APPLICATIONS = "applications"
CACHE_PREFIX_SUBMISSIONS = "submissions"
CACHE_PREFIX_RESOURCES = "resources"
CACHE_PREFIX_EVENTS = "events"
CACHE_PREFIX_POINTS = "points"
CACHE_PREFIX_REWARDS = "rewards"
CACHE_PREFIX_PARTNERSHIPS = "partnerships"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Upload constraints
UPLOAD_KEY_PREFIX = "uploads"

# Record ids per RECORD_ID() OR formula; keeps filterByFormula under the URL limit
RECORD_ID_BATCH_SIZE = 10
