"""
Centralized constants for the Content Format Engine.
All thresholds used by the classifier, validator and migration pipeline.
"""

# ===========================================
# CLASSIFIER
# ===========================================
CLASSIFIER_MIN_LENGTH = 10            # shorter content is flagged
CLASSIFIER_MARKUP_TEXT_RATIO = 0.3    # text share below this = markup-heavy
CLASSIFIER_HTML_CONFIDENCE = 0.9
CLASSIFIER_HTML_HEAVY_CONFIDENCE = 0.6
CLASSIFIER_MARKDOWN_CONFIDENCE = 0.8
CLASSIFIER_MARKDOWN_MIN_MATCHES = 2   # pattern categories required
CLASSIFIER_ANGLE_CONFIDENCE = 0.7
CLASSIFIER_PLAIN_CONFIDENCE = 0.8
CLASSIFIER_CACHE_SIZE = 500           # memoized classifications

# ===========================================
# MARKUP
# ===========================================
# Tags that mark content as genuine HTML-like markup
MARKUP_DETECTION_TAGS = [
    'p', 'div', 'strong', 'b', 'em', 'i',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'ul', 'ol', 'li', 'span', 'br',
]

# Canonical storage dialect (sanitizer allow-list)
ALLOWED_TAGS = [
    'p', 'strong', 'b', 'em', 'i', 'u',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'ul', 'ol', 'li', 'code', 'pre', 'blockquote',
    'br', 'div', 'span',
]

SELF_CLOSING_TAGS = ['br', 'hr', 'img', 'input', 'meta', 'link']

# ===========================================
# VALIDATION
# ===========================================
EDIT_MIN_LENGTH = 10                  # hard floor (error)
EDIT_SOFT_MAX_LENGTH = 50000          # soft ceiling (warning)
EDIT_MAX_CONSECUTIVE_BLANK_LINES = 5
EDIT_MISMATCH_CONFIDENCE = 0.8        # mismatch warning only above this

STORAGE_MIN_LENGTH = 5                # hard floor (high)
STORAGE_MAX_LENGTH = 100000           # hard ceiling (critical)
STORAGE_MIN_CONFIDENCE = 0.3          # below = unreliable detection
STORAGE_MIN_WORD_DIVERSITY = 0.3      # unique / total words
STORAGE_DIVERSITY_MIN_WORDS = 10      # diversity checked above this count

MARKUP_MIN_TEXT_LENGTH = 10           # markup with less text is flagged
PLACEHOLDER_SOFT_LIMIT = 20           # advisory above this count

# ===========================================
# MIGRATION
# ===========================================
MIGRATION_BATCH_SIZE = 10
MIGRATION_BATCH_DELAY_SECONDS = 0.1   # pause between batches
MIGRATION_SKIP_CONFIDENCE = 0.8       # html above this may be skipped
MIGRATION_IDENTIFY_CONFIDENCE = 0.7   # below = needs migration
MIGRATION_WORD_PRESERVATION = 0.8     # min word ratio after migration
BACKUP_VERSION = '1.0.0'

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/content_engine.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
