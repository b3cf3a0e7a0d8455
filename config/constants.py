"""
Centralized constants for Courseware Studio.
Fixed values shared by the editor, pagination and exporters.
"""

# ===========================================
# BLOCK EDITING
# ===========================================
FONT_SIZE_STEP = 2                    # px per increase/decrease click
MIN_FONT_SIZE = 8                     # floor for customFontSize
SUBSECTION_SIZE_RATIO = 0.85          # subsection default = subtitle size * ratio
DEFAULT_DEFINITION_TERM = "Term"      # placeholder term when converting to a definition
DEFAULT_IMAGE_CAPTION = "Manually inserted image"
IMAGE_ID_PREFIX = "img_"
PROJECT_ID_PREFIX = "proj_"
ID_RANDOM_LENGTH = 7
ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

# ===========================================
# PAGINATION
# ===========================================
A4_PAGE_HEIGHT_PX = 1123              # A4 at 96 dpi in the reference browser
A4_PAGE_WIDTH_PX = 794
PAGE_PADDING_PX = 76                  # 2cm padding of the page container
TOC_PLACEHOLDER_GLYPH = "⇲"

# ===========================================
# EXPORT
# ===========================================
PRINT_SETTLE_DELAY_MS = 1000          # wait for images/fonts before print()
WORD_IMAGE_WIDTH_PX = 400
WORD_CONTENT_TYPE = "application/vnd.ms-word;charset=utf-8"
WORD_FILE_EXTENSION = ".doc"
DEFAULT_EXPORT_NAME = "Courseware"
PRINT_WINDOW_TITLE = "Courseware Preview"

# ===========================================
# WORD COUNT VERIFICATION
# ===========================================
WORD_COUNT_RATIO_THRESHOLD = 0.7      # below this, structured output may have lost content

# ===========================================
# PERSISTENCE
# ===========================================
AUTOSAVE_DELAY_MS = 500
STORAGE_QUOTA_MB = 5
STORAGE_WARNING_MB = 3

# ===========================================
# FILE HANDLING
# ===========================================
SUPPORTED_IMPORT_EXTENSIONS = ['.txt', '.docx']
LEGACY_WORD_EXTENSIONS = ['.doc', '.gdoc']
IMPORTED_IMAGE_TOKEN = "[Image imported: {image_id}]"
MAX_FILE_SIZE_MB = 50

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/courseware.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
RAW_OUTPUT_LOG_LIMIT = 2000           # chars of unparseable AI output kept in logs
