# backend/previewer/constants.py
"""
Application-wide constants.
"""

# =============================================================================
# IMAGE FORMATS
# =============================================================================

# Names Pillow or callers use that map onto a canonical format
FORMAT_ALIASES = {
    "jpg": "jpeg",
    "jpe": "jpeg",
    "mpo": "jpeg",
    "tif": "tiff",
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# =============================================================================
# ASSET IDENTIFIERS
# =============================================================================

# Variant key reserved for the unmodified source image
ORIG_VARIANT_KEY = "orig"

# ObjectId-style identifiers: 4 byte timestamp followed by 8 zero bytes
ASSET_ID_TIMESTAMP_HEX_DIGITS = 8
ASSET_ID_SUFFIX = "0" * 16

# Separator between the orig identifier and a variant key
ASSET_FILENAME_SEPARATOR = "_"

# Asset names become file names; keep them to a safe character set
SAFE_ASSET_NAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"

# Variant keys are appended to the orig identifier to form asset names
VARIANT_KEY_PATTERN = r"^[A-Za-z0-9._-]+$"
