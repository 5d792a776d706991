"""SDK version and well-known content types."""

VERSION = "7.9.8"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_OCTET = "application/octet-stream"
CONTENT_TYPE_MULTIPART = "multipart/form-data"