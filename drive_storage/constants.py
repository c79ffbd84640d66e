"""
Shared constants for drive-storage.
"""

# Drive v3 REST endpoints
API_BASE = "https://www.googleapis.com/drive/v3"
UPLOAD_BASE = "https://www.googleapis.com/upload/drive/v3"
TOKEN_URI = "https://oauth2.googleapis.com/token"
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"

# Full access is needed to create and delete files
DRIVE_SCOPES = ("https://www.googleapis.com/auth/drive",)

# Fields requested for every file resource we turn into a RemoteObject
FILE_FIELDS = "id, name, mimeType, size, createdTime, modifiedTime, webViewLink, webContentLink"

DEFAULT_MIME_TYPE = "application/octet-stream"

# Drive rejects pageSize outside this range
MAX_PAGE_SIZE = 1000

# Environment keys read by DriveSettings.from_env()
ENV_ENABLED = "GOOGLE_DRIVE_ENABLED"
ENV_CLIENT_ID = "GOOGLE_CLIENT_ID"
ENV_CLIENT_SECRET = "GOOGLE_CLIENT_SECRET"
ENV_REDIRECT_URI = "GOOGLE_REDIRECT_URI"
ENV_REFRESH_TOKEN = "GOOGLE_REFRESH_TOKEN"
ENV_TOKEN_URI = "GOOGLE_TOKEN_URI"
