"""
Default configuration values for thumby.

Note: User-tunable settings (image caching, stored info, API key) are
resolved by config/loader.py which supports environment variables, project
config, and user config.
"""

# Discovery-metadata (oEmbed) endpoints
YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"
VIMEO_OEMBED_URL = "https://vimeo.com/api/oembed.json"

# YouTube Data API v3 (backup when oEmbed refuses a video)
YOUTUBE_API_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"
YOUTUBE_API_CHANNELS_URL = "https://www.googleapis.com/youtube/v3/channels"

# oEmbed thumbnails are letterboxed for YouTube, so the fixed 16:9 variant is used
YOUTUBE_THUMBNAIL_URL = "https://i.ytimg.com/vi/{video_id}/mqdefault.jpg"
YOUTUBE_CHANNEL_URL = "https://www.youtube.com/{custom_url}"

ODYSEE_BASE_URL = "https://odysee.com"

# Author link used when the channel lookup fails
NOOP_AUTHOR_URL = "#"

# Timeouts (seconds)
REQUEST_TIMEOUT = 10.0
THUMBNAIL_TIMEOUT = 15.0

# Saved thumbnails are always written with this extension
IMAGE_EXTENSION = ".jpg"

# Code block language that marks a video reference in a Markdown note
BLOCK_LANGUAGE = "vid"

# Fixed user-facing messages
CANNOT_FIND_VIDEO = "Cannot find video"
MULTIPLE_URLS = "Cannot accept multiple video URLs yet"
MISSING_IMAGE_FOLDER = "Cannot find image folder: {folder}"
INVALID_CLIPBOARD = "Clipboard does not contain a supported video URL"

# Notification display time (milliseconds)
NOTICE_DURATION_MS = 4000
