"""Application-wide constants.

This module centralizes magic numbers and Graph API details so the
client, settings and tests share a single source of truth.
"""

# =============================================================================
# Facebook Graph API
# =============================================================================

# Graph API host
FACEBOOK_GRAPH_API_HOST = "https://graph.facebook.com"

# Graph API version used when no base URL override is configured
FACEBOOK_GRAPH_API_VERSION = "v2.6"

# Send API path, relative to the versioned base URL
SEND_API_PATH = "me/messages"

# Webhook object type for Page subscriptions
WEBHOOK_OBJECT_PAGE = "page"

# Handshake mode sent by Facebook when subscribing a webhook
WEBHOOK_SUBSCRIBE_MODE = "subscribe"

# =============================================================================
# HTTP Timeout Configuration
# =============================================================================

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# =============================================================================
# Handler Dispatch
# =============================================================================

# Maximum number of event handlers running at the same time
MAX_CONCURRENT_HANDLERS = 100

# How long shutdown waits for outstanding handlers (seconds)
HANDLER_DRAIN_TIMEOUT_SECONDS = 30.0

# =============================================================================
# Logging
# =============================================================================

# Maximum number of response body characters included in error logs
LOG_RESPONSE_BODY_CHARS = 500
