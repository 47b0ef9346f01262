"""Global constants for the oneman application."""

# Collection names
USERS_COLLECTION = "users"
SITES_COLLECTION = "sites"
STORES_COLLECTION = "stores"
MESSAGES_COLLECTION = "messages"

# Group kinds and the collection that stores each of them
GROUP_COLLECTIONS = {
    "site": SITES_COLLECTION,
    "store": STORES_COLLECTION,
}

# Message types
MESSAGE_TEXT = "text"
MESSAGE_IMAGE = "image"
MESSAGE_MATERIAL = "material"

# Author of messages generated by the application itself
SYSTEM_USER_ID = "system"
SYSTEM_USER_NAME = "System"
ANONYMOUS_USER_NAME = "Anonymous"

# User directory lookup
SEARCH_MIN_LENGTH = 2
SEARCH_RESULT_LIMIT = 10
PREFIX_SEARCH_SENTINEL = "\uf8ff"

# Image uploads
CHAT_UPLOAD_FOLDER = "chat"
PROFILE_UPLOAD_FOLDER = "profile"
