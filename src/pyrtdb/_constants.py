"""Internal constants shared across the library."""

USER_AGENT = "pyrtdb/aiohttp"

# Addressing suffix appended to the last path segment of every data URL.
JSON_SUFFIX = ".json"

# ------------------------------------------------------------------
# Query string vocabulary (case-sensitive REST tokens)
# ------------------------------------------------------------------

AUTH = "auth"
ORDER_BY = "orderBy"
LIMIT_TO_FIRST = "limitToFirst"
LIMIT_TO_LAST = "limitToLast"
START_AT = "startAt"
END_AT = "endAt"
EQUAL_TO = "equalTo"
SHALLOW = "shallow"
FORMAT = "format"
EXPORT = "export"

# ------------------------------------------------------------------
# Headers
# ------------------------------------------------------------------

ETAG_REQUEST_HEADER = "X-Firebase-ETag"
IF_MATCH_HEADER = "if-match"
ETAG_RESPONSE_HEADER = "ETag"

STATUS_PRECONDITION_FAILED = 412

# ------------------------------------------------------------------
# Server-Sent Events
# ------------------------------------------------------------------

EVENT_STREAM = "text/event-stream"
KEEP_ALIVE_EVENT = "keep-alive"
NULL_PAYLOAD = "null"
