"""Core constants: REST endpoints, auth scopes, and query parameter keys."""

# OAuth scopes required by the Realtime Database REST API.
FIREBASE_SCOPES = (
    "https://www.googleapis.com/auth/firebase.database",
    "https://www.googleapis.com/auth/userinfo.email",
)

# Google access tokens live 3600s; refresh early so a token never expires mid-request.
DEFAULT_TOKEN_TTL_SECONDS = 3300.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0

JSON_SUFFIX = ".json"

# Key under which table rows carry their RowId when returned to callers.
ROW_ID_KEY = "id"

# Filter/limit keys: string values are sent as quoted JSON literals.
FILTER_QUERY_KEYS = frozenset({
    "orderBy", "equalTo", "startAt", "endAt",
    "limitToFirst", "limitToLast", "shallow",
})
# Output control keys: sent verbatim (print=pretty, format=export, timeout=3s).
RAW_QUERY_KEYS = frozenset({"print", "format", "timeout"})
QUERY_KEYS = FILTER_QUERY_KEYS | RAW_QUERY_KEYS
