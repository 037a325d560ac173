# Environment variables
ENV_CONFIG_DIR = "XHTTP_CONFIG_DIR"
ENV_DEFAULT_SCHEME = "XHTTP_DEFAULT_SCHEME"
ENV_STYLE = "XHTTP_STYLE"
ENV_TIMEOUT = "XHTTP_TIMEOUT"

# Configuration
CONFIG_FILE = "config.json"
DEFAULT_CONFIG_DIR = "~/.config/xhttp"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_ACCEPT_ENCODING = "Accept-Encoding"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONNECTION = "Connection"
HEADER_CONTENT_DISPOSITION = "Content-Disposition"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_CONTENT_RANGE = "Content-Range"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_RANGE = "Range"
HEADER_USER_AGENT = "User-Agent"

# Header values
ACCEPT_ANY = "*/*"
ACCEPT_JSON = "application/json, */*"
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
ENCODING_COMPRESSED = "gzip, deflate"
ENCODING_IDENTITY = "identity"
CONNECTION_KEEP_ALIVE = "keep-alive"

# Defaults
DEFAULT_SCHEME = "https"
DEFAULT_STYLE = "ansi_dark"
DEFAULT_MAX_REDIRECTS = 10
CHUNK_SIZE = 64 * 1024
# Bodies up to this size are read whole so they can be reformatted.
MAX_BUFFERED_BODY = 4 * 1024 * 1024
