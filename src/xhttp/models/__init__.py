from .body import Body, FormBody, JsonBody, MultipartBody, RawBody
from .errors import (
    ConflictingBodySources,
    DownloadError,
    IncompatibleBodyFields,
    InvalidUrl,
    MalformedRequestItem,
    TransportError,
    XhttpError,
)
from .print_options import Pretty, PrintOptions
from .request_items import (
    DataField,
    FileField,
    HeaderToSet,
    HeaderToUnset,
    JsonField,
    RequestItem,
    UrlQueryParam,
)

__all__ = [
    "Body",
    "FormBody",
    "JsonBody",
    "MultipartBody",
    "Pretty",
    "PrintOptions",
    "RawBody",
    "ConflictingBodySources",
    "DownloadError",
    "IncompatibleBodyFields",
    "InvalidUrl",
    "MalformedRequestItem",
    "TransportError",
    "XhttpError",
    "DataField",
    "FileField",
    "HeaderToSet",
    "HeaderToUnset",
    "JsonField",
    "RequestItem",
    "UrlQueryParam",
]
