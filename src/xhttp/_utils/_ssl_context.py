import os
import ssl
from typing import Optional, Union


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    # Expand environment variables like $HOME
    path = os.path.expandvars(path)
    # Expand user home directory ~
    path = os.path.expanduser(path)
    return path


def create_ssl_context(ca_bundle: Optional[str] = None) -> ssl.SSLContext:
    if ca_bundle:
        return ssl.create_default_context(cafile=expand_path(ca_bundle))

    # Try truststore first (system certificates)
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        # Fallback to manual certificate configuration
        import certifi

        ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
        requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
        ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

        return ssl.create_default_context(
            cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
            capath=ssl_cert_dir,
        )


def get_verify(
    verify: str = "yes",
    cert: Optional[str] = None,
    cert_key: Optional[str] = None,
) -> Union[ssl.SSLContext, bool]:
    """Build the value passed as ``verify`` to the httpx client.

    Args:
        verify: ``yes``, ``no``, or the path of a CA bundle.
        cert: Optional client certificate (PEM), possibly including the key.
        cert_key: Optional private key for ``cert`` when it is a separate file.

    Returns:
        ``False`` when verification is disabled and no client certificate is
        configured, otherwise an ``ssl.SSLContext``.
    """
    choice = verify.lower()
    if choice in ("no", "false"):
        if not cert:
            return False
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif choice in ("yes", "true"):
        context = create_ssl_context()
    else:
        context = create_ssl_context(ca_bundle=verify)

    if cert:
        context.load_cert_chain(expand_path(cert), keyfile=expand_path(cert_key))
    return context
