import ssl


def default_ssl_context() -> ssl.SSLContext:
    """
    Returns an SSL context using the system trust store, with certificate
    and hostname verification enabled.
    """
    context = ssl.create_default_context()
    context.set_alpn_protocols(["http/1.1"])
    return context
