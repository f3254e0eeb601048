VERSION_MAJOR = 0
VERSION_MINOR = 0
VERSION_REVISION = 1

SIGNATURE = "Talks"


def version() -> str:
    return f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_REVISION}"


def signature() -> str:
    return SIGNATURE


def server_header() -> str:
    """Value of the Server header sent with every response, e.g. Talks/0.0.1."""
    return f"{signature()}/{version()}"
