class UpstreamFetchError(RuntimeError):
    """Quote provider or network failure; the whole request is failed."""
