class AdLoaderError(Exception):
    """Base class for ad content that failed to materialize"""


class LoadTimeoutError(AdLoaderError):
    """No load signal within the time bound"""


class LoadError(AdLoaderError):
    """The host reported an error loading the resource"""


class ContainerNotFoundError(AdLoaderError):
    """No element with the requested id exists on the page"""
