class GrantBrowserError(Exception):
    """Base exception for all grant_browser errors"""
    pass


class ConfigError(GrantBrowserError):
    """Invalid global.json or missing required collaborators"""
    pass


class DataLoadError(GrantBrowserError):
    """
    Grant table could not be read or doesn't have the columns the store expects
    (grantor_id, grantee_id, amount, year, ...)
    """
    pass


class UnknownPresetError(GrantBrowserError):
    """No preset registered under the requested name"""
    pass
