"""Exception hierarchy for Plugin Bridge."""


class BridgeError(Exception):
    """Base class for all fatal conversion errors."""


class PluginParseError(BridgeError):
    """Source plugin files could not be read into the entity model."""


class ConfigError(BridgeError):
    """An existing server config file is not the expected JSON structure."""


class UnsafePathError(BridgeError):
    """An identifier would escape its output directory."""


class UnknownTargetError(BridgeError):
    """No target is registered under the requested name."""
