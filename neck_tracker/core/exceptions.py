"""Exceptions raised by neck_tracker."""


class InvalidLandmarksError(ValueError):
    """Landmark frame cannot be turned into finite rotation angles."""


class ConfigError(ValueError):
    """Estimator configuration value is out of its allowed range."""
