"""Configuration loading for the doctor."""

__all__ = ["BUNDLED_COMPATIBILITY_FILE", "COMPATIBILITY_URL_ENV", "CONFIG_DIR_ENV", "ConfigController"]


def __getattr__(name: str):
    if name in __all__:
        from config import controller

        return getattr(controller, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
