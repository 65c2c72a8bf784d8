from dataclasses import dataclass, fields, replace


@dataclass
class Settings:
    verify_constant_names: bool = False


_settings = Settings()


def get_settings() -> Settings:
    return _settings


def configure(**changes) -> Settings:
    """
    Update the process-wide settings.

    Raises:
        TypeError: If a keyword does not name a setting
    """
    global _settings
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise TypeError(f"Unknown setting(s): {', '.join(unknown)}")
    _settings = replace(_settings, **changes)
    return _settings


def reset_settings() -> Settings:
    global _settings
    _settings = Settings()
    return _settings
