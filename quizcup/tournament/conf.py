"""
Engine settings read from the Django settings module, with defaults.
"""

from django.conf import settings

from quizcup.tournament_core.layout import LayoutConfig


def layout_config():
    return LayoutConfig.from_dict(getattr(settings, "QUIZCUP_BRACKET_LAYOUT", None))


def default_min_teams():
    return getattr(settings, "QUIZCUP_DEFAULT_MIN_TEAMS", 2)


def default_max_teams():
    return getattr(settings, "QUIZCUP_DEFAULT_MAX_TEAMS", 16)


def auto_complete_elimination():
    return getattr(settings, "QUIZCUP_AUTO_COMPLETE_ELIMINATION", False)
