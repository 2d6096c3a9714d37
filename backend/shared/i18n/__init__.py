from shared.i18n.context import get_language, reset_language, set_language
from shared.i18n.middleware import install_i18n_middleware

__all__ = [
    "get_language",
    "install_i18n_middleware",
    "reset_language",
    "set_language",
]
