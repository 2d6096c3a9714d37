from __future__ import annotations

from fastapi import FastAPI, Request

from shared.i18n.context import reset_language, set_language
from shared.utils.language import get_accept_language


def install_i18n_middleware(app: FastAPI) -> None:
    """
    Install the request-scoped language.

    The language comes from ``?lang=`` or ``Accept-Language`` and is available
    through ``shared.i18n.get_language`` for the whole request, including the
    exception filter that renders the error envelope.
    """

    @app.middleware("http")
    async def _i18n_middleware(request: Request, call_next):
        token = set_language(get_accept_language(request))
        try:
            return await call_next(request)
        finally:
            reset_language(token)
