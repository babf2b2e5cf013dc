import logging
import os

from fastapi import APIRouter, FastAPI

from ..consts import API_PREFIX
from .routes import forms

logger = logging.getLogger(__name__)


def create_app(settings=None, declarations=None) -> FastAPI:
    """Create the HTTP application.

    Args:
        settings: Settings object (loaded from ``SMARTFORM_CONFIG_FILE`` when
            not provided)
        declarations: Mapping of form name -> FormDeclaration (loaded from
            ``settings.forms`` when not provided)
    """
    from ..config import Settings
    from ..loader import load_forms

    if settings is None:
        config_file = os.environ.get("SMARTFORM_CONFIG_FILE")
        settings = Settings.load_from_file(config_file) if config_file else Settings()

    if declarations is None:
        declarations = load_forms(settings.forms)

    app = FastAPI(title="SmartForm API")

    app.state.settings = settings
    app.state.declarations = dict(declarations)

    api_router = APIRouter(prefix=API_PREFIX)
    api_router.include_router(forms.router)
    app.include_router(api_router)

    logger.info(f"Serving {len(app.state.declarations)} form(s)")
    return app
