from .assets_api import router as assets_api_router
from .packages_api import router as packages_api_router
from .requests_api import router as requests_api_router
from .team_api import router as team_api_router

ALL_ROUTERS = (
    assets_api_router,
    requests_api_router,
    team_api_router,
    packages_api_router,
)
