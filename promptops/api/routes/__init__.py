"""API routes."""

from fastapi import APIRouter

from promptops.api.routes import asset_versions, deployments, environments, prompt_versions

PROJECT_PREFIX = "/projects/{project_id}"

api_router = APIRouter()

api_router.include_router(asset_versions.router, prefix=PROJECT_PREFIX, tags=["asset-versions"])
api_router.include_router(prompt_versions.router, prefix=PROJECT_PREFIX, tags=["prompt-versions"])
api_router.include_router(deployments.router, prefix=PROJECT_PREFIX + "/deployments", tags=["deployments"])
api_router.include_router(environments.router, prefix=PROJECT_PREFIX + "/environments", tags=["environments"])
