"""
Preference Routes
=================

Endpoints backing the settings screen: which apps are monitored, and the
onboarding / disclosure flags.
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from shorts_blocker.preferences.catalog import find_package
from shorts_blocker.preferences.store import PreferencesStore
from shorts_blocker.api.deps import get_store
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Preferences"])


class TrackedPackageResponse(BaseModel):
    """One catalog entry with its enabled flag."""

    package_name: str
    display_name: str
    description: str
    enabled: bool


class PackageListResponse(BaseModel):
    packages: list[TrackedPackageResponse]
    total: int


class TogglePackageRequest(BaseModel):
    enabled: bool = Field(description="Whether the app should be monitored")


class FlagRequest(BaseModel):
    value: bool = Field(default=True, description="New flag value")


class PreferencesResponse(BaseModel):
    """All user preferences."""

    tracked_packages: list[str]
    onboarding_completed: bool
    disclosure_accepted: bool


def _package_list(store: PreferencesStore) -> PackageListResponse:
    packages = [
        TrackedPackageResponse(
            package_name=pkg.package_name,
            display_name=pkg.display_name,
            description=pkg.description,
            enabled=pkg.enabled,
        )
        for pkg in store.get_tracked_packages_with_status()
    ]
    return PackageListResponse(packages=packages, total=len(packages))


def _preferences(store: PreferencesStore) -> PreferencesResponse:
    return PreferencesResponse(
        tracked_packages=store.get_tracked_packages(),
        onboarding_completed=store.onboarding_completed,
        disclosure_accepted=store.disclosure_accepted,
    )


@router.get(
    "/packages",
    response_model=PackageListResponse,
    summary="List supported apps",
)
async def list_packages(store: PreferencesStore = Depends(get_store)) -> PackageListResponse:
    return await asyncio.to_thread(_package_list, store)


@router.put(
    "/packages/{package_name}",
    response_model=PackageListResponse,
    summary="Enable or disable monitoring for an app",
)
async def toggle_package(
    package_name: str,
    request: TogglePackageRequest,
    store: PreferencesStore = Depends(get_store),
) -> PackageListResponse:
    """
    Toggle monitoring for one app.

    Raises:
        HTTPException: 404 if the app is not in the catalog.
    """
    if find_package(package_name) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown package: {package_name}",
        )

    await asyncio.to_thread(store.toggle_package, package_name, request.enabled)
    return await asyncio.to_thread(_package_list, store)


@router.get(
    "/preferences",
    response_model=PreferencesResponse,
    summary="Get all preferences",
)
async def get_preferences(store: PreferencesStore = Depends(get_store)) -> PreferencesResponse:
    return await asyncio.to_thread(_preferences, store)


@router.put(
    "/preferences/onboarding",
    response_model=PreferencesResponse,
    summary="Mark onboarding as completed",
)
async def set_onboarding(
    request: FlagRequest,
    store: PreferencesStore = Depends(get_store),
) -> PreferencesResponse:
    logger.info("Setting onboarding completed", value=request.value)

    def _update() -> PreferencesResponse:
        store.onboarding_completed = request.value
        return _preferences(store)

    return await asyncio.to_thread(_update)


@router.put(
    "/preferences/disclosure",
    response_model=PreferencesResponse,
    summary="Record the prominent disclosure decision",
)
async def set_disclosure(
    request: FlagRequest,
    store: PreferencesStore = Depends(get_store),
) -> PreferencesResponse:
    logger.info("Setting disclosure accepted", value=request.value)

    def _update() -> PreferencesResponse:
        store.disclosure_accepted = request.value
        return _preferences(store)

    return await asyncio.to_thread(_update)
