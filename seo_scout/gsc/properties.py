# seo_scout/gsc/properties.py
"""Search Console properties readable with a given access token."""
from __future__ import annotations

from typing import List

from seo_scout.gsc.api import SearchConsoleAPI
from seo_scout.models import SearchProperty

ALLOWED_PERMISSIONS = ("siteOwner", "siteFullUser")


class PropertyLister(SearchConsoleAPI):
    async def list_properties(self, access_token: str) -> List[SearchProperty]:
        """Owner and full-user properties, in the order Google returns them."""
        data = await self._call("GET", "/sites", access_token)
        properties: List[SearchProperty] = []
        for entry in data.get("siteEntry") or []:
            level = entry.get("permissionLevel", "")
            if level not in ALLOWED_PERMISSIONS:
                continue
            properties.append(
                SearchProperty(
                    site_url=entry.get("siteUrl", ""),
                    permission_level=level,
                )
            )
        return properties


__all__ = ["PropertyLister", "ALLOWED_PERMISSIONS"]
