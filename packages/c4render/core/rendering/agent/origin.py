"""Virtual origin served to the rendering agent.

All requests to the origin are intercepted: ``workspace.json`` is answered
from memory, everything else from the static asset root. The resolver is
transport-agnostic; agents only translate ``OriginResponse`` into their own
fulfillment call.
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)

WORKDIR_ORIGIN = "http://workdir.local"
WORKSPACE_RESOURCE = "workspace.json"
ENTRY_RESOURCE = "export.html"

_CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json",
    ".svg": "image/svg+xml",
}


@dataclass(frozen=True)
class OriginResponse:
    """Response for one intercepted request."""

    status: int
    body: bytes = b""
    content_type: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


def content_type_for(name: str) -> str:
    """Infer a content type from a file name."""
    suffix = Path(name).suffix.lower()
    if suffix in _CONTENT_TYPES:
        return _CONTENT_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(name)
    return guessed or "application/octet-stream"


class VirtualOrigin:
    """
    In-memory workspace plus a static asset directory behind one origin.

    Example:
        >>> origin = VirtualOrigin(workspace_json, assets_root=STRUCTURIZR_ASSETS)
        >>> origin.resolve("http://workdir.local/workspace.json").status
        200
        >>> origin.resolve("http://workdir.local/../secret").status
        403
    """

    def __init__(
        self,
        workspace_json: str,
        assets_root: Path,
        *,
        origin: str = WORKDIR_ORIGIN,
        entry: str = ENTRY_RESOURCE,
    ) -> None:
        """
        Initialize the origin.

        Args:
            workspace_json: Workspace content served as ``workspace.json``
            assets_root: Directory holding the static assets
            origin: Scheme and host of the virtual origin (no trailing slash)
            entry: Entry resource the agent navigates to
        """
        self.workspace_json = workspace_json
        self.assets_root = Path(assets_root)
        self.origin = origin.rstrip("/")
        self.entry = entry

    @property
    def entry_url(self) -> str:
        """Absolute URL of the entry resource."""
        return f"{self.origin}/{self.entry}"

    def handles(self, url: str) -> bool:
        """True if ``url`` belongs to this origin (and must be intercepted)."""
        return url.startswith(self.origin + "/")

    def resolve(self, url: str) -> OriginResponse:
        """
        Resolve an intercepted request.

        Returns:
            200 with the workspace or asset, 403 for paths escaping the asset
            root, 404 for unknown paths, 500 on unexpected errors
        """
        try:
            path = unquote(urlsplit(url).path).lstrip("/")

            if path == WORKSPACE_RESOURCE or path.endswith("/" + WORKSPACE_RESOURCE):
                return OriginResponse(
                    status=200,
                    body=self.workspace_json.encode("utf-8"),
                    content_type="application/json",
                    headers={"Cache-Control": "no-cache"},
                )

            root = self.assets_root.resolve()
            candidate = (root / path).resolve()
            if not candidate.is_relative_to(root):
                logger.warning(f"Refusing request outside asset root: {url}")
                return OriginResponse(status=403)

            if not candidate.is_file():
                logger.debug(f"Not found on virtual origin: {url}")
                return OriginResponse(status=404)

            return OriginResponse(
                status=200,
                body=candidate.read_bytes(),
                content_type=content_type_for(candidate.name),
                headers={"Cache-Control": "no-cache"},
            )
        except Exception:
            logger.warning(f"Unable to serve {url}", exc_info=True)
            return OriginResponse(status=500)
