"""Run record written next to rendered images, enough to re-render them."""
import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from mandelclick.renderers.cpu import RenderSettings
from mandelclick.viewport import Viewport

_PACKAGES = ("numpy", "Pillow", "pygame", "tqdm")

@dataclass(frozen=True)
class RunManifest:
    started_utc: str
    config: Dict[str, Any]
    settings: Dict[str, Any]
    history: List[Dict[str, Any]]
    render: Dict[str, Any]
    python: str
    packages: Dict[str, str]
    git_commit: Optional[str]
    platform: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

def _installed_versions() -> Dict[str, str]:
    pkgs = {}
    for name in _PACKAGES:
        try:
            pkgs[name] = importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            continue
    return pkgs

def build_manifest(
    *,
    config: Dict[str, Any],
    settings: RenderSettings,
    history: Sequence[Viewport],
    render_info: Dict[str, Any],
    git_commit: Optional[str],
) -> RunManifest:
    # history[0] is the base viewport; its length is the render depth.
    return RunManifest(
        started_utc=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        config=config,
        settings=asdict(settings),
        history=[vp.to_dict() for vp in history],
        render=render_info,
        python=sys.version.split()[0],
        packages=_installed_versions(),
        git_commit=git_commit,
        platform=platform.platform(),
    )

def write_manifest(path: str, manifest: RunManifest) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest.to_dict(), f, indent=2, sort_keys=True)
