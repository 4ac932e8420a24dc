"""Binary caches hosted on Cachix."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from urllib.parse import urlparse

_CACHIX_SUFFIX = ".cachix.org"


@dataclass(frozen=True)
class CachixCache:
    """A Cachix cache, identified by its name."""

    name: str

    @classmethod
    def from_url(cls, url: str) -> CachixCache | None:
        """Parse ``https://foo.cachix.org`` into the cache ``foo``.

        Returns ``None`` for URLs outside the Cachix domain.
        """
        host = urlparse(url).hostname
        if not host or not host.endswith(_CACHIX_SUFFIX):
            return None
        return cls(host.split(".")[0])

    def cachix_use(self) -> None:
        """Run ``cachix use`` for this cache."""
        cachix = os.environ.get("CACHIX_BIN", "cachix")
        status = subprocess.run([cachix, "use", self.name], check=False)
        if status.returncode != 0:
            raise RuntimeError(f"Failed to run `cachix use {self.name}`")