"""证书模板编辑器."""

from certforge.utils.constants import APP_VERSION as __version__

__all__ = ["__version__"]
