"""WooCommerce Language Packs Server.

This package provides tools for:
- Polling GlotPress for translation changes of WooCommerce extensions
- Building language packs (zip files with .po and .mo files)
- Serving the language packs and the translations API
"""

__version__ = "1.0.0"
