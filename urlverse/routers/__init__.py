"""
Routers module - endpoint handlers organized by feature.

- api: JSON API for generation, flavors and visitor settings
- pages: Server-rendered home page and generated pages (catch-all)
"""
