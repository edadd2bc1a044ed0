"""
bookshelf_api.api.routers

HTTP routers: health probes, auth, and the v1/v2 book APIs.
"""
