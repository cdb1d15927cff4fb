# Routes package init
"""
Blog Backend: API Routes Package
=================================

Route Inventory:
    - posts.py:   GET  /posts              (list posts, newest first, with authors)
                  POST /posts              (create a post)
                  GET  /posts/{id}         (single post with author)
    - health.py:  GET  /health             (service health check)

Routes stay thin: extract input, call PostGateway, return a response model.
Queries live in the gateway only.
"""
