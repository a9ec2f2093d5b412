# Routes package init
"""
Tagboard Backend - API Routes Package
======================================

Route Inventory:
    - messages.py: /api/messages, /api/messages/{id}, /api/messages/{id}/tags
    - tags.py:     /api/tags, /api/tags/{id}
    - grads.py:    /api/grads, /api/grads/{id}, /api/grads/{id}/offers, /api/offers/{id}
    - health.py:   /health

Routes stay thin: parse the request, call a service, pick the status code.
"""
